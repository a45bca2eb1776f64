from datetime import datetime
from typing import Annotated, List, Literal, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator

from studycards.core.utils import clean_text, is_valid_uuid
from studycards.models.flashcard import BACK_MAX_LENGTH, FRONT_MAX_LENGTH, GenerationSource
from studycards.schemas.common import Pagination

GENERATE_TEXT_MAX_LENGTH = 5000
BULK_SAVE_MAX_ITEMS = 50


def _check_folder_id(value):
    if not is_valid_uuid(value):
        raise ValueError("Folder ID must be a valid UUID")
    return value


FolderId = Annotated[str, AfterValidator(_check_folder_id)]


class FlashcardText(BaseModel):
    front: str
    back: str

    @field_validator("front", mode="before")
    @classmethod
    def check_front(cls, value):
        return clean_text(value, "Front text", FRONT_MAX_LENGTH)

    @field_validator("back", mode="before")
    @classmethod
    def check_back(cls, value):
        return clean_text(value, "Back text", BACK_MAX_LENGTH)


class FlashcardCreate(FlashcardText):
    folder_id: FolderId
    generation_source: GenerationSource


class FlashcardUpdate(FlashcardText):
    folder_id: Optional[FolderId] = None
    generation_source: GenerationSource


class FlashcardResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    front: str
    back: str
    folder_id: str
    generation_source: GenerationSource
    created_at: datetime
    updated_at: datetime


class FlashcardListData(BaseModel):
    flashcards: List[FlashcardResponse]
    pagination: Pagination


class StudyDeckData(BaseModel):
    flashcards: List[FlashcardResponse]


class GenerateFlashcardsRequest(BaseModel):
    text: str

    @field_validator("text", mode="before")
    @classmethod
    def check_text(cls, value):
        return clean_text(value, "Text", GENERATE_TEXT_MAX_LENGTH)


class FlashcardProposal(BaseModel):
    front: str
    back: str
    generation_source: Literal["ai"] = "ai"


class GenerateFlashcardsResponse(BaseModel):
    suggested_folder_name: str
    flashcards_proposals: List[FlashcardProposal]


class BulkSaveItem(FlashcardText):
    generation_source: Literal["ai"] = "ai"


class BulkSaveRequest(BaseModel):
    folder_id: FolderId
    flashcards: List[BulkSaveItem] = Field(..., min_length=1, max_length=BULK_SAVE_MAX_ITEMS)


class BulkSaveResult(BaseModel):
    saved_count: int
    flashcard_ids: List[str]
    message: str
