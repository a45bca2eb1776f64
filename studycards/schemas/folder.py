from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, field_validator

from studycards.core.utils import clean_text, is_valid_uuid
from studycards.models.folder import FOLDER_NAME_MAX_LENGTH
from studycards.schemas.common import Pagination


class FolderCreate(BaseModel):
    name: str
    user_id: str

    @field_validator("name", mode="before")
    @classmethod
    def check_name(cls, value):
        return clean_text(value, "Folder name", FOLDER_NAME_MAX_LENGTH)

    @field_validator("user_id")
    @classmethod
    def check_user_id(cls, value):
        if not is_valid_uuid(value):
            raise ValueError("user_id must be a valid UUID")
        return value


class FolderUpdate(BaseModel):
    name: str

    @field_validator("name", mode="before")
    @classmethod
    def check_name(cls, value):
        return clean_text(value, "Folder name", FOLDER_NAME_MAX_LENGTH)


class FolderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    created_at: datetime
    updated_at: datetime


class FolderDetailsResponse(FolderResponse):
    flashcard_count: int


class FolderListData(BaseModel):
    folders: List[FolderResponse]
    pagination: Pagination


class FolderCreatedData(BaseModel):
    folder: FolderResponse


class FolderOverviewData(BaseModel):
    folders: List[FolderDetailsResponse]
