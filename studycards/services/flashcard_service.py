import logging
import math
import random
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from studycards.core.errors import InternalError, InvalidArgumentError
from studycards.core.utils import clean_text, generate_uuid, require_uuid, utc_now
from studycards.models.flashcard import BACK_MAX_LENGTH, FRONT_MAX_LENGTH, Flashcard, GenerationSource
from studycards.schemas.common import Pagination
from studycards.schemas.flashcard import (
    BULK_SAVE_MAX_ITEMS,
    GENERATE_TEXT_MAX_LENGTH,
    BulkSaveResult,
    FlashcardResponse,
    GenerateFlashcardsResponse,
)
from studycards.services.generator import MockProposalGenerator, ProposalGenerator
from studycards.services.lookups import commit, get_owned_flashcard, get_owned_folder, run_query

logger = logging.getLogger(__name__)

SORTABLE_COLUMNS = {
    "created_at": Flashcard.created_at,
    "updated_at": Flashcard.updated_at,
    "front": Flashcard.front,
    "back": Flashcard.back,
}
SORT_ORDERS = ("asc", "desc")
STUDY_POOL_SIZE = 100
STUDY_DECK_SIZE = 20


def _card_text(front, back) -> Tuple[str, str]:
    return (
        clean_text(front, "Front text", FRONT_MAX_LENGTH),
        clean_text(back, "Back text", BACK_MAX_LENGTH),
    )


def _generation_source(value) -> GenerationSource:
    try:
        return GenerationSource(value)
    except ValueError:
        raise InvalidArgumentError("Generation source must be either 'manual' or 'ai'") from None


class FlashcardService:
    """Flashcard lifecycle for a single owner, plus proposal generation."""

    def __init__(self, db: AsyncSession, generator: ProposalGenerator = None):
        self.db = db
        self.generator = generator or MockProposalGenerator()

    async def generate_flashcards(self, text: str) -> GenerateFlashcardsResponse:
        text = clean_text(text, "Text", GENERATE_TEXT_MAX_LENGTH)
        return await self.generator.generate(text)

    async def get_flashcards(
        self,
        user_id: str,
        folder_id: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
        sort_by: str = "created_at",
        order: str = "desc",
    ) -> Tuple[List[FlashcardResponse], Pagination]:
        user_id = require_uuid(user_id, "user ID")
        if sort_by not in SORTABLE_COLUMNS:
            raise InvalidArgumentError("Sort by must be one of: " + ", ".join(SORTABLE_COLUMNS))
        if order not in SORT_ORDERS:
            raise InvalidArgumentError("Order must be either 'asc' or 'desc'")
        if page < 1 or limit < 1:
            raise InvalidArgumentError("Page and limit must be positive integers")

        conditions = [Flashcard.user_id == user_id]
        if folder_id is not None:
            folder_id = require_uuid(folder_id, "folder ID")
            await get_owned_folder(self.db, folder_id, user_id)
            conditions.append(Flashcard.folder_id == folder_id)

        count_result = await run_query(
            self.db,
            select(func.count()).select_from(Flashcard).where(*conditions),
            "Failed to retrieve flashcards from database",
        )
        total = count_result.scalar_one() or 0
        pagination = Pagination(page=page, limit=limit, total=total, totalPages=math.ceil(total / limit))
        offset = (page - 1) * limit
        if offset >= total:
            return [], pagination

        column = SORTABLE_COLUMNS[sort_by]
        result = await run_query(
            self.db,
            select(Flashcard)
            .where(*conditions)
            .order_by(column.asc() if order == "asc" else column.desc(), Flashcard.id)
            .offset(offset)
            .limit(limit),
            "Failed to retrieve flashcards from database",
        )
        flashcards = [FlashcardResponse.model_validate(c) for c in result.scalars().all()]
        return flashcards, pagination

    async def get_flashcard_by_id(self, flashcard_id: str, user_id: str) -> FlashcardResponse:
        flashcard_id = require_uuid(flashcard_id, "flashcard ID")
        user_id = require_uuid(user_id, "user ID")
        flashcard = await get_owned_flashcard(self.db, flashcard_id, user_id)
        return FlashcardResponse.model_validate(flashcard)

    async def create_flashcard(self, front: str, back: str, folder_id: str, generation_source, user_id: str) -> FlashcardResponse:
        folder_id = require_uuid(folder_id, "folder ID")
        user_id = require_uuid(user_id, "user ID")
        front, back = _card_text(front, back)
        source = _generation_source(generation_source)

        await get_owned_folder(self.db, folder_id, user_id)

        flashcard = Flashcard(
            id=generate_uuid(),
            front=front,
            back=back,
            folder_id=folder_id,
            generation_source=source,
            user_id=user_id,
        )
        self.db.add(flashcard)
        await commit(self.db, "Failed to create flashcard in database")
        logger.info("Created flashcard %s in folder %s", flashcard.id, folder_id)
        return FlashcardResponse.model_validate(flashcard)

    async def update_flashcard(
        self,
        flashcard_id: str,
        user_id: str,
        front: str,
        back: str,
        generation_source,
        folder_id: Optional[str] = None,
    ) -> FlashcardResponse:
        flashcard_id = require_uuid(flashcard_id, "flashcard ID")
        user_id = require_uuid(user_id, "user ID")
        front, back = _card_text(front, back)
        source = _generation_source(generation_source)

        flashcard = await get_owned_flashcard(self.db, flashcard_id, user_id)

        values = {"front": front, "back": back, "generation_source": source, "updated_at": utc_now()}
        if folder_id is not None:
            folder_id = require_uuid(folder_id, "folder ID")
            if folder_id != flashcard.folder_id:
                await get_owned_folder(self.db, folder_id, user_id)
            values["folder_id"] = folder_id

        await run_query(
            self.db,
            update(Flashcard).where(Flashcard.id == flashcard_id, Flashcard.user_id == user_id).values(**values),
            "Failed to update flashcard in database",
        )
        await commit(self.db, "Failed to update flashcard in database")
        await self.db.refresh(flashcard)
        return FlashcardResponse.model_validate(flashcard)

    async def delete_flashcard(self, flashcard_id: str, user_id: str) -> None:
        flashcard_id = require_uuid(flashcard_id, "flashcard ID")
        user_id = require_uuid(user_id, "user ID")

        await get_owned_flashcard(self.db, flashcard_id, user_id)
        await run_query(
            self.db,
            delete(Flashcard).where(Flashcard.id == flashcard_id, Flashcard.user_id == user_id),
            "Failed to delete flashcard from database",
        )
        await commit(self.db, "Failed to delete flashcard from database")
        logger.info("Deleted flashcard %s", flashcard_id)

    async def bulk_save_flashcards(self, folder_id: str, flashcards: Iterable, user_id: str) -> BulkSaveResult:
        """Insert accepted proposals into one folder in a single transaction.

        ``flashcards`` holds objects or mappings with ``front`` and ``back``;
        every row is stored with the ``ai`` generation source.
        """
        folder_id = require_uuid(folder_id, "folder ID")
        user_id = require_uuid(user_id, "user ID")

        items = list(flashcards)
        if not items:
            raise InvalidArgumentError("At least one flashcard must be provided")
        if len(items) > BULK_SAVE_MAX_ITEMS:
            raise InvalidArgumentError(f"Cannot save more than {BULK_SAVE_MAX_ITEMS} flashcards at once")
        texts = [_card_text(*_front_back(item)) for item in items]

        folder = await get_owned_folder(self.db, folder_id, user_id)

        rows = [
            Flashcard(
                id=generate_uuid(),
                front=front,
                back=back,
                folder_id=folder_id,
                generation_source=GenerationSource.ai,
                user_id=user_id,
            )
            for front, back in texts
        ]
        self.db.add_all(rows)
        try:
            await self.db.commit()
        except SQLAlchemyError as exc:
            logger.error("Failed to save flashcards to folder %s: %s", folder_id, exc, exc_info=True)
            await self.db.rollback()
            raise InternalError("Failed to save flashcards to database") from exc

        saved_count = len(rows)
        logger.info("Saved %d flashcards to folder %s", saved_count, folder_id)
        return BulkSaveResult(
            saved_count=saved_count,
            flashcard_ids=[row.id for row in rows],
            message=f'Successfully saved {saved_count} flashcard{"s" if saved_count > 1 else ""} to folder "{folder.name}"',
        )

    async def draw_study_deck(self, folder_id: str, user_id: str, size: int = STUDY_DECK_SIZE) -> List[FlashcardResponse]:
        """A shuffled selection of at most ``size`` cards from one folder."""
        folder_id = require_uuid(folder_id, "folder ID")
        user_id = require_uuid(user_id, "user ID")
        if size < 1:
            raise InvalidArgumentError("Deck size must be a positive integer")

        await get_owned_folder(self.db, folder_id, user_id)
        result = await run_query(
            self.db,
            select(Flashcard)
            .where(Flashcard.folder_id == folder_id, Flashcard.user_id == user_id)
            .order_by(Flashcard.created_at.desc())
            .limit(STUDY_POOL_SIZE),
            "Failed to retrieve flashcards from database",
        )
        pool = [FlashcardResponse.model_validate(c) for c in result.scalars().all()]
        random.shuffle(pool)
        return pool[:size]


def _front_back(item) -> Tuple[str, str]:
    if isinstance(item, dict):
        return item.get("front"), item.get("back")
    return getattr(item, "front", None), getattr(item, "back", None)
