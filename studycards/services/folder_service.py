import logging
import math
from typing import List, Tuple

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from studycards.core.errors import ConflictError, InternalError, StudyCardsError
from studycards.core.utils import clean_text, generate_uuid, require_uuid, utc_now
from studycards.models.flashcard import Flashcard
from studycards.models.folder import FOLDER_NAME_MAX_LENGTH, Folder
from studycards.schemas.common import Pagination
from studycards.schemas.folder import FolderDetailsResponse, FolderResponse
from studycards.services.lookups import commit, get_owned_folder, run_query

logger = logging.getLogger(__name__)

DUPLICATE_NAME = "A folder with this name already exists"
OVERVIEW_LIMIT = 50


class FolderService:
    """Folder lifecycle operations, always scoped to a single owner.

    Name uniqueness per owner is enforced by the ``uq_folders_user_id_name``
    constraint; the pre-checks below only exist to report a friendly
    ``ConflictError`` before the insert is attempted.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_folders(self, user_id: str, page: int = 1, limit: int = 10) -> Tuple[List[FolderResponse], Pagination]:
        user_id = require_uuid(user_id, "user ID")
        offset = (page - 1) * limit

        count_result = await run_query(
            self.db,
            select(func.count()).select_from(Folder).where(Folder.user_id == user_id),
            "Failed to retrieve folders from database",
        )
        total = count_result.scalar_one() or 0
        pagination = Pagination(page=page, limit=limit, total=total, totalPages=math.ceil(total / limit))
        # past the last page; the offset may not even fit the store's integer type
        if offset >= total:
            return [], pagination

        result = await run_query(
            self.db,
            select(Folder)
            .where(Folder.user_id == user_id)
            .order_by(Folder.created_at.desc(), Folder.id)
            .offset(offset)
            .limit(limit),
            "Failed to retrieve folders from database",
        )
        folders = [FolderResponse.model_validate(f) for f in result.scalars().all()]
        return folders, pagination

    async def get_folder_details(self, folder_id: str, user_id: str) -> FolderDetailsResponse:
        folder_id = require_uuid(folder_id, "folder ID")
        user_id = require_uuid(user_id, "user ID")

        folder = await get_owned_folder(self.db, folder_id, user_id)
        count_result = await run_query(
            self.db,
            select(func.count())
            .select_from(Flashcard)
            .where(Flashcard.folder_id == folder_id, Flashcard.user_id == user_id),
            "Failed to retrieve flashcard count from database",
        )
        return FolderDetailsResponse(
            id=folder.id,
            name=folder.name,
            created_at=folder.created_at,
            updated_at=folder.updated_at,
            flashcard_count=count_result.scalar_one() or 0,
        )

    async def create_folder(self, name: str, user_id: str) -> FolderResponse:
        user_id = require_uuid(user_id, "user ID")
        name = clean_text(name, "Folder name", FOLDER_NAME_MAX_LENGTH)

        if await self._name_taken(user_id, name):
            logger.info("Rejected duplicate folder name for user %s", user_id)
            raise ConflictError(DUPLICATE_NAME)

        folder = Folder(id=generate_uuid(), name=name, user_id=user_id)
        self.db.add(folder)
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            await self._raise_for_integrity_error(exc, user_id, name, "Failed to create folder in database")
        except SQLAlchemyError as exc:
            logger.error("Failed to create folder: %s", exc, exc_info=True)
            await self.db.rollback()
            raise InternalError("Failed to create folder in database") from exc

        logger.info("Created folder %s for user %s", folder.id, user_id)
        return FolderResponse.model_validate(folder)

    async def update_folder(self, folder_id: str, user_id: str, name: str) -> FolderResponse:
        folder_id = require_uuid(folder_id, "folder ID")
        user_id = require_uuid(user_id, "user ID")
        name = clean_text(name, "Folder name", FOLDER_NAME_MAX_LENGTH)

        folder = await get_owned_folder(self.db, folder_id, user_id)
        if folder.name == name:
            return FolderResponse.model_validate(folder)

        if await self._name_taken(user_id, name, exclude_id=folder_id):
            logger.info("Rejected rename of folder %s to a duplicate name", folder_id)
            raise ConflictError(DUPLICATE_NAME)

        try:
            await self.db.execute(
                update(Folder)
                .where(Folder.id == folder_id, Folder.user_id == user_id)
                .values(name=name, updated_at=utc_now())
            )
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            await self._raise_for_integrity_error(exc, user_id, name, "Failed to update folder in database")
        except SQLAlchemyError as exc:
            logger.error("Failed to update folder %s: %s", folder_id, exc, exc_info=True)
            await self.db.rollback()
            raise InternalError("Failed to update folder in database") from exc

        await self.db.refresh(folder)
        return FolderResponse.model_validate(folder)

    async def delete_folder(self, folder_id: str, user_id: str) -> None:
        folder_id = require_uuid(folder_id, "folder ID")
        user_id = require_uuid(user_id, "user ID")

        await get_owned_folder(self.db, folder_id, user_id)
        # flashcards are removed by the store's ON DELETE CASCADE
        await run_query(
            self.db,
            delete(Folder).where(Folder.id == folder_id, Folder.user_id == user_id),
            "Failed to delete folder from database",
        )
        await commit(self.db, "Failed to delete folder from database")
        logger.info("Deleted folder %s for user %s", folder_id, user_id)

    async def list_folder_overview(self, user_id: str, limit: int = OVERVIEW_LIMIT) -> List[FolderDetailsResponse]:
        """Folders with their flashcard counts, as shown on the dashboard.

        Each folder's count is fetched on its own; if that fails the folder is
        still listed, with a count of zero.
        """
        folders, _ = await self.get_user_folders(user_id, page=1, limit=limit)
        overview = []
        for folder in folders:
            try:
                details = await self.get_folder_details(folder.id, user_id)
            except StudyCardsError as exc:
                logger.warning("Failed to fetch details for folder %s: %s", folder.id, exc.message)
                details = FolderDetailsResponse(**folder.model_dump(), flashcard_count=0)
            overview.append(details)
        return overview

    async def _name_taken(self, user_id: str, name: str, exclude_id: str = None) -> bool:
        q = select(Folder.id).where(Folder.user_id == user_id, Folder.name == name)
        if exclude_id is not None:
            q = q.where(Folder.id != exclude_id)
        result = await run_query(self.db, q, "Failed to validate folder name uniqueness")
        return result.first() is not None

    async def _raise_for_integrity_error(self, exc, user_id, name, failure_message):
        # a concurrent request may have claimed the name between check and write
        if await self._name_taken(user_id, name):
            logger.info("Folder name collision for user %s caught by constraint", user_id)
            raise ConflictError(DUPLICATE_NAME) from exc
        logger.error("%s: %s", failure_message, exc, exc_info=True)
        raise InternalError(failure_message) from exc
