"""Ownership-scoped lookups shared by the folder and flashcard services.

Every lookup filters on the entity id *and* the owner id in a single query, so
a row owned by somebody else is indistinguishable from a missing one.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from studycards.core.errors import InternalError, NotFoundError
from studycards.models.flashcard import Flashcard
from studycards.models.folder import Folder

logger = logging.getLogger(__name__)

FOLDER_NOT_FOUND = "Folder not found or access denied"
FLASHCARD_NOT_FOUND = "Flashcard not found or access denied"


async def run_query(db: AsyncSession, statement, failure_message: str):
    """Execute ``statement`` and turn driver failures into ``InternalError``."""
    try:
        return await db.execute(statement)
    except SQLAlchemyError as exc:
        logger.error("%s: %s", failure_message, exc, exc_info=True)
        await db.rollback()
        raise InternalError(failure_message) from exc


async def get_owned_folder(db: AsyncSession, folder_id: str, user_id: str) -> Folder:
    result = await run_query(
        db,
        select(Folder).where(Folder.id == folder_id, Folder.user_id == user_id),
        "Failed to retrieve folder from database",
    )
    folder = result.scalars().first()
    if folder is None:
        logger.debug("Folder %s not found for user %s", folder_id, user_id)
        raise NotFoundError(FOLDER_NOT_FOUND)
    return folder


async def get_owned_flashcard(db: AsyncSession, flashcard_id: str, user_id: str) -> Flashcard:
    result = await run_query(
        db,
        select(Flashcard).where(Flashcard.id == flashcard_id, Flashcard.user_id == user_id),
        "Failed to retrieve flashcard from database",
    )
    flashcard = result.scalars().first()
    if flashcard is None:
        logger.debug("Flashcard %s not found for user %s", flashcard_id, user_id)
        raise NotFoundError(FLASHCARD_NOT_FOUND)
    return flashcard


async def commit(db: AsyncSession, failure_message: str):
    try:
        await db.commit()
    except SQLAlchemyError as exc:
        logger.error("%s: %s", failure_message, exc, exc_info=True)
        await db.rollback()
        raise InternalError(failure_message) from exc
