from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from studycards.core.database import get_db
from studycards.core.security import get_current_user
from studycards.schemas.common import Envelope
from studycards.schemas.flashcard import (
    BulkSaveRequest,
    BulkSaveResult,
    FlashcardCreate,
    FlashcardListData,
    FlashcardResponse,
    FlashcardUpdate,
    GenerateFlashcardsRequest,
    GenerateFlashcardsResponse,
    StudyDeckData,
)
from studycards.services.flashcard_service import STUDY_DECK_SIZE, FlashcardService
from studycards.services.generator import MockProposalGenerator, ProposalGenerator

router = APIRouter()

_GENERATOR = MockProposalGenerator()


def get_generator() -> ProposalGenerator:
    return _GENERATOR


def get_flashcard_service(
    db: AsyncSession = Depends(get_db),
    generator: ProposalGenerator = Depends(get_generator),
) -> FlashcardService:
    return FlashcardService(db, generator)


@router.get("", response_model=Envelope[FlashcardListData], response_model_exclude_none=True)
async def list_flashcards(
    folderId: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    sortBy: Literal["created_at", "updated_at", "front", "back"] = Query("created_at"),
    order: Literal["asc", "desc"] = Query("desc"),
    current_user=Depends(get_current_user),
    service: FlashcardService = Depends(get_flashcard_service),
):
    flashcards, pagination = await service.get_flashcards(
        current_user.id, folder_id=folderId, page=page, limit=limit, sort_by=sortBy, order=order
    )
    return {"success": True, "data": {"flashcards": flashcards, "pagination": pagination}}


@router.post("", status_code=201, response_model=Envelope[FlashcardResponse], response_model_exclude_none=True)
async def create_flashcard(
    payload: FlashcardCreate,
    current_user=Depends(get_current_user),
    service: FlashcardService = Depends(get_flashcard_service),
):
    flashcard = await service.create_flashcard(
        payload.front, payload.back, payload.folder_id, payload.generation_source, current_user.id
    )
    return {"success": True, "data": flashcard, "message": "Flashcard created successfully"}


@router.post("/generate", response_model=Envelope[GenerateFlashcardsResponse], response_model_exclude_none=True)
async def generate_flashcards(
    payload: GenerateFlashcardsRequest,
    service: FlashcardService = Depends(get_flashcard_service),
):
    result = await service.generate_flashcards(payload.text)
    return {"success": True, "data": result}


@router.post("/bulk-save", status_code=201, response_model=Envelope[BulkSaveResult], response_model_exclude_none=True)
async def bulk_save_flashcards(
    payload: BulkSaveRequest,
    current_user=Depends(get_current_user),
    service: FlashcardService = Depends(get_flashcard_service),
):
    result = await service.bulk_save_flashcards(payload.folder_id, payload.flashcards, current_user.id)
    return {"success": True, "data": result, "message": result.message}


@router.get("/study", response_model=Envelope[StudyDeckData], response_model_exclude_none=True)
async def study_deck(
    folderId: str = Query(...),
    size: int = Query(STUDY_DECK_SIZE, ge=1, le=100),
    current_user=Depends(get_current_user),
    service: FlashcardService = Depends(get_flashcard_service),
):
    flashcards = await service.draw_study_deck(folderId, current_user.id, size=size)
    return {"success": True, "data": {"flashcards": flashcards}}


@router.get("/{flashcard_id}", response_model=Envelope[FlashcardResponse], response_model_exclude_none=True)
async def get_flashcard(
    flashcard_id: str,
    current_user=Depends(get_current_user),
    service: FlashcardService = Depends(get_flashcard_service),
):
    flashcard = await service.get_flashcard_by_id(flashcard_id, current_user.id)
    return {"success": True, "data": flashcard}


@router.put("/{flashcard_id}", response_model=Envelope[FlashcardResponse], response_model_exclude_none=True)
async def update_flashcard(
    flashcard_id: str,
    payload: FlashcardUpdate,
    current_user=Depends(get_current_user),
    service: FlashcardService = Depends(get_flashcard_service),
):
    flashcard = await service.update_flashcard(
        flashcard_id,
        current_user.id,
        payload.front,
        payload.back,
        payload.generation_source,
        folder_id=payload.folder_id,
    )
    return {"success": True, "data": flashcard, "message": "Flashcard updated successfully"}


@router.delete("/{flashcard_id}", response_model=Envelope, response_model_exclude_none=True)
async def delete_flashcard(
    flashcard_id: str,
    current_user=Depends(get_current_user),
    service: FlashcardService = Depends(get_flashcard_service),
):
    await service.delete_flashcard(flashcard_id, current_user.id)
    return {"success": True, "message": "Flashcard deleted successfully"}
