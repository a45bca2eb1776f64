from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from studycards.core.database import get_db
from studycards.schemas.common import Envelope
from studycards.schemas.folder import (
    FolderCreate,
    FolderCreatedData,
    FolderDetailsResponse,
    FolderListData,
    FolderOverviewData,
    FolderResponse,
    FolderUpdate,
)
from studycards.services.folder_service import FolderService

router = APIRouter()

# TODO: bind user_id to the bearer token once the folder endpoints move behind get_current_user


def get_folder_service(db: AsyncSession = Depends(get_db)) -> FolderService:
    return FolderService(db)


@router.get("", response_model=Envelope[FolderListData], response_model_exclude_none=True)
async def list_folders(
    user_id: str = Query(...),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    service: FolderService = Depends(get_folder_service),
):
    folders, pagination = await service.get_user_folders(user_id, page=page, limit=limit)
    return {"success": True, "data": {"folders": folders, "pagination": pagination}}


@router.get("/overview", response_model=Envelope[FolderOverviewData], response_model_exclude_none=True)
async def folder_overview(user_id: str = Query(...), service: FolderService = Depends(get_folder_service)):
    folders = await service.list_folder_overview(user_id)
    return {"success": True, "data": {"folders": folders}}


@router.post("", status_code=201, response_model=Envelope[FolderCreatedData], response_model_exclude_none=True)
async def create_folder(payload: FolderCreate, service: FolderService = Depends(get_folder_service)):
    folder = await service.create_folder(payload.name, payload.user_id)
    return {"success": True, "data": {"folder": folder}, "message": "Folder created successfully"}


@router.get("/{folder_id}", response_model=Envelope[FolderDetailsResponse], response_model_exclude_none=True)
async def get_folder(folder_id: str, user_id: str = Query(...), service: FolderService = Depends(get_folder_service)):
    details = await service.get_folder_details(folder_id, user_id)
    return {"success": True, "data": details}


@router.put("/{folder_id}", response_model=Envelope[FolderResponse], response_model_exclude_none=True)
async def update_folder(
    folder_id: str,
    payload: FolderUpdate,
    user_id: str = Query(...),
    service: FolderService = Depends(get_folder_service),
):
    folder = await service.update_folder(folder_id, user_id, payload.name)
    return {"success": True, "data": folder, "message": "Folder updated successfully"}


@router.delete("/{folder_id}", response_model=Envelope, response_model_exclude_none=True)
async def delete_folder(folder_id: str, user_id: str = Query(...), service: FolderService = Depends(get_folder_service)):
    await service.delete_folder(folder_id, user_id)
    return {"success": True, "message": "Folder deleted successfully"}
