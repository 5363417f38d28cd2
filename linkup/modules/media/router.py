from fastapi import APIRouter, Depends

from .service import MediaService, get_media_service

router = APIRouter()


@router.get("/{path:path}")
def serve_media(path: str, media_service: MediaService = Depends(get_media_service)):
    """Serve uploaded media when no public bucket URL is configured"""
    return media_service.get_media(path)
