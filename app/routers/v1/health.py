from typing import Annotated
from fastapi import APIRouter, Depends

from app.core.deps import get_upload_placer
from app.services.upload_service import UploadPlacer

router = APIRouter()

@router.get("/assignments/health")
async def health_check(placer: Annotated[UploadPlacer, Depends(get_upload_placer)]):
    return {"status": "ok", "uploads": placer.upload_dir.is_dir()}
