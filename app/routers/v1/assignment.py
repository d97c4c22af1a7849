import logging
from typing import Annotated
from fastapi import APIRouter, Depends, HTTPException, status, Response

from app.core.deps import get_repository
from app.core.errors import NotFoundError, StorageFault, ValidationError
from app.database.assignment_repo import AssignmentRepo
from app.schemas.assignment import AssignmentCreate, Assignment
from app.services.assignment_service import AssignmentService

logger = logging.getLogger(__name__)

router = APIRouter()

RepoDep = Annotated[AssignmentRepo, Depends(get_repository)]


@router.get("/assignments", response_model=list[Assignment], response_model_exclude_unset=True)
async def list_assignments_endpoint(repo: RepoDep):
    try:
        return await AssignmentService.list_assignments(repo)
    except StorageFault as e:
        logger.exception("Lettura assignment fallita")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/assignments", response_model=Assignment, status_code=status.HTTP_201_CREATED)
async def create_assignment_endpoint(assignment: AssignmentCreate, repo: RepoDep):
    try:
        return await AssignmentService.create_assignment(assignment, repo)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageFault as e:
        logger.exception("Creazione assignment fallita")
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/assignments/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_assignment_endpoint(assignment_id: str, repo: RepoDep):
    try:
        await AssignmentService.delete_assignment(assignment_id, repo)
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Assignment not found")
    except StorageFault as e:
        logger.exception("Cancellazione assignment %s fallita", assignment_id)
        raise HTTPException(status_code=500, detail=str(e))
