import logging
from typing import Annotated, Optional
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from starlette.concurrency import run_in_threadpool

from app.core.deps import get_identity_provider, get_repository, get_upload_placer
from app.core.errors import StorageFault, ValidationError
from app.database.assignment_repo import AssignmentRepo
from app.schemas.submission import Submission
from app.services.assignment_service import AssignmentService
from app.services.identity_service import IdentityProvider
from app.services.upload_service import UploadPlacer

logger = logging.getLogger(__name__)

router = APIRouter()

RepoDep = Annotated[AssignmentRepo, Depends(get_repository)]
PlacerDep = Annotated[UploadPlacer, Depends(get_upload_placer)]
IdentityDep = Annotated[IdentityProvider, Depends(get_identity_provider)]


@router.get("/submissions", response_model=list[Submission], response_model_exclude_unset=True)
async def list_submissions_endpoint(repo: RepoDep):
    try:
        return await AssignmentService.list_submissions(repo)
    except StorageFault as e:
        logger.exception("Lettura submission fallita")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/submissions", response_model=Submission, status_code=status.HTTP_201_CREATED)
async def create_submission_endpoint(
    repo: RepoDep,
    placer: PlacerDep,
    identity: IdentityDep,
    assignmentId: Optional[str] = Form(None),
    studentName: Optional[str] = Form(None),
    submissionFile: Optional[UploadFile] = File(None),
):
    try:
        AssignmentService.check_submission_fields(assignmentId, studentName)
        # prima il file su disco, poi il record: un upload fallito non registra nulla
        upload = None
        if submissionFile is not None:
            # copia su disco nel threadpool: un file grosso non blocca l'event loop
            upload = await run_in_threadpool(placer.place, submissionFile.file, submissionFile.filename)
        return await AssignmentService.create_submission(
            assignmentId, studentName, upload, repo, identity
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageFault as e:
        logger.exception("Creazione submission fallita")
        raise HTTPException(status_code=500, detail=str(e))
    finally:
        if submissionFile is not None:
            await submissionFile.close()
