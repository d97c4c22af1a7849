import logging
import threading
import time
from datetime import datetime, timezone
from typing import Optional, Sequence

from app.core.errors import NotFoundError, ValidationError
from app.database.assignment_repo import AssignmentRepo
from app.schemas.assignment import Assignment, AssignmentCreate
from app.schemas.submission import StoredUpload, Submission
from app.services.identity_service import IdentityProvider

logger = logging.getLogger(__name__)

_id_lock = threading.Lock()
_last_millis = 0


def _next_millis() -> int:
    # millisecondi strettamente crescenti nel processo: due create nello
    # stesso millisecondo non producono lo stesso id
    global _last_millis
    with _id_lock:
        now = time.time_ns() // 1_000_000
        _last_millis = max(now, _last_millis + 1)
        return _last_millis


def create_assignment_id() -> str:
    return f"id-{_next_millis()}"


def create_submission_id() -> str:
    return f"sub-{_next_millis()}"


def utc_now_iso() -> str:
    # stesso formato di Date.toISOString(): millisecondi + "Z"
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _blank(value: Optional[str]) -> bool:
    # come !title: solo None e stringa vuota, gli spazi sono accettati
    return value is None or value == ""


class AssignmentService:

    @staticmethod
    async def list_assignments(repo: AssignmentRepo) -> Sequence[Assignment]:
        return await repo.find_all()

    @staticmethod
    async def list_submissions(repo: AssignmentRepo) -> Sequence[Submission]:
        return await repo.find_submissions()

    @staticmethod
    async def create_assignment(data: AssignmentCreate, repo: AssignmentRepo) -> Assignment:
        if _blank(data.title) or _blank(data.dueDate):
            raise ValidationError("title and dueDate are required")

        assignment = Assignment(
            id=create_assignment_id(),
            title=data.title,
            description=data.description,
            dueDate=data.dueDate,
            createdAt=utc_now_iso(),
        )
        await repo.create(assignment)
        logger.info("Assignment creato: %s (%s)", assignment.id, assignment.title)
        return assignment

    @staticmethod
    def check_submission_fields(assignment_id: Optional[str], student_name: Optional[str]) -> None:
        """Da chiamare prima di scrivere il file, così un form incompleto non lascia file orfani."""
        if _blank(assignment_id) or _blank(student_name):
            raise ValidationError("assignmentId, studentName and a file are required")

    @staticmethod
    async def create_submission(
        assignment_id: Optional[str],
        student_name: Optional[str],
        upload: Optional[StoredUpload],
        repo: AssignmentRepo,
        identity: IdentityProvider,
    ) -> Submission:
        AssignmentService.check_submission_fields(assignment_id, student_name)
        if upload is None:
            raise ValidationError("assignmentId, studentName and a file are required")

        # assignmentId non viene verificato contro gli assignment esistenti
        submission = Submission(
            id=create_submission_id(),
            assignmentId=assignment_id,
            studentId=identity.student_id(student_name),
            studentName=student_name,
            filePath=str(upload.file_path),
            fileName=upload.file_name,
            downloadUrl=upload.download_url,
            submissionTime=utc_now_iso(),
        )
        await repo.create_submission(submission)
        logger.info("Submission creata: %s per assignment %s", submission.id, assignment_id)
        return submission

    @staticmethod
    async def delete_assignment(assignment_id: str, repo: AssignmentRepo) -> None:
        """
        Cancella l'assignment e, a cascata, le sue submission.
        I file caricati restano in uploads/.
        """
        deleted = await repo.delete(assignment_id)
        if not deleted:
            raise NotFoundError(f"Assignment {assignment_id} not found")
        logger.info("Assignment %s e relative submission cancellati", assignment_id)
