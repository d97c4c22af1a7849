# app/database/json_assignment.py
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from starlette.concurrency import run_in_threadpool

from app.database.assignment_repo import AssignmentRepo
from app.database.document_store import Document, DocumentStore
from app.schemas.assignment import Assignment
from app.schemas.submission import Submission


def _due_key(assignment: Assignment) -> float:
    # dueDate non interpretabile -> in fondo alla lista
    raw = assignment.dueDate
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        # come new Date(numero): millisecondi dall'epoch
        return raw / 1000
    if not isinstance(raw, str):
        return float("-inf")
    raw = raw.strip()
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"
    try:
        ts = datetime.fromisoformat(raw)
    except ValueError:
        return float("-inf")
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.timestamp()


class JsonAssignmentRepository(AssignmentRepo):
    """
    Ogni operazione: store.load() -> modifica in memoria -> store.save().
    Nessuno stato tra una chiamata e l'altra, nessun lock (last write wins).
    Load e save girano nel threadpool per non bloccare l'event loop.
    """

    def __init__(self, store: DocumentStore):
        self.store = store

    async def _load(self) -> Document:
        return await run_in_threadpool(self.store.load)

    async def _save(self, doc: Document) -> None:
        await run_in_threadpool(self.store.save, doc)

    def _from_doc(self, d: dict) -> Assignment:
        return Assignment(**d)

    def _to_doc_from_model(self, a: Assignment) -> dict:
        return a.model_dump()

    async def create(self, assignment: Assignment) -> str:
        """
        Inserisce un Assignment completo (con id già generato nel service).
        """
        doc = await self._load()
        doc["assignments"].append(self._to_doc_from_model(assignment))
        await self._save(doc)
        return assignment.id

    async def find_all(self) -> Sequence[Assignment]:
        doc = await self._load()
        items: List[Assignment] = [self._from_doc(d) for d in doc["assignments"]]
        # sort stabile: a parità di dueDate resta l'ordine di inserimento
        return sorted(items, key=_due_key, reverse=True)

    async def find_one(self, assignment_id: str) -> Optional[Assignment]:
        doc = await self._load()
        for d in doc["assignments"]:
            if d.get("id") == assignment_id:
                return self._from_doc(d)
        return None

    async def delete(self, assignment_id: str) -> bool:
        doc = await self._load()
        remaining = [d for d in doc["assignments"] if d.get("id") != assignment_id]
        if len(remaining) == len(doc["assignments"]):
            return False

        doc["assignments"] = remaining
        # cascade: via anche le submission collegate (i file in uploads/ restano)
        doc["submissions"] = [
            s for s in doc["submissions"] if s.get("assignmentId") != assignment_id
        ]
        await self._save(doc)
        return True

    async def create_submission(self, submission: Submission) -> str:
        doc = await self._load()
        doc["submissions"].append(submission.model_dump())
        await self._save(doc)
        return submission.id

    async def find_submissions(self) -> Sequence[Submission]:
        doc = await self._load()
        return [Submission(**d) for d in doc["submissions"]]
