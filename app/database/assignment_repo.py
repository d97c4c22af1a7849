from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence
from app.schemas.assignment import Assignment
from app.schemas.submission import Submission

class AssignmentRepo(ABC):
    @abstractmethod
    async def create(self, assignment: Assignment) -> str:
        """Inserisce un assignment (id già generato nel service) e ritorna l'ID."""
        raise NotImplementedError

    @abstractmethod
    async def find_all(self) -> Sequence[Assignment]:
        """Ritorna tutti gli assignment, ordinati per dueDate decrescente."""
        raise NotImplementedError

    @abstractmethod
    async def find_one(self, assignment_id: str) -> Assignment | None:
        """Ritorna un assignment per ID, oppure None se non esiste."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, assignment_id: str) -> bool:
        """Cancella un assignment e le sue submission. Ritorna True se qualcosa è stato cancellato."""
        raise NotImplementedError

    @abstractmethod
    async def create_submission(self, submission: Submission) -> str:
        """Inserisce una submission e ritorna l'ID."""
        raise NotImplementedError

    @abstractmethod
    async def find_submissions(self) -> Sequence[Submission]:
        """Ritorna tutte le submission in ordine di inserimento."""
        raise NotImplementedError
