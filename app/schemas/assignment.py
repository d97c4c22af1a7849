from pydantic import BaseModel, ConfigDict
from typing import Any, Optional


class AssignmentCreate(BaseModel):
    # opzionali qui: la validazione vera la fa il service (ValidationError -> 400)
    title: Optional[str] = None
    description: Optional[str] = None
    dueDate: Optional[str] = None


class Assignment(BaseModel):
    # i record letti dal documento tornano così come sono: niente tipi stretti
    model_config = ConfigDict(extra="allow")

    id: Any = None
    title: Any = None
    description: Any = None
    dueDate: Any = None
    createdAt: Any = None
