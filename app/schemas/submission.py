from pathlib import Path
from typing import Any
from pydantic import BaseModel, ConfigDict


class StoredUpload(BaseModel):
    """File già scritto su disco dall'UploadPlacer."""
    file_path: Path
    file_name: str
    stored_name: str
    download_url: str


class Submission(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Any = None
    assignmentId: Any = None
    studentId: Any = None
    studentName: Any = None
    filePath: Any = None
    fileName: Any = None
    downloadUrl: Any = None
    submissionTime: Any = None
