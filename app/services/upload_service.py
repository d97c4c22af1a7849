# app/services/upload_service.py
import logging
import random
import shutil
import time
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import BinaryIO

from app.core.errors import StorageFault, ValidationError
from app.schemas.submission import StoredUpload

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


def stored_filename(original_name: str) -> str:
    """
    <millis>-<random 0..1e9>-<nome originale>.

    Il prefisso temporale mantiene l'ordine di upload nell'ordinamento
    lessicale; una collisione richiede stesso millisecondo e stesso numero
    casuale, nessun retry.
    """
    millis = time.time_ns() // 1_000_000
    return f"{millis}-{random.randint(0, 10**9)}-{original_name}"


def _base_name(original_name: str) -> str:
    # i browser su Windows a volte mandano il path completo
    return PureWindowsPath(PurePosixPath(original_name).name).name


class UploadPlacer:
    def __init__(self, upload_dir: str | Path, url_prefix: str = "/uploads"):
        self.upload_dir = Path(upload_dir)
        self.url_prefix = url_prefix.rstrip("/")

    def ensure_dir(self) -> Path:
        try:
            self.upload_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageFault(f"Cannot create upload dir {self.upload_dir}: {e}") from e
        return self.upload_dir

    def download_url(self, stored_name: str) -> str:
        return f"{self.url_prefix}/{stored_name}"

    def place(self, stream: BinaryIO, original_name: str) -> StoredUpload:
        name = _base_name(original_name or "")
        if not name:
            raise ValidationError("Uploaded file has no name")

        dest_dir = self.ensure_dir()
        stored_name = stored_filename(name)
        dest = dest_dir / stored_name
        try:
            with dest.open("wb") as out:
                shutil.copyfileobj(stream, out, CHUNK_SIZE)
        except OSError as e:
            # niente file a metà: la submission non verrà registrata
            dest.unlink(missing_ok=True)
            raise StorageFault(f"Cannot write upload {dest}: {e}") from e

        logger.info("Upload salvato: %s -> %s", name, dest)
        return StoredUpload(
            file_path=dest.resolve(),
            file_name=name,
            stored_name=stored_name,
            download_url=self.download_url(stored_name),
        )
