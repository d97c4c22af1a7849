# app/database/document_store.py
from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List

from app.core.errors import StorageFault

logger = logging.getLogger(__name__)

Document = Dict[str, List[Dict[str, Any]]]

COLLECTIONS = ("assignments", "submissions")


def empty_document() -> Document:
    return {name: [] for name in COLLECTIONS}


def _check_collection(name: str, records: Any) -> None:
    if not isinstance(records, list):
        raise ValueError(f"{name!r} is not a list")
    if not all(isinstance(r, dict) for r in records):
        raise ValueError(f"{name!r} contains non-object records")


class DocumentStore(ABC):
    @abstractmethod
    def load(self) -> Document:
        """Ritorna l'intero documento (assignments + submissions)."""
        raise NotImplementedError

    @abstractmethod
    def save(self, doc: Document) -> None:
        """Sovrascrive l'intero documento."""
        raise NotImplementedError

    def ensure_ready(self) -> None:
        self.load()


class JsonFileDocumentStore(DocumentStore):
    """
    Un singolo file JSON come unica fonte di verità.

    File assente -> creato con il template vuoto.
    File vuoto, non parsabile o con collezioni che non sono liste di oggetti ->
    sovrascritto con il template vuoto (perdita totale, nessun recupero parziale).
    Errori di I/O (permessi, disco pieno) -> StorageFault, nessun retry.

    Nessun lock: load -> modifica -> save concorrenti sono "last write wins".
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> Document:
        try:
            if not self.path.exists():
                return self._reset()
            raw = self.path.read_bytes()
        except OSError as e:
            raise StorageFault(f"Cannot read {self.path}: {e}") from e

        try:
            text = raw.decode("utf-8")
            if not text.strip():
                raise ValueError("empty document")
            doc = json.loads(text)
            if not isinstance(doc, dict):
                raise ValueError(f"expected a JSON object, got {type(doc).__name__}")
            for name in COLLECTIONS:
                _check_collection(name, doc.setdefault(name, []))
        except ValueError as e:
            # JSONDecodeError e UnicodeDecodeError sono sottoclassi di ValueError
            logger.warning("Documento %s illeggibile, reset al template vuoto: %s", self.path, e)
            return self._reset()

        return doc

    def save(self, doc: Document) -> None:
        payload = json.dumps(doc, indent=2, ensure_ascii=False)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(payload, encoding="utf-8")
        except OSError as e:
            raise StorageFault(f"Cannot write {self.path}: {e}") from e

    def _reset(self) -> Document:
        doc = empty_document()
        self.save(doc)
        return doc
