class TrackerError(Exception):
    """Errore base del core (store, repository, upload)."""


class ValidationError(TrackerError):
    """Campo obbligatorio mancante o vuoto in creazione."""


class NotFoundError(TrackerError):
    """L'id richiesto non esiste."""


class StorageFault(TrackerError):
    """Lettura/scrittura del documento o di un file caricato fallita."""
