from fastapi import Request
from app.database.assignment_repo import AssignmentRepo
from app.services.identity_service import IdentityProvider
from app.services.upload_service import UploadPlacer

def get_repository(request: Request) -> AssignmentRepo:
    repo = getattr(request.app.state, "assignment_repo", None)
    if repo is None:
        raise RuntimeError("Repository non inizializzato")
    return repo

def get_upload_placer(request: Request) -> UploadPlacer:
    placer = getattr(request.app.state, "upload_placer", None)
    if placer is None:
        raise RuntimeError("UploadPlacer non inizializzato")
    return placer

def get_identity_provider(request: Request) -> IdentityProvider:
    identity = getattr(request.app.state, "identity_provider", None)
    if identity is None:
        raise RuntimeError("IdentityProvider non inizializzato")
    return identity
