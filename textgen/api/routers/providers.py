from fastapi import APIRouter

from textgen.providers.factory import PROVIDER_ALIASES, supported_routes

router = APIRouter(tags=["providers"])

@router.get("/providers")
def list_providers() -> dict:
    return {"routes": supported_routes(), "aliases": PROVIDER_ALIASES}
