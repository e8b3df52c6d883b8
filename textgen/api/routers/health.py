from fastapi import APIRouter

from textgen.core import config

router = APIRouter(tags=["meta"])

# liveness only; never reaches out to a provider
@router.get("/health")
def health():
    return {"status": "ok", "service": config.APP_TITLE}
