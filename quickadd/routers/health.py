from fastapi import APIRouter

from ..config import settings

router = APIRouter()


@router.get("")
def health():
    return {"ok": True, "vikunja_configured": settings.has_vikunja}
