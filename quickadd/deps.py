from collections.abc import AsyncGenerator

from fastapi import HTTPException

from .config import settings
from .nlp.parser import QuickAddParser, get_parser
from .vikunja import VikunjaClient


def get_quick_add_parser() -> QuickAddParser:
    return get_parser()


async def get_vikunja() -> AsyncGenerator[VikunjaClient, None]:
    if not settings.has_vikunja:
        raise HTTPException(503, "Vikunja is not configured (set VIKUNJA_URL and VIKUNJA_TOKEN)")
    async with VikunjaClient(settings.vikunja_url, settings.vikunja_token) as client:
        yield client
