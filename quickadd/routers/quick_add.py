import logging

from fastapi import APIRouter, Depends, HTTPException

from ..config import settings
from ..deps import get_vikunja
from ..schemas import QuickAddIn, VikunjaTaskOut
from ..vikunja import VikunjaClient, VikunjaError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=VikunjaTaskOut)
async def quick_add(payload: QuickAddIn, client: VikunjaClient = Depends(get_vikunja)):
    try:
        project_id = await client.resolve_default_project(payload.project or settings.vikunja_default_project)
        return await client.create_task_with_magic(payload.text, project_id)
    except VikunjaError as e:
        logger.error("Quick add failed for %r: %s", payload.text, e)
        raise HTTPException(502, f"Vikunja request failed: {e}") from e
