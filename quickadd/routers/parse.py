from fastapi import APIRouter, Depends

from ..deps import get_quick_add_parser
from ..nlp.parser import QuickAddParser
from ..schemas import ParsedTask, ParseIn

router = APIRouter()


@router.post("", response_model=ParsedTask)
def parse(payload: ParseIn, parser: QuickAddParser = Depends(get_quick_add_parser)):
    """Preview what quick add would create, without touching Vikunja."""
    return parser.parse(payload.text, now=payload.now)
