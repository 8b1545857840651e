from __future__ import annotations

import logging
import re
from datetime import UTC, datetime, tzinfo
from functools import lru_cache
from zoneinfo import ZoneInfo

from ..config import settings
from ..schemas import ParsedTask, RepeatInterval
from ..utils.text import normalize_whitespace
from .dates import DateResolver
from .patterns import (
    ASSIGNEE_PAT,
    LABEL_PAT,
    PRIORITY_PAT,
    PROJECT_PAT,
    REPEAT_PAT,
    TITLE_FILTERS,
)

logger = logging.getLogger(__name__)


def _value(m: re.Match) -> str:
    # double-quoted, single-quoted or bare
    return m.group(1) or m.group(2) or m.group(3)


class QuickAddParser:
    """
    Quick Add Magic parser:
    - labels via *label, assignees via @user, project via +project
      (quoted values keep their spaces: *"two words")
    - priority !1..!5
    - repeat via 'every [N] unit'
    - due date via natural language, keywords, weekdays, 'in N days', ordinals
      and explicit dates, with an optional 'at 5pm' time
    - strips all of the above from the title
    """

    def __init__(self, timezone: tzinfo | str = UTC):
        if isinstance(timezone, str):
            timezone = ZoneInfo(timezone)
        self.dates = DateResolver(timezone)
        self.title_filters = TITLE_FILTERS

    def parse(self, text: str, now: datetime | None = None) -> ParsedTask:
        task = ParsedTask(title=text)
        self._extract_entities(text, task)

        task.due_date, strategy = self.dates.resolve(text, now)
        task.title = self.clean_title(text)
        logger.debug(
            "[MAGIC PARSER] Cleaned title: %r, from input: %r (date strategy: %s)",
            task.title,
            text,
            strategy,
        )
        return task

    def _extract_entities(self, text: str, task: ParsedTask) -> None:
        task.labels = [_value(m) for m in LABEL_PAT.finditer(text)]
        task.assignees = [_value(m) for m in ASSIGNEE_PAT.finditer(text)]

        pj = PROJECT_PAT.search(text)
        task.project = _value(pj) if pj else None

        pr = PRIORITY_PAT.search(text)
        task.priority = int(pr.group(1)) if pr else None

        rp = REPEAT_PAT.search(text)
        if rp:
            amount = int(rp.group(1)) if rp.group(1) else 1
            task.repeat_interval = RepeatInterval(amount=amount, interval_type=rp.group(2))

    def clean_title(self, text: str) -> str:
        """Remove every recognized piece of magic syntax, in order, then tidy whitespace."""
        cleaned = text
        for pat in self.title_filters:
            cleaned = pat.sub("", cleaned)
        return normalize_whitespace(cleaned)


@lru_cache(maxsize=1)
def get_parser() -> QuickAddParser:
    """Process-wide parser, compiled once."""
    return QuickAddParser(settings.quickadd_timezone)


def parse_quick_task(text: str, now: datetime | None = None) -> ParsedTask:
    return get_parser().parse(text, now=now)
