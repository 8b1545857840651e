"""Due-date resolution for Quick Add Magic.

Dates are resolved by an ordered chain of strategies; the first one that
produces a value wins. Later strategies are more permissive than earlier
ones, so the order is part of the behaviour:

1. natural language (dateparser over the whole input)
2. keyword phrases ("tomorrow", "this weekend", "end of month", ...)
3. weekday names
4. relative durations ("in 3 days")
5. ordinal day of the current month ("15th")
6. explicit numeric dates (DD/MM/YYYY, then YYYY-MM-DD)
7. month name and day ("Feb 17th")

Unless a time is given ("at 5pm"), date-based results are due at the end of
that day, 23:59:59.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, date, datetime, time, timedelta, tzinfo

import dateparser

from .patterns import (
    DATE_KEYWORDS,
    DMY_PAT,
    DURATION_PAT,
    ISO_PAT,
    MONTH_DAY_PAT,
    MONTH_NUMBERS,
    ORDINAL_PAT,
    TIME_PAT,
    WEEKDAY_KEYWORDS,
    WEEKDAY_NUMBERS,
    keyword_matcher,
)

logger = logging.getLogger(__name__)

END_OF_DAY = (23, 59)

# US dialect, anchored per call with RELATIVE_BASE. Absolute parses must name
# both a day and a month, so bare fragments ("friday", "1st", "Dec", "2025")
# are left to the later strategies; relative phrases are not affected.
# Digit runs are never read as timestamps or packed dates.
NATURAL_DATE_SETTINGS = {
    "DATE_ORDER": "MDY",
    "PARSERS": ["relative-time", "absolute-time"],
    "PREFER_DATES_FROM": "future",
    "REQUIRE_PARTS": ["day", "month"],
    "RETURN_AS_TIMEZONE_AWARE": False,
}


def extract_time(text: str) -> tuple[int, int] | None:
    """Find an "at HH[:MM][am|pm]" fragment and return it as 24-hour (hour, minute)."""
    m = TIME_PAT.search(text)
    if not m:
        return None
    hour = int(m.group(1))
    minute = int(m.group(2)) if m.group(2) else 0
    meridiem = (m.group(3) or "").lower()

    if meridiem == "pm" and hour != 12:
        hour += 12
    elif meridiem == "am" and hour == 12:
        hour = 0

    if hour < 24 and minute < 60:
        return hour, minute
    return None


def _add_years(day: date, years: int) -> date:
    try:
        return day.replace(year=day.year + years)
    except ValueError:
        # Feb 29 in a non-leap target year
        return day.replace(year=day.year + years, day=28)


def _end_of_month(day: date) -> date:
    first = day.replace(day=1) + timedelta(days=32)
    return first.replace(day=1) - timedelta(days=1)


def _days_to_saturday(day: date) -> int:
    return (6 - day.isoweekday()) % 7


def _days_to_sunday(day: date) -> int:
    return (7 - day.isoweekday()) % 7


# Checked top to bottom; the first phrase present in the text decides.
KEYWORD_RULES: tuple[tuple[str, Callable[[date], date]], ...] = (
    ("today", lambda d: d),
    ("tomorrow", lambda d: d + timedelta(days=1)),
    ("yesterday", lambda d: d - timedelta(days=1)),
    ("this weekend", lambda d: d + timedelta(days=_days_to_saturday(d))),
    ("next weekend", lambda d: d + timedelta(days=7 + _days_to_saturday(d))),
    ("next week", lambda d: d + timedelta(weeks=1)),
    ("this week", lambda d: d + timedelta(days=_days_to_sunday(d))),
    ("next month", lambda d: d + timedelta(days=30)),
    ("end of month", _end_of_month),
    ("end of week", lambda d: d + timedelta(days=_days_to_sunday(d))),
    ("last week", lambda d: d - timedelta(weeks=1)),
    ("this month", _end_of_month),
    ("last month", lambda d: d - timedelta(days=30)),
    ("end of year", lambda d: d.replace(month=12, day=31)),
    ("this year", lambda d: d.replace(month=12, day=31)),
    ("next year", lambda d: _add_years(d, 1)),
    ("last year", lambda d: _add_years(d, -1)),
)

_KEYWORD_RULE_PATS = tuple((keyword_matcher([phrase]), rule) for phrase, rule in KEYWORD_RULES)


class DateResolver:
    """Ordered chain of due-date strategies; holds no per-call state."""

    def __init__(self, timezone: tzinfo = UTC):
        self.timezone = timezone
        self.strategies: tuple[tuple[str, Callable[[str, datetime], datetime | None]], ...] = (
            ("natural", self._natural),
            ("keyword", self._keyword),
            ("weekday", self._weekday),
            ("duration", self._duration),
            ("ordinal", self._ordinal),
            ("numeric", self._numeric),
            ("month_name", self._month_name),
        )

    def local_now(self, now: datetime | None = None) -> datetime:
        """Anchor time in the resolver's timezone, truncated to whole seconds."""
        if now is None:
            now = datetime.now(self.timezone)
        elif now.tzinfo is None:
            now = now.replace(tzinfo=self.timezone)
        else:
            now = now.astimezone(self.timezone)
        return now.replace(microsecond=0)

    def resolve(self, text: str, now: datetime | None = None) -> tuple[datetime | None, str | None]:
        """Return (due date in UTC, name of the winning strategy)."""
        anchor = self.local_now(now)
        for name, strategy in self.strategies:
            due = strategy(text, anchor)
            if due is not None:
                return due, name
        return None, None

    # -- helpers ---------------------------------------------------------

    def _stamp(self, day: date, text: str) -> datetime:
        hour, minute = extract_time(text) or END_OF_DAY
        local = datetime.combine(day, time(hour, minute, 59), tzinfo=self.timezone)
        return local.astimezone(UTC)

    def _instant(self, wall: datetime) -> datetime:
        return wall.replace(tzinfo=self.timezone, microsecond=0).astimezone(UTC)

    @staticmethod
    def _is_hours(text: str) -> bool:
        m = DURATION_PAT.search(text)
        return bool(m) and m.group(2).lower() == "hour"

    # -- strategies ------------------------------------------------------

    def _natural(self, text: str, now: datetime) -> datetime | None:
        if not text.strip():
            return None
        wall_now = now.replace(tzinfo=None)
        settings = {**NATURAL_DATE_SETTINGS, "RELATIVE_BASE": wall_now}
        parsed = dateparser.parse(text, languages=["en"], settings=settings)
        if parsed is None:
            return None
        parsed = parsed.replace(tzinfo=None)

        if extract_time(text) is None:
            if self._is_hours(text):
                return self._instant(parsed)
            # a time of day from the phrase itself ("tomorrow 4pm"), not the anchor's
            if parsed.time() not in (wall_now.time(), time.min):
                local = datetime.combine(parsed.date(), time(parsed.hour, parsed.minute, 59), tzinfo=self.timezone)
                return local.astimezone(UTC)
        return self._stamp(parsed.date(), text)

    def _keyword(self, text: str, now: datetime) -> datetime | None:
        if not DATE_KEYWORDS.search(text):
            return None
        for pat, rule in _KEYWORD_RULE_PATS:
            if pat.search(text):
                return self._stamp(rule(now.date()), text)
        return None

    def _weekday(self, text: str, now: datetime) -> datetime | None:
        m = WEEKDAY_KEYWORDS.search(text)
        if not m:
            return None
        target = WEEKDAY_NUMBERS[m.group(0).lower()]
        ahead = (target - now.weekday() + 7) % 7
        return self._stamp(now.date() + timedelta(days=ahead), text)

    def _duration(self, text: str, now: datetime) -> datetime | None:
        m = DURATION_PAT.search(text)
        if not m:
            return None
        amount = int(m.group(1))
        unit = m.group(2).lower()
        if unit == "hour":
            return (now + timedelta(hours=amount)).astimezone(UTC)
        days = {"day": 1, "week": 7, "month": 30}[unit] * amount
        return self._stamp(now.date() + timedelta(days=days), text)

    def _ordinal(self, text: str, now: datetime) -> datetime | None:
        m = ORDINAL_PAT.search(text)
        if not m:
            return None
        try:
            day = now.date().replace(day=int(m.group(1)))
        except ValueError:
            return None
        return self._stamp(day, text)

    def _numeric(self, text: str, now: datetime) -> datetime | None:
        m = DMY_PAT.search(text)
        if m:
            day, month, year = (int(g) for g in m.groups())
            try:
                return self._stamp(date(year, month, day), text)
            except ValueError:
                pass
        m = ISO_PAT.search(text)
        if m:
            year, month, day = (int(g) for g in m.groups())
            try:
                return self._stamp(date(year, month, day), text)
            except ValueError:
                pass
        return None

    def _month_name(self, text: str, now: datetime) -> datetime | None:
        m = MONTH_DAY_PAT.search(text)
        if not m:
            return None
        month = MONTH_NUMBERS[m.group(1).lower()]
        try:
            return self._stamp(date(now.year, month, int(m.group(2))), text)
        except ValueError:
            return None
