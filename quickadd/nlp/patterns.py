"""Compiled pattern table for Quick Add Magic.

Everything here is compiled once at import time and only ever read.
"""

from __future__ import annotations

import re

# Sigil followed by a "double quoted", 'single quoted' or bare value
_VALUE = r"""(?:"([^"]+)"|'([^']+)'|(\S+))"""

LABEL_PAT = re.compile(r"\*" + _VALUE)
ASSIGNEE_PAT = re.compile(r"@" + _VALUE)
PROJECT_PAT = re.compile(r"\+" + _VALUE)
PRIORITY_PAT = re.compile(r"!([1-5])")
REPEAT_PAT = re.compile(r"every\s+(?:(\d+)\s+)?(\w+)")

# "at 17:00", "at 5pm", "at 2:30pm"
TIME_PAT = re.compile(r"\bat\s+(\d{1,2}):?(\d{2})?\s*(am|pm)?", re.IGNORECASE)

DURATION_PAT = re.compile(r"\bin\s+(\d+)\s+(hour|day|week|month)s?\b", re.IGNORECASE)
ORDINAL_PAT = re.compile(r"\b(\d{1,2})(?:st|nd|rd|th)\b", re.IGNORECASE)
DMY_PAT = re.compile(r"\b(\d{1,2})/(\d{1,2})/(\d{4})\b")
ISO_PAT = re.compile(r"\b(\d{4})-(\d{1,2})-(\d{1,2})\b")

_MONTHS = (
    "jan|january|feb|february|mar|march|apr|april|may|jun|june|jul|july|"
    "aug|august|sep|september|oct|october|nov|november|dec|december"
)
MONTH_DAY_PAT = re.compile(rf"\b({_MONTHS})\s+(\d{{1,2}})(?:st|nd|rd|th)?\b", re.IGNORECASE)

MONTH_NUMBERS: dict[str, int] = {
    "jan": 1, "january": 1,
    "feb": 2, "february": 2,
    "mar": 3, "march": 3,
    "apr": 4, "april": 4,
    "may": 5,
    "jun": 6, "june": 6,
    "jul": 7, "july": 7,
    "aug": 8, "august": 8,
    "sep": 9, "september": 9,
    "oct": 10, "october": 10,
    "nov": 11, "november": 11,
    "dec": 12, "december": 12,
}

# Monday=0 ... Sunday=6, matching date.weekday()
WEEKDAY_NUMBERS: dict[str, int] = {
    "monday": 0, "mon": 0,
    "tuesday": 1, "tue": 1,
    "wednesday": 2, "wed": 2,
    "thursday": 3, "thu": 3,
    "friday": 4, "fri": 4,
    "saturday": 5, "sat": 5,
    "sunday": 6, "sun": 6,
}

DATE_VOCABULARY = (
    "today", "tomorrow", "yesterday",
    "next week", "this week", "last week",
    "next month", "this month", "last month",
    "next year", "this year", "last year",
    "this weekend", "next weekend",
    "later this week", "later next week",
    "end of month", "end of week", "end of year",
)


def keyword_matcher(words) -> re.Pattern:
    """One case-insensitive whole-word alternation over ``words``, longest first."""
    alternatives = sorted(words, key=len, reverse=True)
    body = "|".join(r"\s+".join(map(re.escape, w.split())) for w in alternatives)
    return re.compile(rf"\b(?:{body})\b", re.IGNORECASE)


DATE_KEYWORDS = keyword_matcher(DATE_VOCABULARY)
WEEKDAY_KEYWORDS = keyword_matcher(WEEKDAY_NUMBERS)

ENTITY_PATTERNS = (LABEL_PAT, PRIORITY_PAT, ASSIGNEE_PAT, PROJECT_PAT, REPEAT_PAT)

# Removal order matters: longer phrases go before the shorter ones they contain.
DATE_PHRASE_PATTERNS = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"\blater\s+(this|next)\s+week\b",
        r"\bend\s+of\s+(week|month|year)\b",
        r"\bin\s+\d+\s+(day|week|month|hour)s?\b",
        r"\bnext\s+(monday|tuesday|wednesday|thursday|friday|saturday|sunday)\b",
        r"\b(this|next|last)\s+(week|month|year|weekend)\b",
        r"\b(today|tomorrow|yesterday)\b",
        rf"\b({_MONTHS})\s+\d{{1,2}}(?:st|nd|rd|th)?\b",
        r"\b(monday|tuesday|wednesday|thursday|friday|saturday|sunday)\b",
        r"\b(mon|tue|wed|thu|fri|sat|sun)\b",
        r"\b\d{1,2}/\d{1,2}/\d{4}\b",
        r"\b\d{4}-\d{1,2}-\d{1,2}\b",
        r"\b\d{1,2}(?:st|nd|rd|th)\b",
    )
)

TITLE_FILTERS = (*ENTITY_PATTERNS, TIME_PAT, *DATE_PHRASE_PATTERNS)
