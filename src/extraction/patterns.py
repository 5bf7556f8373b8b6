"""Pattern tables for the rule-based extractor.

Order inside each table is significant: the first entry that matches wins.
Add new formats by appending entries, not by touching the extractor.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import time
from typing import Optional

MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

# Capitalised words that look like names but never are.
TASK_VERBS = ("Call", "Send", "Review", "Finish", "Complete", "Update", "Create")
NON_NAME_WORDS = frozenset(
    MONTHS + WEEKDAYS + TASK_VERBS + ("Today", "Tomorrow", "Team", "Everyone", "Client")
)

_MONTH_ALT = "|".join(MONTHS)
_WEEKDAY_ALT = "|".join(WEEKDAYS)
_SUFFIX = r"(?:st|nd|rd|th)?"

# ---- priority ----

PRIORITY_RE = re.compile(r"\bp([1-4])\b", re.IGNORECASE)

# ---- assignee ----

# Case-sensitive name, case-insensitive keywords.
_NAME = r"([A-Z][a-z]+(?:\s+[A-Z][a-z]+)?)"
_SINGLE_NAME = r"([A-Z][a-z]+)"

ASSIGNEE_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"\b(?i:by|for|to|assign(?:ed)?\s+to)\s+" + _NAME + r"\b"),
    re.compile(r"\b" + _NAME + r"\s+(?i:by|on|at)\b"),
    re.compile(r"\b" + _SINGLE_NAME + r"\s+(?i:tomorrow|today|by)\b"),
)

CAPITALISED_RE = re.compile(r"\b" + _NAME + r"\b")
WORD_RE = re.compile(r"\S+")

# ---- dates and times ----

TIME_RE = re.compile(r"(?<!\d)(\d{1,2})(?::(\d{2}))?\s*(am|pm)\b", re.IGNORECASE)

TOMORROW_RE = re.compile(r"\btomorrow\b", re.IGNORECASE)
TODAY_RE = re.compile(r"\btoday\b", re.IGNORECASE)


@dataclass(frozen=True)
class DatePattern:
    """An explicit calendar date form.

    Group indexes point into ``regex``; ``year_group`` is None when the form
    has no year. Exactly one of ``month_group`` (numeric) and
    ``month_name_group`` is set.
    """

    name: str
    regex: re.Pattern
    day_group: int
    month_group: Optional[int] = None
    month_name_group: Optional[int] = None
    year_group: Optional[int] = None


DATE_PATTERNS: tuple[DatePattern, ...] = (
    DatePattern(
        name="month-name-first",
        regex=re.compile(r"\b(" + _MONTH_ALT + r")\s+(\d{1,2})" + _SUFFIX + r"\b", re.IGNORECASE),
        day_group=2,
        month_name_group=1,
    ),
    DatePattern(
        name="day-then-suffix",
        regex=re.compile(r"\b(\d{1,2})" + _SUFFIX + r"\s+(" + _MONTH_ALT + r")\b", re.IGNORECASE),
        day_group=1,
        month_name_group=2,
    ),
    DatePattern(
        name="numeric-slash",
        regex=re.compile(r"\b(\d{1,2})/(\d{1,2})(?:/(\d{2,4}))?\b"),
        day_group=1,
        month_group=2,
        year_group=3,
    ),
    DatePattern(
        name="numeric-dash",
        regex=re.compile(r"\b(\d{1,2})-(\d{1,2})(?:-(\d{2,4}))?\b"),
        day_group=1,
        month_group=2,
        year_group=3,
    ),
)

WEEKDAY_RE = re.compile(r"\b(" + _WEEKDAY_ALT + r")\b", re.IGNORECASE)

# Default clock times when the text names a day but no time.
TOMORROW_DEFAULT_TIME = time(9, 0)
TODAY_DEFAULT_TIME = time(17, 0)
END_OF_DAY = time(23, 59)

# ---- task name cleanup ----

# Applied in order to the working text once assignee and priority are gone.
RESIDUE_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"\b(?:by|for|to|tomorrow|today)\b", re.IGNORECASE),
    *(p.regex for p in DATE_PATTERNS),
    WEEKDAY_RE,
    TIME_RE,
)

# Connectors and punctuation stranded at the end once a name or time is cut out.
TRAILING_RESIDUE_RE = re.compile(r"(?:\s*(?:\b(?:on|at|by|for|to)\b|[,.;:!-]))+\s*$", re.IGNORECASE)

WHITESPACE_RE = re.compile(r"\s+")
MIN_TASK_NAME_LEN = 3


def month_number(name: str) -> int:
    return [m.lower() for m in MONTHS].index(name.lower()) + 1


def weekday_number(name: str) -> int:
    """Monday is 0, matching ``date.weekday()``."""
    return [d.lower() for d in WEEKDAYS].index(name.lower())
