from __future__ import annotations

import logging
import re
from datetime import date, datetime, time, timedelta
from typing import Callable, Optional

from extraction import patterns as p
from task_manager.models import DEFAULT_PRIORITY, ParsedTask

logger = logging.getLogger(__name__)

UNTITLED_TASK = "Untitled task"


def parse_time_of_day(text: str) -> Optional[time]:
    """First ``H[:MM] am|pm`` in ``text`` as a 24-hour time, or None."""
    m = p.TIME_RE.search(text)
    if not m:
        return None
    hours = int(m.group(1))
    minutes = int(m.group(2)) if m.group(2) else 0
    if not 1 <= hours <= 12 or minutes > 59:
        return None
    is_pm = m.group(3).lower() == "pm"
    if is_pm and hours != 12:
        hours += 12
    if not is_pm and hours == 12:
        hours = 0
    return time(hours, minutes)


def _is_name(candidate: str) -> bool:
    return not any(word in p.NON_NAME_WORDS for word in candidate.split())


def _accepted_name(m: re.Match) -> Optional[tuple[str, int, int]]:
    """Name captured by ``m`` with the span to remove, or None.

    A two-word capture such as "Call John" is rejected as a whole when either
    word is excluded; each word is then tried on its own and only that word's
    span is removed.
    """
    name = m.group(1)
    if _is_name(name):
        return name.strip(), m.start(), m.end()

    start = m.start(1)
    for word in p.WORD_RE.finditer(name):
        if word.group(0) != name and _is_name(word.group(0)):
            return word.group(0), start + word.start(), start + word.end()
    return None


def _remove_span(text: str, start: int, end: int) -> str:
    return f"{text[:start]} {text[end:]}".strip()


class RuleBasedExtractor:
    """Deterministic, offline extraction driven by the tables in ``extraction.patterns``.

    Stages run in a fixed order (priority, assignee, due date, task name).
    Priority tokens are stripped before anything else; the task name is built
    from what remains after the assignee span has been removed.
    """

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self._clock = clock

    def extract(self, text: str) -> ParsedTask:
        today = self._clock().date()

        priority = self._priority(text)
        without_priority = p.WHITESPACE_RE.sub(" ", p.PRIORITY_RE.sub("", text)).strip()

        assignee, working = self._assignee(without_priority)
        # Assignee patterns may claim "tomorrow"/"today"/"by", so dates are read
        # from the text before the assignee span was removed.
        due_date = self._due_date(without_priority, today)
        task_name = self._task_name(working, fallback=without_priority or UNTITLED_TASK)

        logger.debug(
            "Rule-based extraction: name=%r assignee=%r due=%s priority=%s",
            task_name, assignee, due_date, priority,
        )
        return ParsedTask(
            task_name=task_name,
            assignee=assignee,
            due_date=due_date,
            priority=priority,
        )

    # ---- stages ----

    @staticmethod
    def _priority(text: str) -> str:
        m = p.PRIORITY_RE.search(text)
        return f"P{m.group(1)}" if m else DEFAULT_PRIORITY

    @staticmethod
    def _assignee(text: str) -> tuple[Optional[str], str]:
        for pattern in p.ASSIGNEE_PATTERNS:
            for m in pattern.finditer(text):
                found = _accepted_name(m)
                if found:
                    name, start, end = found
                    return name, _remove_span(text, start, end)

        # Any capitalised word that is not a month, weekday or task verb.
        for m in p.CAPITALISED_RE.finditer(text):
            found = _accepted_name(m)
            if found:
                name, start, end = found
                return name, _remove_span(text, start, end)

        return None, text

    def _due_date(self, text: str, today: date) -> Optional[datetime]:
        if p.TOMORROW_RE.search(text):
            return self._at(today + timedelta(days=1), text, p.TOMORROW_DEFAULT_TIME)

        if p.TODAY_RE.search(text):
            return self._at(today, text, p.TODAY_DEFAULT_TIME)

        explicit = self._explicit_date(text, today)
        if explicit is not None:
            return self._at(explicit, text, p.END_OF_DAY)

        m = p.WEEKDAY_RE.search(text)
        if m:
            ahead = (p.weekday_number(m.group(1)) - today.weekday()) % 7
            return self._at(today + timedelta(days=ahead), text, p.END_OF_DAY)

        return None

    @staticmethod
    def _explicit_date(text: str, today: date) -> Optional[date]:
        for pattern in p.DATE_PATTERNS:
            for m in pattern.regex.finditer(text):
                day = int(m.group(pattern.day_group))
                if pattern.month_name_group is not None:
                    month = p.month_number(m.group(pattern.month_name_group))
                else:
                    month = int(m.group(pattern.month_group))

                year = today.year
                if pattern.year_group is not None and m.group(pattern.year_group):
                    year = int(m.group(pattern.year_group))
                    if year < 100:
                        year += 2000

                try:
                    return date(year, month, day)
                except ValueError:
                    logger.debug("Ignoring impossible %s date %r", pattern.name, m.group(0))
        return None

    @staticmethod
    def _at(day: date, text: str, default: time) -> datetime:
        clock = parse_time_of_day(text)
        return datetime.combine(day, default if clock is None else clock)

    @staticmethod
    def _task_name(working: str, fallback: str) -> str:
        name = working
        for pattern in p.RESIDUE_PATTERNS:
            name = pattern.sub("", name)
        name = p.WHITESPACE_RE.sub(" ", name).strip()
        name = p.TRAILING_RESIDUE_RE.sub("", name)

        if len(name) < p.MIN_TASK_NAME_LEN:
            return fallback
        return name
