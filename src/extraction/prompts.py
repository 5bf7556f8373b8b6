from __future__ import annotations

from datetime import date, timedelta

FRIDAY = 4


def upcoming_weekday(today: date, weekday: int) -> date:
    """Next date falling on ``weekday`` (Monday=0), today included."""
    return today + timedelta(days=(weekday - today.weekday()) % 7)


def upcoming_day_of_month(today: date, day: int) -> date:
    """``day`` of this month, or of next month once it has passed."""
    if today.day <= day:
        return today.replace(day=day)
    if today.month == 12:
        return date(today.year + 1, 1, day)
    return date(today.year, today.month + 1, day)


def build_system_prompt(today: date) -> str:
    """Instruction text for the remote model, with every date computed from ``today``.

    The model has no clock of its own, so the current date and the dates in
    the worked examples are filled in here.
    """
    tomorrow = (today + timedelta(days=1)).isoformat()
    friday = upcoming_weekday(today, FRIDAY).isoformat()
    fifteenth = upcoming_day_of_month(today, 15).isoformat()

    return f"""You extract a single structured task from a short natural-language task description.
Respond with ONLY one JSON object and nothing else: no markdown, no code fences, no commentary.

Schema:
{{
  "taskName": "what has to be done",
  "assignee": "person responsible (omit if none)",
  "dueDate": "YYYY-MM-DDTHH:MM local time (omit if none)",
  "priority": "P1" | "P2" | "P3" | "P4"
}}

TASK NAME RULES:
- Keep the core action and its object, starting with a verb where possible.
- Remove the assignee, dates, times and priority markers (P1-P4) from it.
- Keep it short, clear and actionable.

PRIORITY RULES:
- P1 is critical, P2 high, P3 medium, P4 low.
- An explicit marker P1-P4 in the input wins.
- "urgent", "critical", "ASAP", "immediately" suggest P1.
- "when you can", "when you have time", "low priority", "not urgent" suggest P4.
- Otherwise use P3.

DATE RULES:
- Today's date is {today.isoformat()}. Resolve relative dates ("today", "tomorrow", weekday names, "the 15th") against it.
- Use 24-hour time. Convert "3pm" to 15:00 and "9am" to 09:00.
- "tomorrow" without a time means 09:00; "today" without a time means 17:00.
- Any other date without a time means 23:59.
- Omit dueDate when the input has no date or time.

ASSIGNEE RULES:
- Only include a person's name, without titles or extra words.
- Typical forms: "for Sarah", "assign to Sarah", "Sarah needs to", "call John".

EXAMPLES:

Input: "Call John about the proposal tomorrow at 3pm"
Output: {{"taskName": "Call about the proposal", "assignee": "John", "dueDate": "{tomorrow}T15:00", "priority": "P3"}}

Input: "Finish the website redesign by Friday, it's critical"
Output: {{"taskName": "Finish website redesign", "dueDate": "{friday}T23:59", "priority": "P1"}}

Input: "When you have time, review the onboarding documentation"
Output: {{"taskName": "Review onboarding documentation", "priority": "P4"}}

Input: "Send the monthly report to the team on the 15th"
Output: {{"taskName": "Send monthly report to team", "dueDate": "{fifteenth}T23:59", "priority": "P3"}}

Input: "Urgent: fix the login bug before the client demo tomorrow at 10am"
Output: {{"taskName": "Fix login bug before client demo", "dueDate": "{tomorrow}T10:00", "priority": "P1"}}
"""
