from extraction.reply_parser import (
    SalvageFailure,
    parse_direct,
    parse_embedded_object,
    parse_fields,
    parse_unfenced,
    salvage_reply,
    strip_fences,
)
from llm.schemas import ModelReply

CLEAN = '{"taskName": "Call mom", "assignee": "Anna", "dueDate": "2026-10-20T15:00", "priority": "P2"}'


def test_direct_json():
    out = salvage_reply(f"  {CLEAN}\n")
    assert isinstance(out, ModelReply)
    assert out.taskName == "Call mom"
    assert out.assignee == "Anna"
    assert out.dueDate == "2026-10-20T15:00"
    assert out.priority == "P2"


def test_code_fenced_json():
    raw = f"```json\n{CLEAN}\n```"
    assert isinstance(parse_direct(raw), SalvageFailure)
    out = parse_unfenced(raw)
    assert isinstance(out, ModelReply)
    assert out.taskName == "Call mom"


def test_strip_fences_handles_bare_backticks():
    assert strip_fences("`{}`") == "{}"
    assert strip_fences("```\n{}\n```") == "{}"


def test_object_embedded_in_prose():
    raw = f"Sure! Here is the result: {CLEAN} Thanks."
    assert isinstance(parse_unfenced(raw), SalvageFailure)
    out = parse_embedded_object(raw)
    assert isinstance(out, ModelReply)
    assert out.assignee == "Anna"
    assert salvage_reply(raw) == out


def test_field_regex_rescues_truncated_reply():
    raw = '{"taskName": "Call mom", "priority": "P1", "dueDate": "2026-10-20T'
    out = salvage_reply(raw)
    assert isinstance(out, ModelReply)
    assert out.taskName == "Call mom"
    assert out.priority == "P1"
    assert out.dueDate is None


def test_field_regex_needs_task_name():
    assert isinstance(parse_fields('{"priority": "P1", oops'), SalvageFailure)


def test_json_array_is_not_a_task():
    out = parse_direct('["Call mom"]')
    assert isinstance(out, SalvageFailure)
    assert "object" in out.reason


def test_wrong_field_type_is_schema_mismatch():
    out = parse_direct('{"taskName": 42}')
    assert isinstance(out, SalvageFailure)
    assert out.stage == "direct"


def test_garbage_reports_every_stage():
    out = salvage_reply("THIS IS NOT JSON AT ALL")
    assert isinstance(out, list)
    assert [f.stage for f in out] == ["direct", "unfenced", "embedded_object", "fields"]
