"""Tests for dispatcher log truncation."""

from memoria.core.types import ActionResult
from memoria.tools.dispatcher import _truncate_for_logging


def test_short_note_kept_whole():
    result = ActionResult(success=True, data="Note added to memory: flight is AA100")

    logged = _truncate_for_logging(result)
    assert "flight is AA100" in logged
    assert "truncated" not in logged


def test_long_string_data_truncated():
    """A huge search result is cut in the log line."""
    hits = "- " + "peanuts " * 200
    result = ActionResult(success=True, data=hits)

    logged = _truncate_for_logging(result, max_len=50)
    assert f"{len(hits)} chars total" in logged
    assert len(logged) < len(hits)


def test_dict_fields_truncated_independently():
    result = ActionResult(
        success=True,
        data={"content": "Z" * 700, "id": "rec-1"},
    )

    logged = _truncate_for_logging(result, max_len=100)
    assert "truncated, 700 chars total" in logged
    assert "rec-1" in logged


def test_failure_logged_fully():
    result = ActionResult(success=False, error="vector store locked " * 40)

    logged = _truncate_for_logging(result, max_len=10)
    assert "truncated" not in logged
    assert "success=False" in logged


def test_none_data():
    logged = _truncate_for_logging(ActionResult(success=True, data=None))
    assert logged == "ActionResult(success=True, data=None)"


def test_non_dict_data():
    logged = _truncate_for_logging(ActionResult(success=True, data=["a", "b"]))
    assert "['a', 'b']" in logged
