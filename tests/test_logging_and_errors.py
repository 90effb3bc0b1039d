"""Tests for NDJSON log records and CLI error translation."""

import json

import click
import pytest

from macpaperd.store.exceptions import BuildError, SwapFailed
from macpaperd.utils.error_handler import StoreInconsistent, handle_exceptions
from macpaperd.utils.exit_codes import ExitCodes
from macpaperd.utils.logging import _record_to_json, logger


@pytest.fixture
def records():
    captured = []
    handler_id = logger.add(lambda message: captured.append(json.loads(_record_to_json(message.record))))
    yield captured
    logger.remove(handler_id)


def test_json_record_fields(records):
    logger.bind(store="/tmp/macpaperd.db").warning("Schema mismatch in {}: {}", "data", "missing")
    entry = records[-1]
    assert entry["level"] == "WARNING"
    assert entry["msg"] == "Schema mismatch in data: missing"
    assert entry["store"] == "/tmp/macpaperd.db"
    assert {"time", "pid", "module"} <= set(entry)


def test_json_record_exception(records):
    try:
        raise BuildError("insert failed")
    except BuildError:
        logger.opt(exception=True).error("Build failed")
    assert records[-1]["err"] == {"type": "BuildError", "message": "insert failed"}


def _raiser(exc):
    @handle_exceptions
    def command():
        raise exc

    return command


def test_engine_error_becomes_click_error():
    with pytest.raises(click.ClickException) as exc_info:
        _raiser(BuildError("insert failed", details={"store": "x"}))()
    assert exc_info.value.exit_code == ExitCodes.FAILED
    assert "Nothing was changed" in exc_info.value.message


def test_recoverable_swap_failure():
    with pytest.raises(click.ClickException) as exc_info:
        _raiser(SwapFailed("disk full", stage="staging"))()
    assert not isinstance(exc_info.value, StoreInconsistent)
    assert "live store was not changed" in exc_info.value.message


def test_removed_store_exit_code():
    with pytest.raises(StoreInconsistent) as exc_info:
        _raiser(SwapFailed("gone", stage="placement", live_store_removed=True))()
    assert exc_info.value.exit_code == ExitCodes.STORE_INCONSISTENT == 3


def test_click_errors_pass_through():
    original = click.BadParameter("nope")
    with pytest.raises(click.BadParameter) as exc_info:
        _raiser(original)()
    assert exc_info.value is original


def test_exit_code_descriptions():
    assert "manual recovery" in ExitCodes.get_description(ExitCodes.STORE_INCONSISTENT)
    assert ExitCodes.get_description(42) == "Unknown exit code: 42"
