import logging
import pytest
from fastapi import HTTPException

from leadquote.utils.errors import error_response


def test_error_response_logs(caplog):
    caplog.set_level(logging.WARNING, logger="leadquote.utils.errors")
    with pytest.raises(HTTPException) as info:
        raise error_response("Invalid", {"field": "bad"})
    assert info.value.status_code == 422
    assert info.value.detail == {"message": "Invalid", "field_errors": {"field": "bad"}}
    record = next(r for r in caplog.records if "Invalid" in r.getMessage())
    assert "'field': 'bad'" in record.getMessage()
    assert record.levelno == logging.WARNING


def test_server_errors_log_at_error(caplog):
    caplog.set_level(logging.WARNING, logger="leadquote.utils.errors")
    exc = error_response("Distance lookup unavailable", code=503)
    assert exc.status_code == 503
    assert exc.detail["field_errors"] == {}
    assert caplog.records[-1].levelno == logging.ERROR
