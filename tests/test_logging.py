import json
import logging
import pytest

from ticketdesk.core.logging import get_logger, setup_logging


@pytest.fixture
def restore_logging():
    yield
    setup_logging()


def test_json_output_carries_structured_fields(capsys, restore_logging):
    setup_logging(log_level="INFO", json_format=True)

    get_logger("ticketdesk.tests").info("membership_bound", company_id="company_1")

    line = capsys.readouterr().out.strip().splitlines()[-1]
    record = json.loads(line)
    assert record["event"] == "membership_bound"
    assert record["company_id"] == "company_1"
    assert record["level"] == "info"
    assert record["logger"] == "ticketdesk.tests"


def test_only_own_loggers_are_reconfigured(restore_logging):
    setup_logging(json_format=False)

    assert logging.getLogger("sqlalchemy").propagate is False
    assert logging.getLogger("uvicorn").handlers == []
