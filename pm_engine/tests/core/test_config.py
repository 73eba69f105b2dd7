"""Tests for settings and logging setup."""

import pytest
from pydantic import ValidationError

from pm_engine.core.config import Settings
from pm_engine.core.observability import (
    CorrelationIdProcessor,
    set_correlation_id,
    set_organization_id,
)
from pm_engine.domain.maintenance.value_objects import WorkOrderPriority


@pytest.mark.parametrize(
    "url, expected",
    [
        ("postgres://u:p@db/pm", "postgresql+psycopg://u:p@db/pm"),
        ("postgresql://u:p@db/pm", "postgresql+psycopg://u:p@db/pm"),
        ("sqlite:///./pm.db", "sqlite:///./pm.db"),
    ],
)
def test_database_uri(url, expected):
    assert Settings(DATABASE_URL=url).SQLALCHEMY_DATABASE_URI == expected


def test_defaults():
    config = Settings(_env_file=None)
    assert config.RECENT_WORK_ORDERS_LIMIT == 5
    assert config.DEFAULT_WORK_ORDER_PRIORITY == WorkOrderPriority.MEDIUM


def test_log_format_validated():
    with pytest.raises(ValidationError):
        Settings(LOG_FORMAT="xml")


def test_correlation_processor_adds_context():
    set_correlation_id("req-1")
    set_organization_id(9)
    try:
        event = CorrelationIdProcessor()(None, "info", {"event": "x"})
    finally:
        set_correlation_id("")
        set_organization_id(None)

    assert event["correlation_id"] == "req-1"
    assert event["organization_id"] == "9"
