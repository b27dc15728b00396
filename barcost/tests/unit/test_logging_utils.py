"""Unit tests for service logging utilities."""

import logging

from barcost.services.logging_utils import get_service_logger, log_operation


class TestGetServiceLogger:
    """Tests for get_service_logger()."""

    def test_prefix_applied_to_module_name(self):
        logger = get_service_logger("barcost.services.event_service")
        assert logger.name == "bar_costing.services.event_service"

    def test_plain_name(self):
        assert get_service_logger("stock_service").name == "bar_costing.services.stock_service"


class TestLogOperation:
    """Tests for log_operation()."""

    def test_message_and_structured_context(self, caplog):
        logger = get_service_logger("event_service")

        with caplog.at_level(logging.INFO):
            log_operation(logger, operation="complete_event", outcome="success", event_id=12)

        record = caplog.records[-1]
        assert record.getMessage() == "complete_event: success"
        assert record.operation == "complete_event"
        assert record.outcome == "success"
        assert record.event_id == 12
        assert record.levelno == logging.INFO

    def test_custom_level(self, caplog):
        logger = get_service_logger("event_service")

        with caplog.at_level(logging.WARNING):
            log_operation(
                logger,
                operation="complete_event",
                outcome="shortfall",
                level=logging.WARNING,
                shortfalls={"3": "250"},
            )

        assert caplog.records[-1].levelname == "WARNING"
        assert caplog.records[-1].shortfalls == {"3": "250"}
