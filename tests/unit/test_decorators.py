"""
Unit tests for utility decorators.
Testing correlation-id logging around backtest entry points.
"""

from types import SimpleNamespace

import pytest
from loguru import logger

from signal_backtester.core.exceptions.backtest import CalculationError
from signal_backtester.core.utils.decorators import log_operation


@pytest.fixture
def captured_logs():
    """Capture loguru records emitted during a test."""
    records: list[dict] = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)


class TestLogOperationDecorator:
    """Test suite for @log_operation decorator."""

    def test_should_return_wrapped_result(self, captured_logs) -> None:
        @log_operation
        def add(a: int, b: int) -> int:
            return a + b

        assert add(2, 3) == 5
        assert add.__name__ == "add"

    def test_should_log_start_and_completion_with_correlation_id(self, captured_logs) -> None:
        """Test that both records share one correlation id."""

        @log_operation
        def run(series: list[int]) -> SimpleNamespace:
            return SimpleNamespace(trades=[1, 2], total_return=4.5)

        run([1, 2, 3])

        messages = [record["message"] for record in captured_logs]
        assert any("started: run" in message for message in messages)
        assert any("completed: run" in message for message in messages)

        extras = [record["extra"] for record in captured_logs]
        assert len({extra["correlation_id"] for extra in extras}) == 1
        assert extras[0]["bars"] == 3
        assert extras[-1]["trades"] == 2
        assert extras[-1]["total_return"] == 4.5

    def test_should_capture_strategy_type_context(self, captured_logs) -> None:
        @log_operation
        def run(config: SimpleNamespace) -> None:
            return None

        run(SimpleNamespace(strategy_type="AUTO_CONFIG"))

        assert captured_logs[0]["extra"]["strategy_type"] == "AUTO_CONFIG"

    def test_should_log_and_reraise_errors(self, captured_logs) -> None:
        @log_operation
        def fail() -> None:
            raise CalculationError("bad numbers")

        with pytest.raises(CalculationError, match="bad numbers"):
            fail()

        errors = [record for record in captured_logs if record["level"].name == "ERROR"]
        assert len(errors) == 1
        assert "CalculationError" in errors[0]["message"]
