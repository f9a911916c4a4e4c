"""Tests for the marketplace's structlog processors and log level selection."""

import pytest
from marketplace.utils.logging import add_money_display, log_level


class TestMoneyDisplay:
    def test_amounts_get_a_display_twin(self):
        event = add_money_display(None, "info", {"event": "checkout.order_placed", "total_amount": 15000, "commission": 1500})

        assert event["total_amount"] == 15000
        assert event["total_amount_display"] == "150.00"
        assert event["commission_display"] == "15.00"
        assert "curator_amount_display" not in event

    def test_non_integer_values_are_left_alone(self):
        event = add_money_display(None, "info", {"event": "x", "amount": "n/a", "price": True})
        assert "amount_display" not in event
        assert "price_display" not in event


class TestLogLevel:
    @pytest.mark.parametrize(
        ("env", "expected"),
        [("production", "INFO"), ("development", "DEBUG"), ("test", "WARNING"), ("unknown", "INFO")],
    )
    def test_level_follows_environment(self, monkeypatch, env, expected):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.setenv("PROTEAN_ENV", env)
        assert log_level() == expected

    def test_explicit_level_wins(self, monkeypatch):
        monkeypatch.setenv("PROTEAN_ENV", "production")
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        assert log_level() == "ERROR"
