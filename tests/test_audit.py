"""
Tests for the audit event side channel.
"""

import logging
from decimal import Decimal

from realty_finance.services.audit import AuditService


class TestAuditService:
    """Test fire-and-forget event delivery."""

    def test_logs_without_sink(self, caplog):
        service = AuditService(enabled=True)
        with caplog.at_level(logging.INFO, logger="realty_finance.services.audit"):
            assert service.emit("financing_simulation", {"financed_amount": Decimal("200000")})
        assert "financing_simulation" in caplog.text
        assert "200000" in caplog.text

    def test_delivers_to_sink(self):
        events = []
        service = AuditService(sink=lambda action, details: events.append((action, details)), enabled=True)
        assert service.emit("investment_analysis", {"total_roi": 12})
        assert events == [("investment_analysis", {"total_roi": 12})]

    def test_sink_failure_is_swallowed(self, caplog):
        def broken_sink(action, details):
            raise ConnectionError("analytics backend down")

        service = AuditService(sink=broken_sink, enabled=True)
        with caplog.at_level(logging.ERROR, logger="realty_finance.services.audit"):
            assert service.emit("balance_simulation", {}) is False
        assert "analytics backend down" in caplog.text

    def test_disabled(self):
        events = []
        service = AuditService(sink=lambda a, d: events.append(a), enabled=False)
        assert service.emit("financing_simulation", {}) is False
        assert events == []
