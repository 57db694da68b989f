"""Tests for gamification Prometheus metrics"""
from unittest.mock import patch

from prometheus_client import REGISTRY

from gramps_memory.observability import metrics


def _value(name, **labels):
    return REGISTRY.get_sample_value(name, labels) or 0.0


class TestRecordHelpers:
    """Test metric recording helpers"""

    def test_xp_award_counts_amount(self):
        before = _value("gramps_xp_awarded_total", transaction_type="family_share")

        with patch.object(metrics, "ENABLE_METRICS", True):
            metrics.record_xp_award("family_share", 150)

        assert _value("gramps_xp_awarded_total", transaction_type="family_share") == before + 150

    def test_level_up_labelled_by_level(self):
        before = _value("gramps_level_ups_total", new_level="2")

        with patch.object(metrics, "ENABLE_METRICS", True):
            metrics.record_level_up(2)

        assert _value("gramps_level_ups_total", new_level="2") == before + 1

    def test_streak_outcome(self):
        before = _value("gramps_streak_updates_total", outcome="continued")

        with patch.object(metrics, "ENABLE_METRICS", True):
            metrics.record_streak_update("continued")

        assert _value("gramps_streak_updates_total", outcome="continued") == before + 1

    def test_disabled_records_nothing(self):
        """Test nothing is counted when metrics are disabled"""
        before = _value("gramps_ledger_write_failures_total")

        with patch.object(metrics, "ENABLE_METRICS", False):
            metrics.record_ledger_failure()

        assert _value("gramps_ledger_write_failures_total") == before

    def test_errors_are_swallowed(self):
        """Test a broken counter never breaks the caller"""
        with patch.object(metrics, "ENABLE_METRICS", True), \
             patch.object(metrics.streak_decays_total, "inc", side_effect=RuntimeError("boom")):
            metrics.record_streak_decay()
