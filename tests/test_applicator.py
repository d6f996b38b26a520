"""Tests for the apply pass."""

import pytest

from kerntune.models.sysctl import FailureReason, OutcomeKind
from kerntune.sysctl.applicator import Applicator, apply_all
from kerntune.sysctl.store import SettingsStore

from conftest import FakeWriter


def _store(*pairs):
    store = SettingsStore()
    for key, value in pairs:
        store.set(key, value)
    return store


class TestApplicator:
    """Tests for filtering, classification and aggregation."""

    def test_all_applied(self, fake_writer):
        store = _store(("net.ipv4.ip_forward", "1"), ("kernel.sysrq", "16"))
        result = Applicator(fake_writer).apply_all(store)

        assert result.success
        assert result.exit_code == 0
        assert fake_writer.calls == [("net/ipv4/ip_forward", "1"), ("kernel/sysrq", "16")]
        assert [o.kind for o in result.outcomes] == [OutcomeKind.APPLIED, OutcomeKind.APPLIED]

    def test_never_stops_early(self):
        writer = FakeWriter({"k1": FailureReason.OTHER, "k3": FailureReason.PERMISSION_DENIED})
        store = _store(("k1", "a"), ("k2", "b"), ("k3", "c"))

        result = apply_all(store, (), writer)

        assert [key for key, _ in writer.calls] == ["k1", "k2", "k3"]
        assert not result.success
        assert result.first_fatal.key == "k1"
        assert result.outcomes[1].kind == OutcomeKind.APPLIED
        assert result.outcomes[2].kind == OutcomeKind.TOLERABLE_FAILURE

    def test_first_fatal_wins(self):
        writer = FakeWriter({"a": FailureReason.OTHER, "b": FailureReason.OTHER})
        result = apply_all(_store(("a", "1"), ("b", "2")), (), writer)

        assert result.first_fatal.key == "a"
        assert result.count(OutcomeKind.FATAL_FAILURE) == 2

    @pytest.mark.parametrize(
        "reason",
        [
            FailureReason.PERMISSION_DENIED,
            FailureReason.ACCESS_DENIED,
            FailureReason.READ_ONLY,
            FailureReason.NOT_FOUND,
        ],
    )
    def test_tolerable_reasons_keep_success(self, reason):
        writer = FakeWriter({"vm/swappiness": reason})
        result = apply_all(_store(("vm.swappiness", "10"), ("kernel.sysrq", "0")), (), writer)

        assert result.success
        assert result.outcomes[0].kind == OutcomeKind.TOLERABLE_FAILURE
        assert result.outcomes[0].reason == reason

    def test_filtered_keys_not_written(self, fake_writer):
        store = _store(("net.ipv4.ip_forward", "1"), ("net.ipv6.conf.all.forwarding", "1"))
        result = Applicator(fake_writer).apply_all(store, ["/proc/sys/net/ipv4"])

        assert fake_writer.calls == [("net/ipv4/ip_forward", "1")]
        assert result.outcomes[1].kind == OutcomeKind.SKIPPED_BY_FILTER
        assert result.success

    def test_value_is_normalized(self, fake_writer):
        Applicator(fake_writer).apply_all(_store(("kernel.core_pattern", "core.dump")))
        assert fake_writer.calls == [("kernel/core_pattern", "core/dump")]

    def test_slash_first_value_untouched(self, fake_writer):
        Applicator(fake_writer).apply_all(_store(("kernel.core_pattern", "/var/core.%p")))
        assert fake_writer.calls == [("kernel/core_pattern", "/var/core.%p")]

    def test_empty_store(self, fake_writer):
        result = Applicator(fake_writer).apply_all(SettingsStore())
        assert result.success
        assert result.outcomes == []

    def test_log_levels(self, log_records):
        writer = FakeWriter({"a": FailureReason.NOT_FOUND, "b": FailureReason.OTHER})
        apply_all(_store(("a", "1"), ("b", "2"), ("c", "3")), (), writer)

        levels = {
            r["message"].split(":")[0]: r["level"].name
            for r in log_records
            if r["message"].startswith(("Couldn't", "Set "))
        }
        assert levels["Couldn't write '1' to 'a', ignoring"] == "NOTICE"
        assert levels["Couldn't write '2' to 'b'"] == "ERROR"
        assert levels["Set 'c' to '3'"] == "INFO"
        assert sum(1 for r in log_records if r["message"] == "Writing setting") == 3

    def test_failure_log_names_source(self, log_records):
        store = SettingsStore()
        store.set("kernel.sysrq", "1", origin="/etc/sysctl.d/10-a.conf")
        store.set("vm.swappiness", "5")
        writer = FakeWriter(
            {"kernel/sysrq": FailureReason.OTHER, "vm/swappiness": FailureReason.READ_ONLY}
        )
        Applicator(writer).apply_all(store)

        failures = {
            r["level"].name: r["extra"]["source"]
            for r in log_records
            if r["message"].startswith("Couldn't")
        }
        assert failures == {"ERROR": "/etc/sysctl.d/10-a.conf", "NOTICE": None}
