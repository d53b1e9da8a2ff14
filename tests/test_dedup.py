"""
tests/test_dedup.py

Unit tests for exact-duplicate removal of zoning rows.
"""

from __future__ import annotations

from zoning.dedup import dedup_key, dedupe
from zoning.models import FabricRecord


def _row(fabric: str, alias: str, wwn: str, logged_in: str = "yes", **extra: str) -> FabricRecord:
    return FabricRecord(fabric=fabric, alias=alias, member_wwn=wwn, logged_in=logged_in, **extra)


class TestDedupKey:
    def test_key_is_fabric_alias_wwn(self) -> None:
        row = _row("FAB-A", "srv1_1s", "10:00:00:00:c9:00:00:01", vendor="Emulex")
        assert dedup_key(row) == ("FAB-A", "srv1_1s", "10:00:00:00:c9:00:00:01")

    def test_missing_values_participate_as_empty_strings(self) -> None:
        row = FabricRecord(fabric=None, alias="srv1_1s", member_wwn=None)  # type: ignore[arg-type]
        assert dedup_key(row) == ("", "srv1_1s", "")


class TestDedupe:
    def test_empty_input(self) -> None:
        assert dedupe([]) == []

    def test_keeps_first_occurrence_only(self) -> None:
        first = _row("FAB-A", "srv1_1s", "wwn1", logged_in="Yes")
        second = _row("FAB-A", "srv1_1s", "wwn1", logged_in="YES")
        assert dedupe([first, second]) == [first]
        assert dedupe([first, second])[0].logged_in == "Yes"

    def test_login_flag_and_descriptive_columns_do_not_affect_key(self) -> None:
        rows = [
            _row("FAB-B", "srv1_2s", "wwn2", logged_in="no", zone="z1"),
            _row("FAB-B", "srv1_2s", "wwn2", logged_in="yes", zone="z2"),
        ]
        assert len(dedupe(rows)) == 1

    def test_same_wwn_on_other_fabric_is_distinct(self) -> None:
        rows = [_row("FAB-A", "srv1_1s", "wwn1"), _row("FAB-B", "srv1_1s", "wwn1")]
        assert dedupe(rows) == rows

    def test_preserves_relative_order_of_first_occurrences(self) -> None:
        a = _row("FAB-A", "h_1", "w1")
        b = _row("FAB-B", "h_1", "w2")
        c = _row("FAB-A", "h_2", "w3")
        rows = [a, b, a, c, b, a]
        assert dedupe(rows) == [a, b, c]

    def test_is_idempotent(self) -> None:
        rows = [
            _row("FAB-A", "h_1", "w1"),
            _row("FAB-A", "h_1", "w1"),
            _row("", "", ""),
            _row("", "", ""),
            _row("FAB-X", "h_2", "w9"),
        ]
        once = dedupe(rows)
        assert dedupe(once) == once
        assert len(once) == 3

    def test_does_not_mutate_input(self) -> None:
        rows = [_row("FAB-A", "h_1", "w1"), _row("FAB-A", "h_1", "w1")]
        dedupe(rows)
        assert len(rows) == 2
