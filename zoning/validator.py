"""
zoning/validator.py

Fabric redundancy validation engine.

Pipeline
--------
raw rows -> dedupe -> group by host -> count logins per fabric
         -> check each fabric -> combine verdicts -> sort by host

The validator never raises on data: malformed rows are either counted or,
when their fabric is unrecognised, ignored by the counters. One instance
covers one dataset; it holds no shared state and needs no locking.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, Sequence

from zoning.dedup import dedupe
from zoning.hosts import group_by_host
from zoning.models import (
    DuplicateInfo,
    FabricRecord,
    FinalValidation,
    HostAggregate,
    ValidationResult,
    ValidationSummary,
)
from zoning.rules import check_fabric, combine_verdicts

logger = logging.getLogger(__name__)


class FabricValidator:
    """
    Validates per-host path redundancy across FAB-A and FAB-B.

    Deduplication happens at construction; the unique rows and the
    duplicate counters are fixed for the lifetime of the instance, so
    :meth:`validate` is idempotent.
    """

    def __init__(self, records: Iterable[FabricRecord]) -> None:
        original = list(records)
        self._records: tuple[FabricRecord, ...] = tuple(dedupe(original))
        self._original_count = len(original)
        self._duplicates_removed = self._original_count - len(self._records)
        if self._duplicates_removed:
            logger.debug(
                "Removed duplicate zoning rows removed=%d original=%d",
                self._duplicates_removed,
                self._original_count,
            )

    @property
    def records(self) -> tuple[FabricRecord, ...]:
        return self._records

    def validate(self) -> list[ValidationResult]:
        """
        Return one result per host, sorted by host name.
        """

        hosts = group_by_host(self._records)
        results = [self._evaluate(aggregate) for aggregate in hosts.values()]
        return sorted(results, key=lambda result: result.host)

    def summary(self, results: Sequence[ValidationResult]) -> ValidationSummary:
        """
        Aggregate final statuses of *results* with the duplicate counters.
        """

        total = len(results)
        counts = {status: 0 for status in FinalValidation}
        for result in results:
            counts[result.final_validation] += 1

        good = counts[FinalValidation.GOOD]
        return ValidationSummary(
            total=total,
            good=good,
            fab_a_bad=counts[FinalValidation.FAB_A_BAD],
            fab_b_bad=counts[FinalValidation.FAB_B_BAD],
            both_bad=counts[FinalValidation.BOTH_BAD],
            percentage_good=_percentage(good, total),
            original_entries=self._original_count,
            duplicates_removed=self._duplicates_removed,
            unique_entries=len(self._records),
        )

    def duplicate_info(self) -> DuplicateInfo:
        return DuplicateInfo(
            original_entries=self._original_count,
            duplicates_removed=self._duplicates_removed,
            unique_entries=len(self._records),
        )

    @staticmethod
    def _evaluate(aggregate: HostAggregate) -> ValidationResult:
        fab_a = aggregate.fabric_a
        fab_b = aggregate.fabric_b
        validation_a = check_fabric(fab_a.logged_in, fab_a.not_logged_in)
        validation_b = check_fabric(fab_b.logged_in, fab_b.not_logged_in)
        return ValidationResult(
            host=aggregate.host_name,
            wwns=tuple(aggregate.wwns),
            fab_a_logged_in=fab_a.logged_in,
            fab_a_not_logged_in=fab_a.not_logged_in,
            validation_a=validation_a,
            fab_b_logged_in=fab_b.logged_in,
            fab_b_not_logged_in=fab_b.not_logged_in,
            validation_b=validation_b,
            final_validation=combine_verdicts(validation_a, validation_b),
        )


def _percentage(part: int, total: int) -> int:
    # Half-up rounding: 12.5 -> 13.
    if total <= 0:
        return 0
    return int(math.floor(100 * part / total + 0.5))
