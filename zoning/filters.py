"""
zoning/filters.py

Read-only filtering of validation results for display and export.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence, TypeVar

from zoning.models import FinalValidation, ValidationResult, Verdict

ALL = "all"
ERRORS = "errors"

T = TypeVar("T")

_STATUS_VALUES = {status.value for status in FinalValidation}
_VERDICT_VALUES = {verdict.value for verdict in Verdict}


@dataclass(frozen=True)
class ResultFilter:
    """
    Host/status filter.

    ``status`` is ``"all"``, ``"errors"`` (anything but Good) or one final
    validation label. ``fab_a``/``fab_b`` are ``"all"``, ``"OK"`` or
    ``"Error"``. ``search`` matches a host substring, case-insensitively.
    """

    search: str = ""
    status: str = ALL
    fab_a: str = ALL
    fab_b: str = ALL

    def __post_init__(self) -> None:
        if self.status not in _STATUS_VALUES | {ALL, ERRORS}:
            allowed = ", ".join([ALL, ERRORS, *sorted(_STATUS_VALUES)])
            raise ValueError(f"Unsupported status filter {self.status!r}. Allowed values: {allowed}.")
        for name in ("fab_a", "fab_b"):
            value = getattr(self, name)
            if value not in _VERDICT_VALUES | {ALL}:
                allowed = ", ".join([ALL, *sorted(_VERDICT_VALUES)])
                raise ValueError(f"Unsupported {name} filter {value!r}. Allowed values: {allowed}.")

    @classmethod
    def from_params(
        cls,
        *,
        search: str | None = None,
        status: str | None = None,
        fab_a: str | None = None,
        fab_b: str | None = None,
    ) -> "ResultFilter":
        """
        Build a filter from optional query values; blanks mean "all".
        """

        return cls(
            search=(search or "").strip(),
            status=(status or "").strip() or ALL,
            fab_a=(fab_a or "").strip() or ALL,
            fab_b=(fab_b or "").strip() or ALL,
        )

    @property
    def is_empty(self) -> bool:
        return not self.search and self.status == ALL and self.fab_a == ALL and self.fab_b == ALL

    def matches(self, result: ValidationResult) -> bool:
        if self.search and self.search.lower() not in result.host.lower():
            return False

        if self.status == ERRORS:
            if result.final_validation == FinalValidation.GOOD:
                return False
        elif self.status != ALL and result.final_validation.value != self.status:
            return False

        if self.fab_a != ALL and result.validation_a.value != self.fab_a:
            return False
        if self.fab_b != ALL and result.validation_b.value != self.fab_b:
            return False
        return True

    def apply(self, results: Iterable[ValidationResult]) -> list[ValidationResult]:
        return [result for result in results if self.matches(result)]


def select_rows(results: Sequence[T], indices: Iterable[int]) -> list[T]:
    """
    Return the rows at *indices* in display order, or every row when
    nothing is selected. Stale indices past the end are ignored.
    """

    chosen = sorted({index for index in indices if 0 <= index < len(results)})
    if not chosen:
        return list(results)
    return [results[index] for index in chosen]
