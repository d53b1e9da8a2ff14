"""
app/validators/structure_validator.py

Structural pre-check for zoning tables before fabric validation runs.
"""

from __future__ import annotations

from typing import Any, Sequence

from app.domain.fabric_ingestion import COLUMN_FABRIC, REQUIRED_COLUMNS, StructureIssue
from zoning.models import VALID_FABRICS, FabricRecord


class FabricStructureError(ValueError):
    """
    Raised when an uploaded table cannot be validated safely.
    """

    def __init__(self, *, message: str, issues: Sequence[StructureIssue]) -> None:
        super().__init__(message)
        self.message = message
        self.issues = tuple(issues)

    @property
    def messages(self) -> list[str]:
        return [issue.message for issue in self.issues]

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "errors": [
                {
                    "code": issue.code,
                    "message": issue.message,
                    "column": issue.column,
                    "values": list(issue.values),
                }
                for issue in self.issues
            ],
        }


class FabricStructureValidator:
    """
    Checks required columns and fabric identifiers of a parsed table.
    """

    def __init__(
        self,
        *,
        required_columns: Sequence[str] = REQUIRED_COLUMNS,
        valid_fabrics: Sequence[str] = VALID_FABRICS,
    ) -> None:
        self._required_columns = tuple(required_columns)
        self._valid_fabrics = tuple(valid_fabrics)

    def collect_issues(
        self,
        *,
        headers: Sequence[str],
        records: Sequence[FabricRecord],
    ) -> list[StructureIssue]:
        """
        Return every structural issue; an empty list means the table is usable.
        """

        if not records:
            return [
                StructureIssue(
                    code="empty_table",
                    message="File is empty or invalid",
                )
            ]

        issues: list[StructureIssue] = []
        header_set = set(headers)
        for column in self._required_columns:
            if column not in header_set:
                issues.append(
                    StructureIssue(
                        code="missing_column",
                        message=f"Missing required column: {column}",
                        column=column,
                    )
                )

        invalid = self._invalid_fabrics(records)
        if invalid:
            issues.append(
                StructureIssue(
                    code="invalid_fabric",
                    message=(
                        f"Invalid fabric values found: {', '.join(invalid)}. "
                        f"Expected: {', '.join(self._valid_fabrics)}"
                    ),
                    column=COLUMN_FABRIC,
                    values=tuple(invalid),
                )
            )
        return issues

    def validate(
        self,
        *,
        headers: Sequence[str],
        records: Sequence[FabricRecord],
    ) -> None:
        """
        Raise :class:`FabricStructureError` listing every issue found.
        """

        issues = self.collect_issues(headers=headers, records=records)
        if issues:
            raise FabricStructureError(
                message=", ".join(issue.message for issue in issues),
                issues=issues,
            )

    def _invalid_fabrics(self, records: Sequence[FabricRecord]) -> list[str]:
        # Distinct values in first-seen order.
        invalid: dict[str, None] = {}
        for record in records:
            fabric = record.fabric
            if fabric and fabric not in self._valid_fabrics:
                invalid.setdefault(fabric, None)
        return list(invalid)
