"""
zoning/dedup.py

Exact-duplicate removal for zoning table rows.
"""

from __future__ import annotations

from typing import Iterable

from zoning.models import FabricRecord

DedupKey = tuple[str, str, str]


def dedup_key(record: FabricRecord) -> DedupKey:
    """
    Return the identity of a row: (fabric, alias, member WWN).

    Missing values participate as empty strings.
    """

    return (
        record.fabric or "",
        record.alias or "",
        record.member_wwn or "",
    )


def dedupe(records: Iterable[FabricRecord]) -> list[FabricRecord]:
    """
    Keep the first row for every key, preserving input order.
    """

    seen: set[DedupKey] = set()
    unique: list[FabricRecord] = []
    for record in records:
        key = dedup_key(record)
        if key in seen:
            continue
        seen.add(key)
        unique.append(record)
    return unique
