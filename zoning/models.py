"""
zoning/models.py

Typed records shared by the fabric validation engine.

A :class:`FabricRecord` is one row of a zoning/login table: a member WWN
bound to an alias on a given fabric, with its login flag. The validator
groups records per host and emits one :class:`ValidationResult` each.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Final

FABRIC_A: Final[str] = "FAB-A"
FABRIC_B: Final[str] = "FAB-B"
VALID_FABRICS: Final[tuple[str, ...]] = (FABRIC_A, FABRIC_B)


class Verdict(str, Enum):
    """
    Per-fabric classification of a host's path-count pattern.
    """

    OK = "OK"
    ERROR = "Error"


class FinalValidation(str, Enum):
    """
    Combined classification of both fabrics for one host.
    """

    GOOD = "Good"
    FAB_A_BAD = "FAB-A Is BAD"
    FAB_B_BAD = "FAB-B Is BAD"
    BOTH_BAD = "Both FABs Are BAD"


@dataclass(frozen=True)
class FabricRecord:
    """
    One zoning table entry.

    Only ``fabric``, ``alias``, ``member_wwn`` and ``logged_in`` take part in
    validation; the descriptive columns are carried through untouched.
    """

    fabric: str = ""
    alias: str = ""
    member_wwn: str = ""
    logged_in: str = ""
    zone_configuration: str = ""
    zone_configuration_status: str = ""
    zone: str = ""
    zone_type: str = ""
    alias_type: str = ""
    peer_zone_member_type: str = ""
    port_role: str = ""
    vendor: str = ""
    slot_port: str = ""

    @property
    def is_logged_in(self) -> bool:
        return (self.logged_in or "").lower() == "yes"


@dataclass(frozen=True)
class WWNInfo:
    """
    One WWN seen for a host on a given fabric.
    """

    wwn: str
    is_logged_in: bool
    fabric: str


@dataclass
class FabricCounts:
    """
    Login counters for one host on one fabric.
    """

    logged_in: int = 0
    not_logged_in: int = 0

    def record(self, is_logged_in: bool) -> None:
        if is_logged_in:
            self.logged_in += 1
        else:
            self.not_logged_in += 1


@dataclass
class HostAggregate:
    """
    Per-host accumulator built while grouping records.
    """

    host_name: str
    fabric_a: FabricCounts = field(default_factory=FabricCounts)
    fabric_b: FabricCounts = field(default_factory=FabricCounts)
    wwns: list[WWNInfo] = field(default_factory=list)
    _seen_wwns: set[tuple[str, str]] = field(default_factory=set, init=False, repr=False, compare=False)

    def add_wwn(self, wwn: str, *, is_logged_in: bool, fabric: str) -> None:
        """
        Record a WWN once per (wwn, fabric); the first observation wins.
        """

        key = (wwn, fabric)
        if key in self._seen_wwns:
            return
        self._seen_wwns.add(key)
        self.wwns.append(WWNInfo(wwn=wwn, is_logged_in=is_logged_in, fabric=fabric))


@dataclass(frozen=True)
class ValidationResult:
    """
    Verdicts for one host.
    """

    host: str
    wwns: tuple[WWNInfo, ...]
    fab_a_logged_in: int
    fab_a_not_logged_in: int
    validation_a: Verdict
    fab_b_logged_in: int
    fab_b_not_logged_in: int
    validation_b: Verdict
    final_validation: FinalValidation

    @property
    def total_wwns(self) -> int:
        return len(self.wwns)

    @property
    def has_inactive_wwn(self) -> bool:
        return any(not info.is_logged_in for info in self.wwns)

    @property
    def server_type(self) -> str:
        """
        Operating-system family guessed from the number of zoned WWNs.
        """

        if self.total_wwns >= 8:
            return "AIX"
        if self.total_wwns >= 2:
            return "RHEL/ESXi"
        return "Unknown"


@dataclass(frozen=True)
class DuplicateInfo:
    """
    Row counts captured when a validator is constructed.
    """

    original_entries: int
    duplicates_removed: int
    unique_entries: int


@dataclass(frozen=True)
class ValidationSummary:
    """
    Aggregate statistics for one validation run.
    """

    total: int
    good: int
    fab_a_bad: int
    fab_b_bad: int
    both_bad: int
    percentage_good: int
    original_entries: int
    duplicates_removed: int
    unique_entries: int
