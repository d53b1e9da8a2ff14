"""
zoning/storage.py

Server -> storage array mapping built from storage-side zone members.

Only rows whose member WWN starts with ``5`` (NAA type 5, storage target
ports) take part. The server is the zone name up to its first underscore,
the storage array is the alias up to its first underscore:

    zone  wamrpgp1_2_gpibox01_pg01  -> server  wamrpgp1
    alias gpibox01_n1fc1            -> storage gpibox01

A server is healthy when every one of its storage paths is logged in.
Rows are taken as read, before deduplication, so repeated paths count
once per occurrence in ``not_logged_in_count``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from zoning.filters import ALL, ERRORS
from zoning.models import FabricRecord

STORAGE_WWN_PREFIX = "5"
UNKNOWN = "Unknown"


class StorageHealth(str, Enum):
    OK = "OK"
    ERROR = "ERROR"


@dataclass(frozen=True)
class StoragePath:
    """
    One storage-side zone member seen for a server.
    """

    wwn: str
    is_logged_in: bool
    storage: str
    fabric: str
    port: str


@dataclass(frozen=True)
class FabricLink:
    """
    Logged-in paths between a server and one storage array on one fabric.
    """

    storage: str
    fabric: str
    logged_in: int
    total: int

    @property
    def is_healthy(self) -> bool:
        return self.logged_in == self.total


@dataclass(frozen=True)
class StorageMapping:
    """
    Everything one server reaches on the storage side.

    ``ports`` holds distinct storage aliases; a port counts as logged in
    when any of its rows is logged in.
    """

    server: str
    storages: tuple[str, ...]
    zones: tuple[str, ...]
    ports: tuple[str, ...]
    vendors: tuple[str, ...]
    fabrics: tuple[str, ...]
    paths: tuple[StoragePath, ...]
    logged_in_ports: int
    not_logged_in_count: int

    @property
    def total_ports(self) -> int:
        return len(self.ports)

    @property
    def health(self) -> StorageHealth:
        return StorageHealth.ERROR if self.not_logged_in_count else StorageHealth.OK

    @property
    def path_status(self) -> str:
        return f"{self.logged_in_ports}/{self.total_ports}"

    def connectivity(self) -> list[FabricLink]:
        """
        Group paths by storage array, then fabric, in first-seen order.
        """

        counts: dict[tuple[str, str], list[int]] = {}
        for path in self.paths:
            entry = counts.setdefault((path.storage, path.fabric), [0, 0])
            entry[0] += int(path.is_logged_in)
            entry[1] += 1

        order = {storage: index for index, storage in enumerate(self.storages)}
        keys = sorted(counts, key=lambda key: order.get(key[0], len(order)))
        return [
            FabricLink(
                storage=storage,
                fabric=fabric,
                logged_in=counts[(storage, fabric)][0],
                total=counts[(storage, fabric)][1],
            )
            for storage, fabric in keys
        ]


@dataclass(frozen=True)
class StorageSummary:
    total_servers: int
    total_storages: int
    total_paths: int
    healthy_servers: int
    unhealthy_servers: int


# ---------------------------------------------------------------------------
# Name derivation
# ---------------------------------------------------------------------------


def is_storage_wwn(wwn: str) -> bool:
    return bool(wwn) and wwn.startswith(STORAGE_WWN_PREFIX)


def server_from_zone(zone: str) -> str:
    if not zone:
        return UNKNOWN
    return zone.split("_", 1)[0]


def storage_from_alias(alias: str) -> str:
    if not alias:
        return UNKNOWN
    return alias.split("_", 1)[0]


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


@dataclass
class _ServerAccumulator:
    server: str
    storages: dict[str, None] = field(default_factory=dict)
    zones: dict[str, None] = field(default_factory=dict)
    port_status: dict[str, bool] = field(default_factory=dict)
    vendors: dict[str, None] = field(default_factory=dict)
    fabrics: dict[str, None] = field(default_factory=dict)
    paths: list[StoragePath] = field(default_factory=list)
    not_logged_in_count: int = 0

    def add(self, record: FabricRecord) -> None:
        storage = storage_from_alias(record.alias)
        is_logged_in = record.is_logged_in

        self.storages.setdefault(storage)
        if record.zone:
            self.zones.setdefault(record.zone)
        if record.alias:
            self.port_status[record.alias] = self.port_status.get(record.alias, False) or is_logged_in
        if record.vendor:
            self.vendors.setdefault(record.vendor)
        self.fabrics.setdefault(record.fabric)
        self.paths.append(
            StoragePath(
                wwn=record.member_wwn,
                is_logged_in=is_logged_in,
                storage=storage,
                fabric=record.fabric,
                port=record.alias,
            )
        )
        if not is_logged_in:
            self.not_logged_in_count += 1

    def freeze(self) -> StorageMapping:
        return StorageMapping(
            server=self.server,
            storages=tuple(self.storages),
            zones=tuple(self.zones),
            ports=tuple(self.port_status),
            vendors=tuple(self.vendors),
            fabrics=tuple(self.fabrics),
            paths=tuple(self.paths),
            logged_in_ports=sum(1 for status in self.port_status.values() if status),
            not_logged_in_count=self.not_logged_in_count,
        )


def map_storage(records: Iterable[FabricRecord]) -> list[StorageMapping]:
    """
    Build one :class:`StorageMapping` per server, sorted by server name.
    """

    servers: dict[str, _ServerAccumulator] = {}
    for record in records:
        if not is_storage_wwn(record.member_wwn):
            continue
        server = server_from_zone(record.zone)
        accumulator = servers.get(server)
        if accumulator is None:
            accumulator = servers[server] = _ServerAccumulator(server=server)
        accumulator.add(record)

    return sorted((acc.freeze() for acc in servers.values()), key=lambda mapping: mapping.server)


def summarize_storage(mappings: Iterable[StorageMapping]) -> StorageSummary:
    mappings = list(mappings)
    storages = {storage for mapping in mappings for storage in mapping.storages}
    healthy = sum(1 for mapping in mappings if mapping.health is StorageHealth.OK)
    return StorageSummary(
        total_servers=len(mappings),
        total_storages=len(storages),
        total_paths=sum(mapping.total_ports for mapping in mappings),
        healthy_servers=healthy,
        unhealthy_servers=len(mappings) - healthy,
    )


# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class StorageFilter:
    """
    ``search`` matches server, storage or vendor names case-insensitively;
    ``fabric`` is ``"all"`` or a fabric name; ``health`` is ``"all"`` or
    ``"errors"``.
    """

    search: str = ""
    fabric: str = ALL
    health: str = ALL

    def __post_init__(self) -> None:
        if self.health not in (ALL, ERRORS):
            raise ValueError(
                f"Unsupported health filter {self.health!r}. Allowed values: {ALL}, {ERRORS}."
            )

    @classmethod
    def from_params(
        cls,
        *,
        search: str | None = None,
        fabric: str | None = None,
        health: str | None = None,
    ) -> "StorageFilter":
        return cls(
            search=(search or "").strip(),
            fabric=(fabric or "").strip() or ALL,
            health=(health or "").strip() or ALL,
        )

    def matches(self, mapping: StorageMapping) -> bool:
        if self.search:
            needle = self.search.lower()
            names = (mapping.server, *mapping.storages, *mapping.vendors)
            if not any(needle in name.lower() for name in names):
                return False
        if self.fabric != ALL and self.fabric not in mapping.fabrics:
            return False
        if self.health == ERRORS and mapping.health is not StorageHealth.ERROR:
            return False
        return True

    def apply(self, mappings: Iterable[StorageMapping]) -> list[StorageMapping]:
        return [mapping for mapping in mappings if self.matches(mapping)]
