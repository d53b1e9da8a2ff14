"""
tests/test_storage.py

Server to storage array mapping over storage-side zone members.
"""

from __future__ import annotations

import pytest

from zoning.models import FabricRecord
from zoning.storage import (
    FabricLink,
    StorageFilter,
    StorageHealth,
    StorageSummary,
    map_storage,
    server_from_zone,
    storage_from_alias,
    summarize_storage,
)


def _row(
    zone: str,
    alias: str,
    wwn: str,
    logged_in: str,
    *,
    fabric: str = "FAB-A",
    vendor: str = "",
) -> FabricRecord:
    return FabricRecord(
        fabric=fabric,
        zone=zone,
        alias=alias,
        member_wwn=wwn,
        logged_in=logged_in,
        vendor=vendor,
    )


@pytest.fixture()
def rows() -> list[FabricRecord]:
    return [
        _row("wamrpgp1_2_gpibox01_pg01", "gpibox01_n1fc1", "50:00:00:00:00:00:00:01", "Yes", vendor="NetApp"),
        _row("wamrpgp1_2_gpibox01_pg01", "gpibox01_n2fc1", "50:00:00:00:00:00:00:02", "Yes", fabric="FAB-B", vendor="NetApp"),
        # host-side member of the same zone; not a storage WWN
        _row("wamrpgp1_2_gpibox01_pg01", "wamrpgp1_1s", "10:00:00:00:00:00:00:01", "Yes"),
        _row("dbsrv_1_vmax02_pg01", "vmax02_fa1", "50:00:00:00:00:00:00:03", "No", vendor="EMC"),
        _row("dbsrv_1_vmax02_pg01", "vmax02_fa1", "50:00:00:00:00:00:00:03", "Yes", vendor="EMC"),
        _row("dbsrv_1_vmax02_pg01", "vmax02_fa2", "50:00:00:00:00:00:00:04", "no", fabric="FAB-B", vendor="EMC"),
    ]


@pytest.mark.parametrize(
    "zone, expected",
    [
        ("wamrpgp1_2_gpibox01_pg01", "wamrpgp1"),
        ("plainzone", "plainzone"),
        ("srv_x_y", "srv"),
        ("", "Unknown"),
    ],
)
def test_server_from_zone(zone: str, expected: str) -> None:
    assert server_from_zone(zone) == expected


@pytest.mark.parametrize(
    "alias, expected",
    [
        ("gpibox01_n1fc1", "gpibox01"),
        ("vmax02_fa1", "vmax02"),
        ("array_a_b", "array"),
        ("solo", "solo"),
        ("", "Unknown"),
    ],
)
def test_storage_from_alias(alias: str, expected: str) -> None:
    assert storage_from_alias(alias) == expected


def test_only_storage_wwns_are_mapped(rows: list[FabricRecord]) -> None:
    mappings = map_storage(rows)

    assert [mapping.server for mapping in mappings] == ["dbsrv", "wamrpgp1"]
    wamrpgp1 = mappings[1]
    assert wamrpgp1.storages == ("gpibox01",)
    assert wamrpgp1.ports == ("gpibox01_n1fc1", "gpibox01_n2fc1")
    assert wamrpgp1.fabrics == ("FAB-A", "FAB-B")
    assert wamrpgp1.vendors == ("NetApp",)
    assert wamrpgp1.zones == ("wamrpgp1_2_gpibox01_pg01",)
    assert all(path.wwn.startswith("5") for path in wamrpgp1.paths)
    assert wamrpgp1.health is StorageHealth.OK
    assert wamrpgp1.path_status == "2/2"


def test_port_counts_logged_in_when_any_row_is(rows: list[FabricRecord]) -> None:
    dbsrv = map_storage(rows)[0]

    assert dbsrv.ports == ("vmax02_fa1", "vmax02_fa2")
    assert dbsrv.logged_in_ports == 1
    assert dbsrv.total_ports == 2
    assert dbsrv.path_status == "1/2"
    # every not-logged-in row counts, even on a port that is also logged in
    assert dbsrv.not_logged_in_count == 2
    assert dbsrv.health is StorageHealth.ERROR
    assert len(dbsrv.paths) == 3


def test_connectivity_groups_by_storage_then_fabric(rows: list[FabricRecord]) -> None:
    dbsrv = map_storage(rows)[0]

    assert dbsrv.connectivity() == [
        FabricLink(storage="vmax02", fabric="FAB-A", logged_in=1, total=2),
        FabricLink(storage="vmax02", fabric="FAB-B", logged_in=0, total=1),
    ]
    assert not dbsrv.connectivity()[0].is_healthy


def test_blank_zone_groups_under_unknown() -> None:
    mappings = map_storage([_row("", "arr_p1", "5000", "yes")])
    assert mappings[0].server == "Unknown"


def test_summary(rows: list[FabricRecord]) -> None:
    assert summarize_storage(map_storage(rows)) == StorageSummary(
        total_servers=2,
        total_storages=2,
        total_paths=4,
        healthy_servers=1,
        unhealthy_servers=1,
    )


def test_summary_of_nothing() -> None:
    assert map_storage([_row("z_1_a", "h_1", "10:00", "yes")]) == []
    assert summarize_storage([]) == StorageSummary(0, 0, 0, 0, 0)


class TestStorageFilter:
    def test_search_matches_server_storage_or_vendor(self, rows: list[FabricRecord]) -> None:
        mappings = map_storage(rows)

        assert [m.server for m in StorageFilter(search="WAMR").apply(mappings)] == ["wamrpgp1"]
        assert [m.server for m in StorageFilter(search="vmax").apply(mappings)] == ["dbsrv"]
        assert [m.server for m in StorageFilter(search="netapp").apply(mappings)] == ["wamrpgp1"]

    def test_errors_only(self, rows: list[FabricRecord]) -> None:
        mappings = map_storage(rows)
        assert [m.server for m in StorageFilter(health="errors").apply(mappings)] == ["dbsrv"]

    def test_fabric(self, rows: list[FabricRecord]) -> None:
        mappings = map_storage(rows)
        assert len(StorageFilter(fabric="FAB-B").apply(mappings)) == 2
        assert StorageFilter(fabric="FAB-C").apply(mappings) == []

    def test_from_params_blank_means_all(self) -> None:
        assert StorageFilter.from_params(search=" ", fabric="", health=None) == StorageFilter()

    def test_rejects_unknown_health(self) -> None:
        with pytest.raises(ValueError):
            StorageFilter(health="OK")
