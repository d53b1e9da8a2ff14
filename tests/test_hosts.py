"""
tests/test_hosts.py

Host identity derivation and per-host aggregation.
"""

from __future__ import annotations

import pytest

from zoning.hosts import extract_host_name, group_by_host
from zoning.models import FabricRecord, WWNInfo


@pytest.mark.parametrize(
    "alias, expected",
    [
        ("easp6adm_1s", "easp6adm"),
        ("aepdbgp1adm_0s", "aepdbgp1adm"),
        ("ohgrodcvm218_1", "ohgrodcvm218"),
        ("MN01_1-1-A_FE_FC01_PG01", "MN01_1-1-A_FE_FC01"),
        ("standalone", "standalone"),
        ("trailing_", "trailing"),
        ("_leading", ""),
        ("", ""),
    ],
)
def test_extract_host_name(alias: str, expected: str) -> None:
    assert extract_host_name(alias) == expected


def test_group_by_host_counts_per_fabric() -> None:
    rows = [
        FabricRecord(fabric="FAB-A", alias="srv1_1s", member_wwn="w1", logged_in="yes"),
        FabricRecord(fabric="FAB-A", alias="srv1_2s", member_wwn="w2", logged_in="no"),
        FabricRecord(fabric="FAB-B", alias="srv1_3s", member_wwn="w3", logged_in="Yes"),
        FabricRecord(fabric="FAB-B", alias="srv2_1", member_wwn="w4", logged_in="YES"),
    ]

    hosts = group_by_host(rows)

    assert list(hosts) == ["srv1", "srv2"]
    srv1 = hosts["srv1"]
    assert (srv1.fabric_a.logged_in, srv1.fabric_a.not_logged_in) == (1, 1)
    assert (srv1.fabric_b.logged_in, srv1.fabric_b.not_logged_in) == (1, 0)
    srv2 = hosts["srv2"]
    assert (srv2.fabric_a.logged_in, srv2.fabric_a.not_logged_in) == (0, 0)
    assert (srv2.fabric_b.logged_in, srv2.fabric_b.not_logged_in) == (1, 0)


def test_unknown_fabric_adds_wwn_but_no_counts() -> None:
    rows = [FabricRecord(fabric="FAB-C", alias="srv1_1s", member_wwn="w1", logged_in="yes")]

    aggregate = group_by_host(rows)["srv1"]

    assert aggregate.fabric_a.logged_in == aggregate.fabric_a.not_logged_in == 0
    assert aggregate.fabric_b.logged_in == aggregate.fabric_b.not_logged_in == 0
    assert aggregate.wwns == [WWNInfo(wwn="w1", is_logged_in=True, fabric="FAB-C")]


def test_wwns_are_unique_per_fabric_and_first_seen_wins() -> None:
    rows = [
        FabricRecord(fabric="FAB-A", alias="srv1_1s", member_wwn="w1", logged_in="no"),
        FabricRecord(fabric="FAB-A", alias="srv1_2s", member_wwn="w1", logged_in="yes"),
        FabricRecord(fabric="FAB-B", alias="srv1_3s", member_wwn="w1", logged_in="yes"),
    ]

    aggregate = group_by_host(rows)["srv1"]

    assert aggregate.wwns == [
        WWNInfo(wwn="w1", is_logged_in=False, fabric="FAB-A"),
        WWNInfo(wwn="w1", is_logged_in=True, fabric="FAB-B"),
    ]
    # Both FAB-A rows still count; only the WWN list is de-duplicated.
    assert (aggregate.fabric_a.logged_in, aggregate.fabric_a.not_logged_in) == (1, 1)


def test_login_flag_is_case_insensitive_and_anything_else_is_not_logged_in() -> None:
    assert FabricRecord(logged_in="YeS").is_logged_in
    # Cells are stripped at ingestion; the flag itself compares the raw text.
    assert not FabricRecord(logged_in=" yes ").is_logged_in
    assert not FabricRecord(logged_in="no").is_logged_in
    assert not FabricRecord(logged_in="y").is_logged_in
    assert not FabricRecord(logged_in="").is_logged_in
