"""
zoning/hosts.py

Host identity derivation and per-host aggregation.

Aliases encode the host name followed by a port suffix, separated by the
last underscore:

    easp6adm_1s             -> easp6adm
    ohgrodcvm218_1          -> ohgrodcvm218
    MN01_1-1-A_FE_FC01_PG01 -> MN01_1-1-A_FE_FC01

Aliases that use underscores internally therefore keep everything up to
the final segment.
"""

from __future__ import annotations

from typing import Iterable

from zoning.models import FABRIC_A, FABRIC_B, FabricRecord, HostAggregate


def extract_host_name(alias: str) -> str:
    """
    Strip the trailing ``_<suffix>`` segment from *alias*.
    """

    alias = alias or ""
    head, separator, _ = alias.rpartition("_")
    if not separator:
        return alias
    return head


def group_by_host(records: Iterable[FabricRecord]) -> dict[str, HostAggregate]:
    """
    Build one :class:`HostAggregate` per host, in first-seen order.

    Rows on fabrics other than FAB-A/FAB-B add their WWN to the host but
    leave both counters untouched.
    """

    hosts: dict[str, HostAggregate] = {}
    for record in records:
        host_name = extract_host_name(record.alias)
        aggregate = hosts.get(host_name)
        if aggregate is None:
            aggregate = HostAggregate(host_name=host_name)
            hosts[host_name] = aggregate

        is_logged_in = record.is_logged_in
        aggregate.add_wwn(
            record.member_wwn or "",
            is_logged_in=is_logged_in,
            fabric=record.fabric or "",
        )

        if record.fabric == FABRIC_A:
            aggregate.fabric_a.record(is_logged_in)
        elif record.fabric == FABRIC_B:
            aggregate.fabric_b.record(is_logged_in)

    return hosts
