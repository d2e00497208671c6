"""Helpers for Azure Resource Manager resource identifiers.

An ANF volume id looks like:

    /subscriptions/<sub>/resourceGroups/<rg>/providers/Microsoft.NetApp/
        netAppAccounts/<account>/capacityPools/<pool>/volumes/<volume>
"""
from __future__ import annotations

from typing import Optional

from anf_smb.services.errors import ResourceKind


def _segments(resource_id: str) -> list[str]:
    return [part for part in resource_id.strip().split("/") if part]


def resource_value(resource_id: str, key: str) -> Optional[str]:
    """Return the segment following ``key`` (case-insensitive), or None."""

    segments = _segments(resource_id)
    wanted = key.strip("/").lower()
    for index, segment in enumerate(segments[:-1]):
        if segment.lower() == wanted:
            return segments[index + 1]
    return None


def anf_resource_kind(resource_id: str) -> Optional[ResourceKind]:
    # Deepest child wins: a volume id also contains the pool and account keys.
    segments = [segment.lower() for segment in _segments(resource_id)]
    if "microsoft.netapp" not in segments:
        return None
    if resource_value(resource_id, "volumes"):
        return ResourceKind.VOLUME
    if resource_value(resource_id, "capacityPools"):
        return ResourceKind.CAPACITY_POOL
    if resource_value(resource_id, "netAppAccounts"):
        return ResourceKind.ACCOUNT
    return None
