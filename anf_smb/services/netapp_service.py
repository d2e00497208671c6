from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from azure.core.exceptions import HttpResponseError, ResourceNotFoundError
from azure.mgmt.netapp.models import ActiveDirectory, CapacityPool, NetAppAccount, Volume

from anf_smb.services.errors import (
    NetAppResourceNotFoundError,
    NetAppServiceError,
    ResourceKind,
)
from anf_smb.services.resource_id import anf_resource_kind, resource_value


def _is_not_found(exc: BaseException) -> bool:
    if isinstance(exc, ResourceNotFoundError):
        return True
    return isinstance(exc, HttpResponseError) and exc.status_code == 404


def _translate(exc: BaseException, message: str) -> NetAppServiceError:
    if _is_not_found(exc):
        return NetAppResourceNotFoundError(f"{message}: NotFound")
    return NetAppServiceError(f"{message}: {exc}")


class NetAppService:
    """Async wrapper over the Azure NetApp Files and Resource Manager SDK clients.

    Every SDK failure is re-raised as ``NetAppServiceError``; a missing resource
    becomes ``NetAppResourceNotFoundError`` so callers can tell "gone" apart
    from "broken". Long-running operations are awaited to completion.
    """

    def __init__(self, *, netapp: Any, resources: Any) -> None:
        self._netapp = netapp
        self._resources = resources

    async def close(self) -> None:
        await self._netapp.close()
        await self._resources.close()

    async def get_resource_by_id(self, *, resource_id: str, api_version: str) -> Any:
        """Generic ARM read, used to check that the subnet exists."""

        try:
            return await self._resources.resources.get_by_id(resource_id, api_version)
        except Exception as exc:
            raise _translate(exc, f"Failed reading resource {resource_id}") from exc

    async def create_account(
        self,
        *,
        location: str,
        resource_group: str,
        account_name: str,
        active_directories: Sequence[ActiveDirectory],
        tags: Optional[Mapping[str, str]] = None,
    ) -> NetAppAccount:
        body = NetAppAccount(
            location=location,
            tags=dict(tags or {}),
            active_directories=list(active_directories),
        )
        try:
            poller = await self._netapp.accounts.begin_create_or_update(resource_group, account_name, body)
            return await poller.result()
        except Exception as exc:
            raise _translate(exc, f"Failed creating account {account_name}") from exc

    async def create_capacity_pool(
        self,
        *,
        location: str,
        resource_group: str,
        account_name: str,
        pool_name: str,
        service_level: str,
        size_bytes: int,
        tags: Optional[Mapping[str, str]] = None,
    ) -> CapacityPool:
        body = CapacityPool(
            location=location,
            tags=dict(tags or {}),
            service_level=service_level,
            size=size_bytes,
        )
        try:
            poller = await self._netapp.pools.begin_create_or_update(resource_group, account_name, pool_name, body)
            return await poller.result()
        except Exception as exc:
            raise _translate(exc, f"Failed creating capacity pool {pool_name}") from exc

    async def create_volume(
        self,
        *,
        location: str,
        resource_group: str,
        account_name: str,
        pool_name: str,
        volume_name: str,
        service_level: str,
        subnet_id: str,
        protocol_types: Sequence[str],
        size_bytes: int,
        tags: Optional[Mapping[str, str]] = None,
    ) -> Volume:
        body = Volume(
            location=location,
            tags=dict(tags or {}),
            creation_token=volume_name,
            service_level=service_level,
            subnet_id=subnet_id,
            protocol_types=list(protocol_types),
            usage_threshold=size_bytes,
        )
        try:
            poller = await self._netapp.volumes.begin_create_or_update(
                resource_group, account_name, pool_name, volume_name, body
            )
            return await poller.result()
        except Exception as exc:
            raise _translate(exc, f"Failed creating volume {volume_name}") from exc

    async def get_anf_resource(self, *, resource_id: str) -> Any:
        """Read an account, capacity pool or volume, picking the call from its id."""

        kind = anf_resource_kind(resource_id)
        if kind is None:
            raise ValueError(f"Not an Azure NetApp Files resource id: {resource_id}")

        resource_group = resource_value(resource_id, "resourceGroups")
        account_name = resource_value(resource_id, "netAppAccounts")
        try:
            if kind is ResourceKind.VOLUME:
                return await self._netapp.volumes.get(
                    resource_group,
                    account_name,
                    resource_value(resource_id, "capacityPools"),
                    resource_value(resource_id, "volumes"),
                )
            if kind is ResourceKind.CAPACITY_POOL:
                return await self._netapp.pools.get(
                    resource_group,
                    account_name,
                    resource_value(resource_id, "capacityPools"),
                )
            return await self._netapp.accounts.get(resource_group, account_name)
        except Exception as exc:
            raise _translate(exc, f"Failed reading {kind.value} {resource_id}") from exc

    async def delete_volume(self, *, resource_group: str, account_name: str, pool_name: str, volume_name: str) -> None:
        try:
            poller = await self._netapp.volumes.begin_delete(resource_group, account_name, pool_name, volume_name)
            await poller.result()
        except Exception as exc:
            raise _translate(exc, f"Failed deleting volume {volume_name}") from exc

    async def delete_capacity_pool(self, *, resource_group: str, account_name: str, pool_name: str) -> None:
        try:
            poller = await self._netapp.pools.begin_delete(resource_group, account_name, pool_name)
            await poller.result()
        except Exception as exc:
            raise _translate(exc, f"Failed deleting capacity pool {pool_name}") from exc

    async def delete_account(self, *, resource_group: str, account_name: str) -> None:
        try:
            poller = await self._netapp.accounts.begin_delete(resource_group, account_name)
            await poller.result()
        except Exception as exc:
            raise _translate(exc, f"Failed deleting account {account_name}") from exc
