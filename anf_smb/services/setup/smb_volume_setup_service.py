from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from azure.mgmt.netapp.models import ActiveDirectory
from tqdm import tqdm

from anf_smb.models.netapp import MountTarget, ProvisionedResources
from anf_smb.services.config import SampleConfig
from anf_smb.services.errors import (
    NetAppResourceNotFoundError,
    NetAppServiceError,
    PrerequisiteCheckFailed,
    PrerequisiteNotFound,
    ResourceCreationFailed,
    ResourceDeletionFailed,
    ResourceDeletionTimeout,
    ResourceKind,
    ValidationError,
)
from anf_smb.services.netapp_service import NetAppService


logger = logging.getLogger(__name__)


class SmbVolumeSetupService:
    """Provisions an ANF account, capacity pool and SMB volume, and tears them down.

    Creation runs strictly account -> pool -> volume and stops at the first failure.
    Teardown runs volume -> pool -> account; after deleting a child it polls until
    the child is gone, since the service refuses to delete a non-empty parent.
    """

    VIRTUAL_NETWORKS_API_VERSION: str = "2019-09-01"

    def __init__(self, *, netapp: NetAppService, config: SampleConfig, subscription_id: str) -> None:
        self._netapp = netapp
        self._config = config
        self._subscription_id = subscription_id

    @asynccontextmanager
    async def provisioned(self, *, password: str) -> AsyncIterator[ProvisionedResources]:
        """Provision everything, yield the captured identifiers, then tear down.

        Teardown runs on every exit path, honouring ``config.should_clean_up``.
        """

        resources = ProvisionedResources()
        try:
            await self.provision(resources, password=password)
            yield resources
        finally:
            await self.teardown(resources, should_clean_up=self._config.should_clean_up)

    async def provision(self, resources: ProvisionedResources, *, password: str) -> ProvisionedResources:
        if not password:
            raise ValidationError("Active Directory password cannot be empty")

        config = self._config
        subnet_id = config.subnet_id(self._subscription_id)
        await self.check_subnet(subnet_id)
        resources.subnet_id = subnet_id

        logger.info("Creating Azure NetApp Files account...")
        # Only one AD configuration is permitted per subscription and region.
        active_directories = [
            ActiveDirectory(
                dns=config.domain_join.dns_list,
                domain=config.domain_join.ad_fqdn,
                username=config.domain_join.username,
                password=password,
                smb_server_name=config.domain_join.smb_server_name_prefix,
            )
        ]
        try:
            account = await self._netapp.create_account(
                location=config.location,
                resource_group=config.resource_group,
                account_name=config.account_name,
                active_directories=active_directories,
                tags=config.tags,
            )
        except NetAppServiceError as exc:
            raise ResourceCreationFailed(ResourceKind.ACCOUNT, exc) from exc
        resources.account_id = account.id
        logger.info("Account successfully created, resource id: %s", account.id)

        logger.info("Creating Capacity Pool...")
        try:
            pool = await self._netapp.create_capacity_pool(
                location=config.location,
                resource_group=config.resource_group,
                account_name=account.name or config.account_name,
                pool_name=config.capacity_pool_name,
                service_level=config.service_level,
                size_bytes=config.capacity_pool_size_bytes,
                tags=config.tags,
            )
        except NetAppServiceError as exc:
            raise ResourceCreationFailed(ResourceKind.CAPACITY_POOL, exc) from exc
        resources.capacity_pool_id = pool.id
        logger.info("Capacity Pool successfully created, resource id: %s", pool.id)

        logger.info("Creating SMB Volume...")
        try:
            volume = await self._netapp.create_volume(
                location=config.location,
                resource_group=config.resource_group,
                account_name=account.name or config.account_name,
                pool_name=config.capacity_pool_name,
                volume_name=config.volume_name,
                service_level=config.service_level,
                subnet_id=subnet_id,
                protocol_types=config.protocol_types,
                size_bytes=config.volume_size_bytes,
                tags=config.tags,
            )
        except NetAppServiceError as exc:
            raise ResourceCreationFailed(ResourceKind.VOLUME, exc) from exc
        resources.volume_id = volume.id
        resources.mount_targets = [MountTarget.from_sdk(t) for t in (volume.mount_targets or [])]
        logger.info("SMB volume successfully created, resource id: %s", volume.id)

        return resources

    async def check_subnet(self, subnet_id: str) -> None:
        logger.info("Checking if subnet %s exists.", subnet_id)
        try:
            await self._netapp.get_resource_by_id(
                resource_id=subnet_id,
                api_version=self.VIRTUAL_NETWORKS_API_VERSION,
            )
        except NetAppResourceNotFoundError as exc:
            raise PrerequisiteNotFound(subnet_id) from exc
        except NetAppServiceError as exc:
            raise PrerequisiteCheckFailed(subnet_id, exc) from exc

    async def teardown(self, resources: ProvisionedResources, *, should_clean_up: bool) -> None:
        logger.info("Exiting")
        if not should_clean_up:
            return

        logger.info("\tPerforming clean up")
        config = self._config

        if resources.volume_id:
            logger.info("\tCleaning up SMB volume...")
            try:
                await self._netapp.delete_volume(
                    resource_group=config.resource_group,
                    account_name=config.account_name,
                    pool_name=config.capacity_pool_name,
                    volume_name=config.volume_name,
                )
            except NetAppServiceError as exc:
                raise ResourceDeletionFailed(ResourceKind.VOLUME, exc) from exc
            await self.wait_for_no_resource(resources.volume_id, kind=ResourceKind.VOLUME)
            logger.info("\tVolume successfully deleted")

        if resources.capacity_pool_id:
            logger.info("\tCleaning up capacity pool...")
            try:
                await self._netapp.delete_capacity_pool(
                    resource_group=config.resource_group,
                    account_name=config.account_name,
                    pool_name=config.capacity_pool_name,
                )
            except NetAppServiceError as exc:
                raise ResourceDeletionFailed(ResourceKind.CAPACITY_POOL, exc) from exc
            await self.wait_for_no_resource(resources.capacity_pool_id, kind=ResourceKind.CAPACITY_POOL)
            logger.info("\tCapacity pool successfully deleted")

        if resources.account_id:
            logger.info("\tCleaning up account...")
            try:
                await self._netapp.delete_account(
                    resource_group=config.resource_group,
                    account_name=config.account_name,
                )
            except NetAppServiceError as exc:
                raise ResourceDeletionFailed(ResourceKind.ACCOUNT, exc) from exc
            logger.info("\tAccount successfully deleted")

        logger.info("\tCleanup completed!")

    async def wait_for_no_resource(self, resource_id: str, *, kind: ResourceKind) -> None:
        """Poll until ``resource_id`` reads as not found.

        Raises:
            ResourceDeletionTimeout: if the resource is still readable after
                ``config.wait_retries`` attempts.
        """

        retries = self._config.wait_retries
        interval = self._config.wait_interval_seconds

        with tqdm(total=retries, desc=f"Waiting for {kind.value} deletion", unit="check", leave=False) as progress:
            for attempt in range(1, retries + 1):
                try:
                    await self._netapp.get_anf_resource(resource_id=resource_id)
                except NetAppResourceNotFoundError:
                    return
                except NetAppServiceError as exc:
                    # Anything other than "not found" means it may still be there.
                    logger.debug("Still waiting for %s deletion (attempt=%d): %s", kind.value, attempt, exc)

                progress.update(1)
                if attempt < retries:
                    await asyncio.sleep(interval)

        raise ResourceDeletionTimeout(kind, resource_id, retries)
