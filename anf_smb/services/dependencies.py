from __future__ import annotations

from contextlib import AsyncExitStack, asynccontextmanager
from typing import Any, AsyncIterator

import aiohttp
from azure.core.pipeline.transport import AioHttpTransport
from azure.identity.aio import ClientSecretCredential, DefaultAzureCredential
from azure.mgmt.netapp.aio import NetAppManagementClient
from azure.mgmt.resource.resources.aio import ResourceManagementClient

from anf_smb.services.config import AzureAuthConfig, SampleConfig
from anf_smb.services.netapp_service import NetAppService
from anf_smb.services.setup.smb_volume_setup_service import SmbVolumeSetupService


def get_credential(auth: AzureAuthConfig) -> Any:
    """Service principal from the auth file when complete, otherwise the default chain."""

    if auth.has_client_secret:
        return ClientSecretCredential(
            tenant_id=auth.tenant_id,
            client_id=auth.client_id,
            client_secret=auth.client_secret,
        )
    return DefaultAzureCredential()


def _transport(session: aiohttp.ClientSession) -> AioHttpTransport:
    # The session is owned by open_netapp_service, not by the SDK pipeline.
    return AioHttpTransport(session=session, session_owner=False)


def get_netapp_service(
    auth: AzureAuthConfig,
    *,
    credential: Any,
    session: aiohttp.ClientSession,
) -> NetAppService:
    return NetAppService(
        netapp=NetAppManagementClient(credential, auth.subscription_id, transport=_transport(session)),
        resources=ResourceManagementClient(credential, auth.subscription_id, transport=_transport(session)),
    )


@asynccontextmanager
async def open_netapp_service(auth: AzureAuthConfig) -> AsyncIterator[NetAppService]:
    """Provider for a NetAppService sharing one aiohttp session; closes everything on exit."""

    async with AsyncExitStack() as stack:
        session = await stack.enter_async_context(aiohttp.ClientSession())
        credential = get_credential(auth)
        stack.push_async_callback(credential.close)
        service = get_netapp_service(auth, credential=credential, session=session)
        stack.push_async_callback(service.close)
        yield service


def get_smb_volume_setup_service(
    *,
    netapp: NetAppService,
    config: SampleConfig,
    auth: AzureAuthConfig,
) -> SmbVolumeSetupService:
    return SmbVolumeSetupService(netapp=netapp, config=config, subscription_id=auth.subscription_id)
