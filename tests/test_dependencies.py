from unittest.mock import AsyncMock, Mock

import pytest
from azure.identity.aio import ClientSecretCredential

from anf_smb.models.netapp import ProvisionedResources
from anf_smb.services import dependencies
from anf_smb.services.config import AzureAuthConfig
from anf_smb.services.dependencies import get_credential, get_smb_volume_setup_service, open_netapp_service


@pytest.mark.asyncio
async def test_service_principal_credential_from_auth_file():
    auth = AzureAuthConfig(subscription_id="sub", tenant_id="tenant", client_id="client", client_secret="secret")

    credential = get_credential(auth)
    try:
        assert isinstance(credential, ClientSecretCredential)
    finally:
        await credential.close()


@pytest.mark.asyncio
async def test_setup_service_checks_subnet_in_auth_subscription(fake_netapp, sample_config):
    auth = AzureAuthConfig(subscription_id="sub-123")

    setup = get_smb_volume_setup_service(netapp=fake_netapp, config=sample_config, auth=auth)
    await setup.provision(ProvisionedResources(), password="secret")

    name, kwargs = fake_netapp.calls[0]
    assert name == "get_resource_by_id"
    assert kwargs["resource_id"].startswith("/subscriptions/sub-123/resourceGroups/")


@pytest.mark.asyncio
async def test_open_netapp_service_closes_credential_when_service_close_fails(monkeypatch):
    credential = Mock()
    credential.close = AsyncMock()
    service = Mock()
    service.close = AsyncMock(side_effect=RuntimeError("close failed"))
    monkeypatch.setattr(dependencies, "get_credential", lambda auth: credential)
    monkeypatch.setattr(dependencies, "get_netapp_service", lambda auth, **kwargs: service)

    with pytest.raises(RuntimeError, match="close failed"):
        async with open_netapp_service(AzureAuthConfig(subscription_id="sub")) as opened:
            assert opened is service

    service.close.assert_awaited_once()
    credential.close.assert_awaited_once()
