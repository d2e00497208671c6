from __future__ import annotations

import os
from contextlib import asynccontextmanager
from types import SimpleNamespace
from typing import Any, Optional

import pytest

from anf_smb.services.config import AzureAuthConfig, SampleConfig
from anf_smb.services.errors import NetAppResourceNotFoundError

SUBSCRIPTION_ID = "00000000-1111-2222-3333-444444444444"
RG_PREFIX = f"/subscriptions/{SUBSCRIPTION_ID}/resourceGroups/anf-smb-rg/providers/Microsoft.NetApp"


class FakeNetAppService:
    """In-memory stand-in for NetAppService that records every call in order."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.failures: dict[str, BaseException] = {}
        self.subnet_error: Optional[BaseException] = None
        # Number of reads that still find the resource before it reads as not found.
        self.reads_before_gone: dict[str, int] = {}
        self.mount_targets = [
            SimpleNamespace(
                mount_target_id="mt-1",
                file_system_id="fs-1",
                ip_address="10.2.1.4",
                smb_server_fqdn="pmc03-abcd.anf.local",
            )
        ]

    @property
    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def _record(self, name: str, **kwargs: Any) -> None:
        self.calls.append((name, kwargs))
        if name in self.failures:
            raise self.failures[name]

    async def close(self) -> None:
        pass

    async def get_resource_by_id(self, *, resource_id: str, api_version: str) -> Any:
        self._record("get_resource_by_id", resource_id=resource_id, api_version=api_version)
        if self.subnet_error is not None:
            raise self.subnet_error
        return SimpleNamespace(id=resource_id)

    async def create_account(self, **kwargs: Any) -> Any:
        self._record("create_account", **kwargs)
        name = kwargs["account_name"]
        return SimpleNamespace(id=f"{RG_PREFIX}/netAppAccounts/{name}", name=name)

    async def create_capacity_pool(self, **kwargs: Any) -> Any:
        self._record("create_capacity_pool", **kwargs)
        account, pool = kwargs["account_name"], kwargs["pool_name"]
        return SimpleNamespace(
            id=f"{RG_PREFIX}/netAppAccounts/{account}/capacityPools/{pool}",
            name=f"{account}/{pool}",
        )

    async def create_volume(self, **kwargs: Any) -> Any:
        self._record("create_volume", **kwargs)
        account, pool, volume = kwargs["account_name"], kwargs["pool_name"], kwargs["volume_name"]
        return SimpleNamespace(
            id=f"{RG_PREFIX}/netAppAccounts/{account}/capacityPools/{pool}/volumes/{volume}",
            name=f"{account}/{pool}/{volume}",
            mount_targets=self.mount_targets,
        )

    async def get_anf_resource(self, *, resource_id: str) -> Any:
        self._record("get_anf_resource", resource_id=resource_id)
        remaining = self.reads_before_gone.get(resource_id, 0)
        if remaining > 0:
            self.reads_before_gone[resource_id] = remaining - 1
            return SimpleNamespace(id=resource_id)
        raise NetAppResourceNotFoundError(f"Failed reading {resource_id}: NotFound")

    async def delete_volume(self, **kwargs: Any) -> None:
        self._record("delete_volume", **kwargs)

    async def delete_capacity_pool(self, **kwargs: Any) -> None:
        self._record("delete_capacity_pool", **kwargs)

    async def delete_account(self, **kwargs: Any) -> None:
        self._record("delete_account", **kwargs)


@pytest.fixture
def fake_netapp() -> FakeNetAppService:
    return FakeNetAppService()


@pytest.fixture
def sample_config() -> SampleConfig:
    return SampleConfig(account_name="anf-smb-test", wait_retries=3, wait_interval_seconds=0)


@pytest.fixture
def cleanup_config() -> SampleConfig:
    return SampleConfig(
        account_name="anf-smb-test",
        should_clean_up=True,
        wait_retries=3,
        wait_interval_seconds=0,
    )


@pytest.fixture
def auth_config() -> AzureAuthConfig:
    return AzureAuthConfig(subscription_id=SUBSCRIPTION_ID)


@pytest.fixture
def service_factory(fake_netapp: FakeNetAppService):
    @asynccontextmanager
    async def _factory(auth: AzureAuthConfig):
        yield fake_netapp

    return _factory


@pytest.fixture(autouse=True)
def clear_anf_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in list(os.environ):
        if name.startswith("ANF_") or name == "AZURE_AUTH_LOCATION":
            monkeypatch.delenv(name, raising=False)

