from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from anf_smb.services.errors import ConfigurationLoadFailed


@dataclass(frozen=True)
class AzureAuthConfig:
    """Non-interactive identity info read from an Azure SDK auth file.

    The file is the JSON produced by ``az ad sp create-for-rbac --sdk-auth``, e.g.
    ``{"clientId": "...", "clientSecret": "...", "subscriptionId": "...", "tenantId": "..."}``.
    Only ``subscriptionId`` is required.
    """

    subscription_id: str
    tenant_id: Optional[str] = None
    client_id: Optional[str] = None
    client_secret: Optional[str] = None

    @property
    def has_client_secret(self) -> bool:
        return bool(self.tenant_id and self.client_id and self.client_secret)

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "AzureAuthConfig":
        subscription_id = str(data.get("subscriptionId") or "").strip()
        if not subscription_id:
            raise ConfigurationLoadFailed("Auth file is missing 'subscriptionId'")

        return AzureAuthConfig(
            subscription_id=subscription_id,
            tenant_id=data.get("tenantId") or None,
            client_id=data.get("clientId") or None,
            client_secret=data.get("clientSecret") or None,
        )

    @staticmethod
    def from_file(path: Path) -> "AzureAuthConfig":
        try:
            raw = path.read_text(encoding="utf-8-sig")
        except OSError as exc:
            raise ConfigurationLoadFailed(f"Unable to read auth file: {path}") from exc

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ConfigurationLoadFailed(f"Auth file is not valid JSON: {path}") from exc

        if not isinstance(data, dict):
            raise ConfigurationLoadFailed(f"Auth file must contain a JSON object: {path}")

        return AzureAuthConfig.from_dict(data)

    @staticmethod
    def from_env(env_var: str = "AZURE_AUTH_LOCATION") -> "AzureAuthConfig":
        location = (os.getenv(env_var) or "").strip()
        if not location:
            raise ConfigurationLoadFailed(f"Missing required environment variable: {env_var}")
        return AzureAuthConfig.from_file(Path(location).expanduser())
