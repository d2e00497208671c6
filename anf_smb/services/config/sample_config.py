from __future__ import annotations

import os
import uuid
from dataclasses import dataclass, field
from typing import ClassVar, Optional

from anf_smb.services.errors import ValidationError

TIB = 1024**4
GIB = 1024**3


def _env_str(name: str, default: str) -> str:
    return (os.getenv(name) or "").strip() or default


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValidationError(f"Invalid {name}; must be an integer") from exc


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValidationError(f"Invalid {name}; must be a number") from exc


def _env_bool(name: str, default: bool) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    if raw in {"1", "true", "yes", "on"}:
        return True
    if raw in {"0", "false", "no", "off"}:
        return False
    raise ValidationError(f"Invalid {name}; must be a boolean (true/false)")


def generate_account_name() -> str:
    return f"anf-smb-{uuid.uuid4().hex[:8]}"


@dataclass(frozen=True)
class DomainJoinConfig:
    """Active Directory settings embedded in the account at creation time.

    The password is not part of this config; it is prompted for at startup.
    ``dns_list`` is a comma-separated string of DNS server addresses.
    """

    username: str = "pmcadmin"
    dns_list: str = "10.2.0.4"
    ad_fqdn: str = "anf.local"
    # A random suffix is appended to the prefix during the domain join.
    smb_server_name_prefix: str = "pmc03"

    _MAX_SMB_SERVER_NAME_PREFIX: ClassVar[int] = 10

    def validate(self) -> None:
        if not self.username.strip():
            raise ValidationError("Domain join username must be provided")
        if not self.dns_list.strip():
            raise ValidationError("DNS list must be provided")
        if not self.ad_fqdn.strip():
            raise ValidationError("Active Directory FQDN must be provided")
        prefix = self.smb_server_name_prefix.strip()
        if not prefix or len(prefix) > self._MAX_SMB_SERVER_NAME_PREFIX:
            raise ValidationError(
                f"SMB server name prefix must be 1-{self._MAX_SMB_SERVER_NAME_PREFIX} characters "
                f"(got {self.smb_server_name_prefix!r})"
            )

    @staticmethod
    def from_env() -> "DomainJoinConfig":
        defaults = DomainJoinConfig()
        return DomainJoinConfig(
            username=_env_str("ANF_DOMAIN_JOIN_USERNAME", defaults.username),
            dns_list=_env_str("ANF_DNS_LIST", defaults.dns_list),
            ad_fqdn=_env_str("ANF_AD_FQDN", defaults.ad_fqdn),
            smb_server_name_prefix=_env_str("ANF_SMB_SERVER_NAME_PREFIX", defaults.smb_server_name_prefix),
        )


@dataclass(frozen=True)
class SampleConfig:
    """Everything the provisioning workflow needs besides credentials and the password."""

    account_name: str
    location: str = "westus"
    resource_group: str = "anf-smb-rg"
    vnet_resource_group: str = "anf-smb-rg"
    vnet_name: str = "westus-vnet01"
    subnet_name: str = "anf-sn"
    capacity_pool_name: str = "Pool01"
    service_level: str = "Standard"
    capacity_pool_size_bytes: int = 4 * TIB
    volume_size_bytes: int = 100 * GIB
    protocol_types: tuple[str, ...] = ("CIFS",)
    domain_join: DomainJoinConfig = field(default_factory=DomainJoinConfig)
    tags: dict[str, str] = field(
        default_factory=lambda: {
            "Author": "ANF Python SMB SDK Sample",
            "Service": "Azure Netapp Files",
        }
    )
    should_clean_up: bool = False
    wait_retries: int = 60
    wait_interval_seconds: float = 60.0

    SERVICE_LEVELS: ClassVar[frozenset[str]] = frozenset({"Standard", "Premium", "Ultra"})
    PROTOCOL_TYPES: ClassVar[frozenset[str]] = frozenset({"CIFS", "NFSv3", "NFSv4.1"})
    MIN_CAPACITY_POOL_SIZE_BYTES: ClassVar[int] = 4 * TIB
    MIN_VOLUME_SIZE_BYTES: ClassVar[int] = 100 * GIB

    @property
    def volume_name(self) -> str:
        return f"SMB-Vol-{self.account_name}-{self.capacity_pool_name}"

    def subnet_id(self, subscription_id: str) -> str:
        return (
            f"/subscriptions/{subscription_id}"
            f"/resourceGroups/{self.vnet_resource_group}"
            f"/providers/Microsoft.Network/virtualNetworks/{self.vnet_name}"
            f"/subnets/{self.subnet_name}"
        )

    def validate(self) -> None:
        for name in ("account_name", "location", "resource_group", "vnet_resource_group",
                     "vnet_name", "subnet_name", "capacity_pool_name"):
            if not getattr(self, name).strip():
                raise ValidationError(f"{name} must be provided")

        if self.service_level not in self.SERVICE_LEVELS:
            raise ValidationError(
                f"Invalid service level {self.service_level!r}; expected one of {sorted(self.SERVICE_LEVELS)}"
            )
        if self.capacity_pool_size_bytes < self.MIN_CAPACITY_POOL_SIZE_BYTES:
            raise ValidationError("Capacity pool size must be at least 4 TiB")
        if self.volume_size_bytes < self.MIN_VOLUME_SIZE_BYTES:
            raise ValidationError("Volume size must be at least 100 GiB")

        if not self.protocol_types:
            raise ValidationError("At least one protocol type must be provided")
        unknown = [p for p in self.protocol_types if p not in self.PROTOCOL_TYPES]
        if unknown:
            raise ValidationError(f"Unknown protocol types: {unknown}")
        if "CIFS" not in self.protocol_types:
            raise ValidationError("Protocol types must include CIFS for an SMB volume")

        if self.wait_retries < 1:
            raise ValidationError("wait_retries must be at least 1")
        if self.wait_interval_seconds < 0:
            raise ValidationError("wait_interval_seconds must not be negative")

        self.domain_join.validate()

    @staticmethod
    def from_env(*, should_clean_up: Optional[bool] = None) -> "SampleConfig":
        """Load the sample configuration from ``ANF_*`` environment variables.

        Unset variables fall back to the sample defaults. ``should_clean_up`` overrides
        ``ANF_SHOULD_CLEAN_UP`` when given (e.g. from a CLI flag).

        Raises:
            ValidationError: if a value cannot be parsed or fails validation.
        """

        protocols_raw = _env_str("ANF_PROTOCOL_TYPES", "CIFS")
        protocol_types = tuple(p.strip() for p in protocols_raw.split(",") if p.strip())

        config = SampleConfig(
            account_name=_env_str("ANF_ACCOUNT_NAME", "") or generate_account_name(),
            location=_env_str("ANF_LOCATION", "westus"),
            resource_group=_env_str("ANF_RESOURCE_GROUP", "anf-smb-rg"),
            vnet_resource_group=_env_str("ANF_VNET_RESOURCE_GROUP", "anf-smb-rg"),
            vnet_name=_env_str("ANF_VNET_NAME", "westus-vnet01"),
            subnet_name=_env_str("ANF_SUBNET_NAME", "anf-sn"),
            capacity_pool_name=_env_str("ANF_CAPACITY_POOL_NAME", "Pool01"),
            service_level=_env_str("ANF_SERVICE_LEVEL", "Standard"),
            capacity_pool_size_bytes=_env_int("ANF_CAPACITY_POOL_SIZE_BYTES", 4 * TIB),
            volume_size_bytes=_env_int("ANF_VOLUME_SIZE_BYTES", 100 * GIB),
            protocol_types=protocol_types,
            domain_join=DomainJoinConfig.from_env(),
            should_clean_up=(
                should_clean_up if should_clean_up is not None else _env_bool("ANF_SHOULD_CLEAN_UP", False)
            ),
            wait_retries=_env_int("ANF_WAIT_RETRIES", 60),
            wait_interval_seconds=_env_float("ANF_WAIT_INTERVAL_SECONDS", 60.0),
        )
        config.validate()
        return config
