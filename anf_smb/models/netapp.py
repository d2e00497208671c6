from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


class MountTarget(BaseModel):
    mount_target_id: Optional[str] = None
    file_system_id: Optional[str] = None
    ip_address: Optional[str] = None
    smb_server_fqdn: Optional[str] = Field(default=None, description="FQDN clients use to reach the SMB share")

    @staticmethod
    def from_sdk(obj: Any) -> "MountTarget":
        return MountTarget(
            mount_target_id=getattr(obj, "mount_target_id", None),
            file_system_id=getattr(obj, "file_system_id", None),
            ip_address=getattr(obj, "ip_address", None),
            smb_server_fqdn=getattr(obj, "smb_server_fqdn", None),
        )


class ProvisionedResources(BaseModel):
    """Identifiers captured while provisioning, threaded through provision and teardown.

    A field stays ``None`` until the matching resource has been created in this run.
    """

    subnet_id: Optional[str] = None
    account_id: Optional[str] = None
    capacity_pool_id: Optional[str] = None
    volume_id: Optional[str] = None
    mount_targets: list[MountTarget] = Field(default_factory=list)

    @property
    def smb_server_fqdn(self) -> Optional[str]:
        if not self.mount_targets:
            return None
        return self.mount_targets[0].smb_server_fqdn
