from __future__ import annotations

from enum import Enum
from typing import Optional


class ResourceKind(str, Enum):
    ACCOUNT = "account"
    CAPACITY_POOL = "capacity pool"
    VOLUME = "volume"


class ValidationError(ValueError):
    """A required input is missing or invalid."""


class ConfigurationLoadFailed(RuntimeError):
    pass


class NetAppServiceError(RuntimeError):
    pass


class NetAppResourceNotFoundError(NetAppServiceError):
    pass


class WorkflowError(RuntimeError):
    pass


class PrerequisiteNotFound(WorkflowError):
    def __init__(self, resource_id: str) -> None:
        super().__init__(f"Subnet {resource_id} not found")
        self.resource_id = resource_id


class PrerequisiteCheckFailed(WorkflowError):
    def __init__(self, resource_id: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(f"An error occurred trying to check if {resource_id} exists: {cause}")
        self.resource_id = resource_id
        self.cause = cause


class ResourceCreationFailed(WorkflowError):
    def __init__(self, kind: ResourceKind, cause: Optional[BaseException] = None) -> None:
        super().__init__(f"An error occurred while creating {kind.value}: {cause}")
        self.kind = kind
        self.cause = cause


class ResourceDeletionFailed(WorkflowError):
    def __init__(
        self,
        kind: ResourceKind,
        cause: Optional[BaseException] = None,
        *,
        message: Optional[str] = None,
    ) -> None:
        super().__init__(message or f"An error occurred while deleting {kind.value}: {cause}")
        self.kind = kind
        self.cause = cause


class ResourceDeletionTimeout(ResourceDeletionFailed):
    def __init__(self, kind: ResourceKind, resource_id: str, attempts: int) -> None:
        super().__init__(
            kind,
            message=f"Timed out waiting for {kind.value} to be deleted after {attempts} checks: {resource_id}",
        )
        self.resource_id = resource_id
        self.attempts = attempts
