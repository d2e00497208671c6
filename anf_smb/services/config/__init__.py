"""Configuration package (Facade).

Re-exports the public config types so the rest of the codebase can import them
from a single, stable path:

	from anf_smb.services.config import SampleConfig

The underlying modules (``sample_config.py``, ``azure_auth_config.py``) can be
reorganised without touching call sites.
"""

from anf_smb.services.config.azure_auth_config import AzureAuthConfig
from anf_smb.services.config.sample_config import DomainJoinConfig, SampleConfig

__all__ = ["AzureAuthConfig", "DomainJoinConfig", "SampleConfig"]
