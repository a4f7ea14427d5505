"""
Provider environment and credential request models.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ProviderEnvironment:
    """Descriptor naming the CI service a provider configures."""
    service_name: str


@dataclass(frozen=True)
class CredentialRequest:
    """A credential a provider needs before it can talk to its service."""
    id: str
    instructions: str
    env_var: Optional[str] = None
