from .credentials import (
    Credentials,
    CredentialSource,
    EnvironmentCredentialSource,
    OverrideCredentialSource,
    RuntimeOverrideStore,
    is_configured,
)
from .errors import ConfigurationError, InviteError, TransportError, UpstreamError, ValidationError
from .invites import InviteFailure, InviteResult, InviteSuccess, resolve_and_send_invite

__all__ = [
    "Credentials",
    "CredentialSource",
    "EnvironmentCredentialSource",
    "OverrideCredentialSource",
    "RuntimeOverrideStore",
    "is_configured",
    "ConfigurationError",
    "InviteError",
    "TransportError",
    "UpstreamError",
    "ValidationError",
    "InviteFailure",
    "InviteResult",
    "InviteSuccess",
    "resolve_and_send_invite",
]
