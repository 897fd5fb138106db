import threading
from dataclasses import dataclass
from typing import Optional, Tuple

from .config import DEFAULT_ACCOUNT_ID, Settings
from .errors import ConfigurationError

TOKEN_NOT_CONFIGURED = "token not configured"


@dataclass(frozen=True)
class Credentials:
    token: str
    account_id: str


class CredentialSource:
    """Anything that can hand the resolver a token/account pair.

    ``resolve`` raises ConfigurationError when no token is available.
    """

    def resolve(self) -> Credentials:
        raise NotImplementedError

    def peek(self) -> Tuple[Optional[str], str]:
        """Return (token, account_id) without raising."""
        raise NotImplementedError


class EnvironmentCredentialSource(CredentialSource):
    def __init__(self, token: Optional[str] = None, account_id: Optional[str] = None):
        self.token = (token or "").strip() or None
        self.account_id = (account_id or "").strip() or DEFAULT_ACCOUNT_ID

    @classmethod
    def from_settings(cls, settings: Settings) -> "EnvironmentCredentialSource":
        return cls(settings.token, settings.account_id)

    @classmethod
    def from_env(cls) -> "EnvironmentCredentialSource":
        return cls.from_settings(Settings.from_env())

    def peek(self):
        return self.token, self.account_id

    def resolve(self):
        if not self.token:
            raise ConfigurationError(TOKEN_NOT_CONFIGURED)
        return Credentials(self.token, self.account_id)


class OverrideCredentialSource(CredentialSource):
    """Per-field override on top of another source.

    Empty override values fall through to ``fallback``. Sources stack, so a
    cookie override can sit on top of the admin runtime override, which sits
    on top of the environment.
    """

    def __init__(self, fallback: CredentialSource, token: Optional[str] = None, account_id: Optional[str] = None):
        self.fallback = fallback
        self.token = (token or "").strip() or None
        self.account_id = (account_id or "").strip() or None

    def peek(self):
        token, account_id = self.fallback.peek()
        return self.token or token, self.account_id or account_id

    def resolve(self):
        token, account_id = self.peek()
        if not token:
            raise ConfigurationError(TOKEN_NOT_CONFIGURED)
        return Credentials(token, account_id)


class RuntimeOverrideStore:
    """Admin-set overrides shared by every request in the process."""

    def __init__(self):
        self._lock = threading.Lock()
        self._token = None
        self._account_id = None

    def snapshot(self) -> Tuple[Optional[str], Optional[str]]:
        with self._lock:
            return self._token, self._account_id

    def update(self, token: Optional[str] = None, account_id: Optional[str] = None):
        token = (token or "").strip()
        account_id = (account_id or "").strip()
        with self._lock:
            if token:
                self._token = token
            if account_id:
                self._account_id = account_id

    def clear(self):
        with self._lock:
            self._token = None
            self._account_id = None

    def source(self, fallback: CredentialSource) -> OverrideCredentialSource:
        token, account_id = self.snapshot()
        return OverrideCredentialSource(fallback, token=token, account_id=account_id)


def is_configured(source: CredentialSource) -> bool:
    try:
        source.resolve()
    except ConfigurationError:
        return False
    return True


def token_preview(token: Optional[str]) -> Optional[str]:
    if not token:
        return None
    return f"{token[:10]}..."
