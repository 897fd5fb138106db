import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

API_BASE = "https://chatgpt.com/backend-api"
DEFAULT_ACCOUNT_ID = "11045a20-bdb4-444f-9bd6-768640226554"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/135.0.0.0 Safari/537.36"
)
DEFAULT_ROLE = "standard-user"
AVAILABLE_ROLES = ("standard-user", "admin", "viewer")
DEFAULT_TIMEOUT = 15.0


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    token: Optional[str] = None
    account_id: str = DEFAULT_ACCOUNT_ID
    user_agent: str = DEFAULT_USER_AGENT
    api_base: str = API_BASE
    timeout: float = DEFAULT_TIMEOUT
    secret_key: str = "dev_secret_key"
    host: str = "127.0.0.1"
    port: int = 5000

    @classmethod
    def from_env(cls) -> "Settings":
        """Read settings from the process environment (and .env, via load_dotenv)."""
        port = os.getenv("PORT", "5000")
        return cls(
            token=os.getenv("CHATGPT_BEARER_TOKEN") or None,
            account_id=os.getenv("CHATGPT_ACCOUNT_ID") or DEFAULT_ACCOUNT_ID,
            user_agent=os.getenv("CHATGPT_IMPERSONATE_UA") or DEFAULT_USER_AGENT,
            api_base=(os.getenv("API_BASE") or API_BASE).rstrip("/"),
            timeout=_float_env("INVITE_TIMEOUT", DEFAULT_TIMEOUT),
            secret_key=os.getenv("SECRET_KEY", "dev_secret_key"),
            host=os.getenv("HOST", "127.0.0.1"),
            port=int(port) if port.isdigit() else 5000,
        )
