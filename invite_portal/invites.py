import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

import requests

from .config import API_BASE, DEFAULT_ROLE, DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from .credentials import CredentialSource
from .errors import InviteError, TransportError, UpstreamError, ValidationError

logger = logging.getLogger(__name__)

EMAILS_REQUIRED = "emails field is required and must be a non-empty list"

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass(frozen=True)
class InviteSuccess:
    status_code: int
    data: Any = None

    success = True
    error = None

    def to_dict(self) -> Dict[str, Any]:
        return {"success": True, "statusCode": self.status_code, "data": self.data}


@dataclass(frozen=True)
class InviteFailure:
    error: str
    kind: str
    status_code: Optional[int] = None
    data: Any = None

    success = False

    @classmethod
    def from_error(cls, exc: InviteError) -> "InviteFailure":
        return cls(error=exc.message, kind=exc.kind, status_code=exc.status_code, data=exc.data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": False,
            "statusCode": self.status_code,
            "data": self.data,
            "error": self.error,
        }


InviteResult = Union[InviteSuccess, InviteFailure]


def split_emails(raw: Optional[str]) -> List[str]:
    """Split a comma/newline separated string into trimmed, non-empty entries."""
    if not raw:
        return []
    parts = raw.replace("\n", ",").split(",")
    return [p.strip() for p in parts if p.strip()]


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.match(email))


def normalize_emails(raw_emails) -> List[str]:
    if not isinstance(raw_emails, (list, tuple)):
        raise ValidationError(EMAILS_REQUIRED)
    emails = []
    seen = set()
    for entry in raw_emails:
        if not isinstance(entry, str):
            raise ValidationError(EMAILS_REQUIRED)
        email = entry.strip()
        if not email or email in seen:
            continue
        seen.add(email)
        emails.append(email)
    if not emails:
        raise ValidationError(EMAILS_REQUIRED)
    return emails


def build_invite_url(account_id: str, api_base: str = API_BASE) -> str:
    return f"{api_base}/accounts/{account_id}/invites"


def bearer(token: str) -> str:
    return token if token.startswith("Bearer ") else f"Bearer {token}"


def build_invite_headers(token: str, account_id: str, user_agent: str = DEFAULT_USER_AGENT) -> Dict[str, str]:
    return {
        "accept": "application/json, text/plain, */*",
        "accept-language": "en-US,en;q=0.9",
        "cache-control": "no-cache",
        "pragma": "no-cache",
        "content-type": "application/json",
        "authorization": bearer(token),
        "chatgpt-account-id": account_id,
        "origin": "https://chatgpt.com",
        "referer": "https://chatgpt.com/",
        "sec-ch-ua": '"Chromium";v="135", "Not)A;Brand";v="99", "Google Chrome";v="135"',
        "sec-ch-ua-mobile": "?0",
        "sec-ch-ua-platform": '"Windows"',
        "user-agent": user_agent,
    }


def build_invite_payload(emails: List[str], role: str, resend: bool) -> Dict[str, Any]:
    return {"email_addresses": emails, "role": role, "resend_emails": resend}


def parse_response_body(resp) -> Any:
    try:
        return resp.json()
    except ValueError:
        return {"raw_response": resp.text}


def resolve_and_send_invite(
    raw_emails,
    role: Optional[str],
    resend: Optional[bool],
    credential_source: CredentialSource,
    session=None,
    api_base: str = API_BASE,
    user_agent: str = DEFAULT_USER_AGENT,
    timeout: float = DEFAULT_TIMEOUT,
) -> InviteResult:
    """Validate input, resolve credentials and POST the invite upstream.

    Expected failures come back as InviteFailure, never as exceptions:

    * validation     - no usable emails, nothing sent
    * configuration  - no token, nothing sent
    * transport      - request raised before a response arrived
    * upstream       - any status other than 200

    One attempt per call; there is no retry.
    """
    try:
        emails = normalize_emails(raw_emails)
        if isinstance(role, str):
            role = role.strip()
        role = role or DEFAULT_ROLE
        resend = bool(resend)

        malformed = [e for e in emails if not is_valid_email(e)]
        if malformed:
            logger.warning("Forwarding %d malformed email address(es): %s", len(malformed), ", ".join(malformed))

        credentials = credential_source.resolve()
        return _send(emails, role, resend, credentials, session or requests, api_base, user_agent, timeout)
    except InviteError as exc:
        return InviteFailure.from_error(exc)


def _send(emails, role, resend, credentials, http, api_base, user_agent, timeout) -> InviteResult:
    url = build_invite_url(credentials.account_id, api_base)
    headers = build_invite_headers(credentials.token, credentials.account_id, user_agent)
    payload = build_invite_payload(emails, role, resend)

    try:
        resp = http.post(url, headers=headers, json=payload, timeout=timeout)
    except requests.RequestException as exc:
        logger.error("Invite request to account %s failed: %s", credentials.account_id, exc)
        raise TransportError(f"Request failed: {exc}")

    data = parse_response_body(resp)
    if resp.status_code != 200:
        logger.error("Invite request to account %s rejected. Status code: %s", credentials.account_id, resp.status_code)
        raise UpstreamError(f"HTTP {resp.status_code}", status_code=resp.status_code, data=data)

    logger.info("Sent invitations to %d email(s) for account %s", len(emails), credentials.account_id)
    return InviteSuccess(status_code=resp.status_code, data=data)
