import pytest
import requests

from conftest import make_response
from invite_portal.credentials import EnvironmentCredentialSource, OverrideCredentialSource
from invite_portal.invites import (
    EMAILS_REQUIRED,
    InviteFailure,
    InviteSuccess,
    build_invite_headers,
    build_invite_url,
    is_valid_email,
    normalize_emails,
    resolve_and_send_invite,
    split_emails,
)

API = "https://upstream.test/backend-api"


@pytest.fixture
def env_source():
    return EnvironmentCredentialSource("env-token", "acct-1")


def send(session, source, emails, role=None, resend=None):
    return resolve_and_send_invite(emails, role, resend, source, session=session, api_base=API, timeout=5)


def sent_kwargs(session):
    args, kwargs = session.post.call_args
    return args[0], kwargs


def test_forwards_emails_in_order(session, env_source):
    send(session, env_source, ["b@example.com", "a@example.com", "c@example.com"])

    url, kwargs = sent_kwargs(session)
    assert url == f"{API}/accounts/acct-1/invites"
    assert kwargs["json"] == {
        "email_addresses": ["b@example.com", "a@example.com", "c@example.com"],
        "role": "standard-user",
        "resend_emails": False,
    }
    assert kwargs["timeout"] == 5


def test_blank_entries_are_dropped_and_trimmed(session, env_source):
    send(session, env_source, ["  a@example.com ", "", "   ", "b@example.com"])

    _, kwargs = sent_kwargs(session)
    assert kwargs["json"]["email_addresses"] == ["a@example.com", "b@example.com"]


def test_duplicates_are_dropped(session, env_source):
    send(session, env_source, ["a@example.com", "b@example.com", "a@example.com"])

    _, kwargs = sent_kwargs(session)
    assert kwargs["json"]["email_addresses"] == ["a@example.com", "b@example.com"]


@pytest.mark.parametrize("emails", [[], ["", "   "], None, "a@example.com", [1, 2]])
def test_invalid_emails_never_hit_network(session, env_source, emails):
    result = send(session, env_source, emails)

    assert isinstance(result, InviteFailure)
    assert result.kind == "validation"
    assert result.error == EMAILS_REQUIRED
    assert result.status_code is None
    assert session.post.call_count == 0


def test_malformed_address_is_still_forwarded(session, env_source):
    result = send(session, env_source, ["not-an-email"])

    assert result.success
    _, kwargs = sent_kwargs(session)
    assert kwargs["json"]["email_addresses"] == ["not-an-email"]


def test_role_and_resend_pass_through(session, env_source):
    send(session, env_source, ["a@example.com"], role="admin", resend=True)

    _, kwargs = sent_kwargs(session)
    assert kwargs["json"]["role"] == "admin"
    assert kwargs["json"]["resend_emails"] is True


def test_blank_role_defaults(session, env_source):
    send(session, env_source, ["a@example.com"], role="  ")

    _, kwargs = sent_kwargs(session)
    assert kwargs["json"]["role"] == "standard-user"


def test_missing_token_is_configuration_error(session):
    result = send(session, EnvironmentCredentialSource(None, "acct-1"), ["a@example.com"])

    assert result.kind == "configuration"
    assert result.error == "token not configured"
    assert result.data is None
    assert session.post.call_count == 0


def test_validation_checked_before_credentials(session):
    result = send(session, EnvironmentCredentialSource(None), [])

    assert result.kind == "validation"


def test_success_result(session, env_source):
    session.post.return_value = make_response(200, {"id": "abc"})

    result = send(session, env_source, ["a@example.com"])

    assert isinstance(result, InviteSuccess)
    assert result.success is True
    assert result.error is None
    assert result.to_dict() == {"success": True, "statusCode": 200, "data": {"id": "abc"}}


def test_upstream_failure_result(session, env_source):
    session.post.return_value = make_response(403, {"detail": "forbidden"})

    result = send(session, env_source, ["a@example.com"])

    assert result.success is False
    assert result.kind == "upstream"
    assert result.to_dict() == {
        "success": False,
        "statusCode": 403,
        "data": {"detail": "forbidden"},
        "error": "HTTP 403",
    }


def test_201_is_not_success(session, env_source):
    session.post.return_value = make_response(201, {"id": "abc"})

    result = send(session, env_source, ["a@example.com"])

    assert result.success is False
    assert result.error == "HTTP 201"


def test_non_json_body_is_wrapped(session, env_source):
    session.post.return_value = make_response(502, text="<html>Bad gateway</html>")

    result = send(session, env_source, ["a@example.com"])

    assert result.status_code == 502
    assert result.data == {"raw_response": "<html>Bad gateway</html>"}
    assert result.error == "HTTP 502"


def test_transport_failure(session, env_source):
    session.post.side_effect = requests.ConnectionError("Name or service not known")

    result = send(session, env_source, ["a@example.com"])

    assert result.success is False
    assert result.kind == "transport"
    assert result.status_code is None
    assert result.data is None
    assert result.error.startswith("Request failed:")
    assert "Name or service not known" in result.error


def test_timeout_is_transport_failure(session, env_source):
    session.post.side_effect = requests.Timeout("read timed out")

    result = send(session, env_source, ["a@example.com"])

    assert result.kind == "transport"
    assert session.post.call_count == 1


def test_override_token_used_in_authorization(session, env_source):
    source = OverrideCredentialSource(env_source, token="override-token", account_id="acct-2")

    send(session, source, ["a@example.com"])

    url, kwargs = sent_kwargs(session)
    assert kwargs["headers"]["authorization"] == "Bearer override-token"
    assert kwargs["headers"]["chatgpt-account-id"] == "acct-2"
    assert url == f"{API}/accounts/acct-2/invites"


def test_headers_mimic_browser():
    headers = build_invite_headers("tok", "acct", user_agent="UA/1.0")

    assert headers["authorization"] == "Bearer tok"
    assert headers["origin"] == "https://chatgpt.com"
    assert headers["referer"] == "https://chatgpt.com/"
    assert headers["user-agent"] == "UA/1.0"
    assert headers["content-type"] == "application/json"


def test_bearer_prefix_not_doubled():
    headers = build_invite_headers("Bearer tok", "acct")

    assert headers["authorization"] == "Bearer tok"


def test_default_url():
    assert build_invite_url("acct") == "https://chatgpt.com/backend-api/accounts/acct/invites"


def test_split_emails():
    assert split_emails("a@x.com, b@x.com\nc@x.com,,") == ["a@x.com", "b@x.com", "c@x.com"]
    assert split_emails("") == []
    assert split_emails(None) == []


def test_normalize_emails_keeps_first_occurrence():
    assert normalize_emails(("b@x.com", "a@x.com", "b@x.com")) == ["b@x.com", "a@x.com"]


def test_is_valid_email():
    assert is_valid_email("user@example.com")
    assert not is_valid_email("user@example")
    assert not is_valid_email("user example@example.com")
    assert not is_valid_email("a@b@c.com")


@pytest.mark.parametrize("role", [5, ["admin"]])
def test_non_string_role_is_forwarded(session, env_source, role):
    result = send(session, env_source, ["a@example.com"], role=role)

    assert result.success
    _, kwargs = sent_kwargs(session)
    assert kwargs["json"]["role"] == role


def test_empty_non_string_role_defaults(session, env_source):
    send(session, env_source, ["a@example.com"], role=[])

    _, kwargs = sent_kwargs(session)
    assert kwargs["json"]["role"] == "standard-user"
