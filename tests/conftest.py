from unittest.mock import MagicMock

import pytest

from invite_portal.config import Settings


def make_response(status_code, body=None, text=None):
    resp = MagicMock()
    resp.status_code = status_code
    if body is None:
        resp.json.side_effect = ValueError("Expecting value")
        resp.text = text or ""
    else:
        resp.json.return_value = body
        resp.text = text or ""
    return resp


@pytest.fixture
def session():
    http = MagicMock()
    http.post.return_value = make_response(200, {"account_invites": []})
    return http


@pytest.fixture
def settings():
    return Settings(token="env-token", account_id="env-account", api_base="https://upstream.test/backend-api")


@pytest.fixture
def unconfigured_settings():
    return Settings(token=None, account_id="env-account", api_base="https://upstream.test/backend-api")
