#!/usr/bin/env python3
"""One-shot invite: send_invite.py <email> [<email> ...]

Prints a single JSON line {"status", "body"}. Exit code 0 on success, 1 on an
upstream or transport failure, 2 on missing input or credentials.

Needs the invite_portal package importable: either `pip install -e .` and run
`python scripts/send_invite.py`, or run `python -m scripts.send_invite` from
the repository root.
"""
import json
import sys

from invite_portal.config import Settings
from invite_portal.credentials import EnvironmentCredentialSource
from invite_portal.invites import resolve_and_send_invite


def main(argv=None, settings=None, session=None):
    argv = sys.argv[1:] if argv is None else argv
    settings = settings or Settings.from_env()

    if not settings.token:
        print(json.dumps({"status": 0, "body": "CHATGPT_BEARER_TOKEN missing"}))
        return 2
    if not argv:
        print(json.dumps({"status": 0, "body": "email required"}))
        return 2

    result = resolve_and_send_invite(
        list(argv),
        None,
        True,
        EnvironmentCredentialSource.from_settings(settings),
        session=session,
        api_base=settings.api_base,
        user_agent=settings.user_agent,
        timeout=settings.timeout,
    )
    if result.success:
        print(json.dumps({"status": result.status_code, "body": result.data}))
        return 0
    if result.kind == "validation":
        print(json.dumps({"status": 0, "body": "email required"}))
        return 2
    print(json.dumps({"status": result.status_code or 0, "body": result.data if result.data is not None else result.error}))
    return 1


if __name__ == "__main__":
    sys.exit(main())
