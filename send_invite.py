#!/usr/bin/env python3
"""Interactive invite CLI.

Reads the bearer token and account id from the environment, prompts for
comma separated emails, a role and the resend flag, then sends the invites
and prints the upstream status and body.
"""
import json
import sys

from invite_portal.config import DEFAULT_ROLE, Settings
from invite_portal.credentials import EnvironmentCredentialSource
from invite_portal.invites import is_valid_email, resolve_and_send_invite, split_emails


def prompt_emails(read=input):
    return split_emails(read("Email addresses (comma separated): "))


def prompt_role(read=input):
    return read(f"Role [{DEFAULT_ROLE}]: ").strip() or DEFAULT_ROLE


def prompt_resend(read=input):
    return read("Resend emails? [y/N]: ").strip().lower() in ("y", "yes")


def main(read=input, settings=None, session=None):
    settings = settings or Settings.from_env()
    print("=== ChatGPT Invite Portal (CLI) ===\n")

    try:
        emails = prompt_emails(read)
        if not emails:
            print("\nError: At least one email required", file=sys.stderr)
            return 1
        for email in emails:
            if not is_valid_email(email):
                print(f"Warning: '{email}' does not look like an email address")
        role = prompt_role(read)
        resend = prompt_resend(read)
    except (KeyboardInterrupt, EOFError):
        print("\n\nCanceled by user.")
        return 0

    print("\nSending invites...")
    try:
        result = resolve_and_send_invite(
            emails,
            role,
            resend,
            EnvironmentCredentialSource.from_settings(settings),
            session=session,
            api_base=settings.api_base,
            user_agent=settings.user_agent,
            timeout=settings.timeout,
        )
    except KeyboardInterrupt:
        print("\nError: Request failed: canceled by user", file=sys.stderr)
        return 1

    if result.status_code is None:
        print(f"\nError: {result.error}", file=sys.stderr)
        return 1

    print(f"\nStatus: {result.status_code}")
    print(json.dumps(result.data, indent=2, ensure_ascii=False))

    if result.success:
        print("\nInvites sent successfully!")
        return 0
    print("\nFailed to send invites")
    return 1


if __name__ == "__main__":
    sys.exit(main())
