from __future__ import annotations

from newshub.shared.logging import sanitize_message


def test_passwords_and_tokens_are_redacted() -> None:
    message = sanitize_message(
        "login password=Zebra!Mint42 token=abcdefghijklmnopqrstuvwxyz123"
    )

    assert "Zebra!Mint42" not in message
    assert "abcdefghijklmnopqrstuvwxyz123" not in message
    assert message.count("***REDACTED***") == 2


def test_emails_are_masked() -> None:
    assert sanitize_message("user alice@example.com signed in") == "user ***@example.com signed in"


def test_database_credentials_are_redacted() -> None:
    message = sanitize_message("connecting to postgresql://app:hunter2@db/newshub")

    assert message == "connecting to postgresql://app:***REDACTED***@db/newshub"
