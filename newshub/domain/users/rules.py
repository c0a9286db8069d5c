# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Format rules for user names, e-mail addresses and passwords.

Each checker returns the list of violated rules as human readable messages;
an empty list means the value is acceptable. Callers decide how to report
them (the HTTP layer turns the first one into a validation error).
"""

from __future__ import annotations

import re

NAME_MAX_LENGTH = 120
EMAIL_MAX_LENGTH = 254
EMAIL_LOCAL_MAX_LENGTH = 64
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 128
# bcrypt only accepts 72 bytes of input
PASSWORD_MAX_BYTES = 72

COMMON_PASSWORDS = frozenset(
    {
        "password",
        "123456",
        "12345678",
        "qwerty",
        "abc123",
        "monkey",
        "letmein",
        "trustno1",
        "dragon",
        "baseball",
        "iloveyou",
        "master",
        "sunshine",
        "ashley",
        "bailey",
        "passw0rd",
        "shadow",
        "superman",
        "qazwsx",
        "michael",
        "football",
    }
)

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_DIGITS = "0123456789"
_LETTERS = "abcdefghijklmnopqrstuvwxyz"
_SEQUENCES = tuple(
    run[i : i + 3] for run in (_DIGITS, _LETTERS) for i in range(len(run) - 2)
)
_REPEATED_RE = re.compile(r"(.)\1{2,}")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def check_name(name: str) -> list[str]:
    trimmed = name.strip()
    if not trimmed:
        return ["Name is required"]
    if len(trimmed) > NAME_MAX_LENGTH:
        return [f"Name is too long (max {NAME_MAX_LENGTH} characters)"]
    return []


def check_email(email: str) -> list[str]:
    trimmed = email.strip()
    if not trimmed:
        return ["Email is required"]

    errors = []
    if trimmed.count("@") != 1:
        errors.append("Email must contain exactly one @ symbol")
    if not _EMAIL_RE.match(trimmed):
        errors.append("Invalid email address")
    if len(trimmed) > EMAIL_MAX_LENGTH:
        errors.append("Email address is too long")
    if len(trimmed.split("@")[0]) > EMAIL_LOCAL_MAX_LENGTH:
        errors.append("Email local part is too long")
    return errors


def has_sequential_run(value: str) -> bool:
    lowered = value.lower()
    return any(seq in lowered for seq in _SEQUENCES)


def check_password_strength(password: str) -> list[str]:
    errors = []

    if len(password) < PASSWORD_MIN_LENGTH:
        errors.append(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    if len(password) > PASSWORD_MAX_LENGTH:
        errors.append(f"Password must be at most {PASSWORD_MAX_LENGTH} characters")
    elif len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        errors.append(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
    if not re.search(r"[A-Z]", password):
        errors.append("Password must contain at least one uppercase letter")
    if not re.search(r"[a-z]", password):
        errors.append("Password must contain at least one lowercase letter")
    if not re.search(r"[0-9]", password):
        errors.append("Password must contain at least one number")
    if not re.search(r"[^A-Za-z0-9]", password):
        errors.append("Password must contain at least one special character")
    if password.lower() in COMMON_PASSWORDS:
        errors.append("This password is too common, please choose a stronger password")
    if has_sequential_run(password):
        errors.append("Password should not contain sequential characters")
    if _REPEATED_RE.search(password):
        errors.append("Password should not contain repeated characters")

    return errors


__all__ = [
    "COMMON_PASSWORDS",
    "PASSWORD_MAX_BYTES",
    "check_email",
    "check_name",
    "check_password_strength",
    "has_sequential_run",
    "normalize_email",
]
