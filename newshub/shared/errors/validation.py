# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any, NoReturn

from pydantic import ValidationError as PydanticValidationError

from .base import ValidationError


def _issue_message(error: dict[str, Any]) -> str:
    message = str(error.get("msg", "Invalid input"))
    # pydantic prefixes messages raised from validators
    for prefix in ("Value error, ", "Assertion failed, "):
        if message.startswith(prefix):
            return message[len(prefix):]
    return message


def format_pydantic_errors(exc: PydanticValidationError) -> dict[str, Any]:
    fields_set = set()

    for error in exc.errors():
        loc = error.get("loc", ())
        field_path = ".".join(str(part) for part in loc if part is not None)

        if field_path:
            fields_set.add(field_path)

    return {"fields": sorted(fields_set)}


def raise_validation_error(exc: PydanticValidationError) -> NoReturn:
    errors = exc.errors()
    message = _issue_message(errors[0]) if errors else "Invalid input"
    raise ValidationError(message, context=format_pydantic_errors(exc)) from exc


__all__ = [
    "format_pydantic_errors",
    "raise_validation_error",
]
