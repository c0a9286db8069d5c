# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass

from newshub.domain.users.entities import User
from newshub.domain.users.exceptions import (EmailInUseError,
                                             InvalidPasswordError,
                                             UserNotFoundError)
from newshub.domain.users.repositories import PasswordHasher, UserRepository
from newshub.domain.users.rules import normalize_email


@dataclass(slots=True, frozen=True)
class ProfileChanges:
    name: str | None = None
    email: str | None = None
    current_password: str | None = None
    new_password: str | None = None


class UpdateProfileUseCase:
    def __init__(self, *, users: UserRepository, password_hasher: PasswordHasher) -> None:
        self._users = users
        self._password_hasher = password_hasher

    def execute(self, user_id: str, changes: ProfileChanges) -> User:
        user = self._users.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError()

        name = changes.name.strip() if changes.name is not None else None

        email = None
        if changes.email is not None:
            email = normalize_email(changes.email)
            if email != user.email:
                owner = self._users.find_by_email(email)
                if owner is not None and owner.id != user.id:
                    raise EmailInUseError()
            else:
                email = None

        password_hash = None
        if changes.new_password is not None:
            current = changes.current_password or ""
            if not self._password_hasher.verify(current, user.password_hash):
                raise InvalidPasswordError()
            password_hash = self._password_hasher.hash(changes.new_password)

        updated = self._users.update(
            user.id, name=name, email=email, password_hash=password_hash
        )
        if updated is None:
            raise UserNotFoundError()
        return updated
