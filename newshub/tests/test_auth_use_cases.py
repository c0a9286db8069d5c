from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from newshub.application.use_cases.users.authenticate_session import \
    AuthenticateSessionUseCase
from newshub.application.use_cases.users.login_user import LoginUserUseCase
from newshub.application.use_cases.users.logout_user import LogoutUserUseCase
from newshub.application.use_cases.users.register_user import \
    RegisterUserUseCase
from newshub.application.use_cases.users.update_profile import (
    ProfileChanges, UpdateProfileUseCase)
from newshub.domain.users.exceptions import (EmailInUseError,
                                             InvalidCredentialsError,
                                             InvalidPasswordError)
from newshub.shared.errors import UnauthorizedError

from .fakes import (DeterministicHasher, InMemoryTokenRepository,
                    InMemoryUserRepository)

TTL = timedelta(days=7)


@pytest.fixture()
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture()
def tokens() -> InMemoryTokenRepository:
    return InMemoryTokenRepository()


@pytest.fixture()
def register(users: InMemoryUserRepository, tokens: InMemoryTokenRepository) -> RegisterUserUseCase:
    return RegisterUserUseCase(
        users=users, tokens=tokens, password_hasher=DeterministicHasher(), session_ttl=TTL
    )


@pytest.fixture()
def login(users: InMemoryUserRepository, tokens: InMemoryTokenRepository) -> LoginUserUseCase:
    return LoginUserUseCase(
        users=users, tokens=tokens, password_hasher=DeterministicHasher(), session_ttl=TTL
    )


@pytest.fixture()
def authenticate(
    users: InMemoryUserRepository, tokens: InMemoryTokenRepository
) -> AuthenticateSessionUseCase:
    return AuthenticateSessionUseCase(users=users, tokens=tokens, session_ttl=TTL)


def test_register_user_success(register: RegisterUserUseCase, users: InMemoryUserRepository) -> None:
    user, token = register.execute("  Alice ", "Alice@Example.com", "secret")

    assert user.name == "Alice"
    assert user.email == "alice@example.com"
    assert user.password_hash == "hashed:secret"
    assert token == "token-1"
    assert users.find_by_email("alice@example.com") is not None


def test_register_user_duplicate_email_is_case_insensitive(register: RegisterUserUseCase) -> None:
    register.execute("Alice", "alice@example.com", "secret")

    with pytest.raises(EmailInUseError) as exc_info:
        register.execute("Other", "ALICE@example.com", "other")

    assert exc_info.value.code == "EmailInUse"
    assert exc_info.value.status == 409


def test_login_user_success(register: RegisterUserUseCase, login: LoginUserUseCase) -> None:
    registered, _ = register.execute("Alice", "alice@example.com", "secret")

    user, token = login.execute(" ALICE@example.com", "secret")

    assert user.id == registered.id
    assert token == "token-2"


def test_login_failures_are_indistinguishable(
    register: RegisterUserUseCase, login: LoginUserUseCase
) -> None:
    register.execute("Alice", "alice@example.com", "secret")

    with pytest.raises(InvalidCredentialsError) as wrong_password:
        login.execute("alice@example.com", "nope")
    with pytest.raises(InvalidCredentialsError) as unknown_email:
        login.execute("ghost@example.com", "secret")

    assert wrong_password.value.to_dict() == unknown_email.value.to_dict()


def test_logout_revokes_token(
    register: RegisterUserUseCase, tokens: InMemoryTokenRepository
) -> None:
    _, token = register.execute("Alice", "alice@example.com", "secret")

    LogoutUserUseCase(tokens=tokens).execute(token)
    LogoutUserUseCase(tokens=tokens).execute("")

    assert tokens.find(token) is None


def test_authenticate_renews_expiry(
    register: RegisterUserUseCase,
    authenticate: AuthenticateSessionUseCase,
    tokens: InMemoryTokenRepository,
) -> None:
    user, token = register.execute("Alice", "alice@example.com", "secret")
    tokens.renew(token, datetime.now(UTC) + timedelta(minutes=1))

    auth = authenticate.execute(token)

    assert auth.user_id == user.id
    assert auth.email == "alice@example.com"
    assert tokens.tokens[token].expires_at > datetime.now(UTC) + timedelta(days=6)


@pytest.mark.parametrize("token", [None, "", "unknown"])
def test_authenticate_rejects_missing_or_unknown_token(
    authenticate: AuthenticateSessionUseCase, token: str | None
) -> None:
    with pytest.raises(UnauthorizedError):
        authenticate.execute(token)


def test_authenticate_purges_expired_session(
    register: RegisterUserUseCase,
    authenticate: AuthenticateSessionUseCase,
    tokens: InMemoryTokenRepository,
) -> None:
    _, token = register.execute("Alice", "alice@example.com", "secret")
    tokens.renew(token, datetime.now(UTC) - timedelta(seconds=1))

    with pytest.raises(UnauthorizedError):
        authenticate.execute(token)

    assert tokens.find(token) is None


def test_authenticate_purges_session_of_deleted_user(
    register: RegisterUserUseCase,
    authenticate: AuthenticateSessionUseCase,
    users: InMemoryUserRepository,
    tokens: InMemoryTokenRepository,
) -> None:
    user, token = register.execute("Alice", "alice@example.com", "secret")
    users.remove(user.id)

    with pytest.raises(UnauthorizedError):
        authenticate.execute(token)

    assert tokens.find(token) is None


def test_update_profile_changes_name_and_password(
    register: RegisterUserUseCase, users: InMemoryUserRepository
) -> None:
    user, _ = register.execute("Alice", "alice@example.com", "secret")
    use_case = UpdateProfileUseCase(users=users, password_hasher=DeterministicHasher())

    updated = use_case.execute(
        user.id, ProfileChanges(name=" Alicia ", current_password="secret", new_password="fresh")
    )

    assert updated.name == "Alicia"
    assert updated.password_hash == "hashed:fresh"
    assert updated.email == "alice@example.com"


def test_update_profile_wrong_current_password(
    register: RegisterUserUseCase, users: InMemoryUserRepository
) -> None:
    user, _ = register.execute("Alice", "alice@example.com", "secret")
    use_case = UpdateProfileUseCase(users=users, password_hasher=DeterministicHasher())

    with pytest.raises(InvalidPasswordError):
        use_case.execute(user.id, ProfileChanges(current_password="nope", new_password="fresh"))

    assert users.find_by_id(user.id).password_hash == "hashed:secret"


def test_update_profile_email_taken_by_someone_else(
    register: RegisterUserUseCase, users: InMemoryUserRepository
) -> None:
    register.execute("Bob", "bob@example.com", "secret")
    alice, _ = register.execute("Alice", "alice@example.com", "secret")
    use_case = UpdateProfileUseCase(users=users, password_hasher=DeterministicHasher())

    with pytest.raises(EmailInUseError):
        use_case.execute(alice.id, ProfileChanges(email="BOB@example.com"))

    # re-submitting one's own address is not a conflict
    same = use_case.execute(alice.id, ProfileChanges(email="Alice@Example.com"))
    assert same.email == "alice@example.com"
