from __future__ import annotations

import itertools
from datetime import timedelta

import pytest

from uni_schedule.application.services.auth_service import AuthService
from uni_schedule.domain.users.entities import RefreshToken, Role, User, UserCreate
from uni_schedule.domain.users.exceptions import (
    InvalidAccessTokenError,
    InvalidLoginOrPasswordError,
    InvalidRefreshTokenError,
    MalformedTokenError,
    UsernameAlreadyTakenError,
    UserNotFoundError,
)
from uni_schedule.domain.users.repositories import (
    JWTManager,
    PasswordHasher,
    TokenRepository,
    UserRepository,
)
from uni_schedule.infrastructure.auth.jwt_manager import JwtManager
from uni_schedule.shared.errors.base import AlreadyExistsError, NotFoundError, ServiceError


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._users: dict[int, User] = {}
        self._seq = itertools.count(1)

    def get_by_username(self, username: str) -> User:
        for user in self._users.values():
            if user.username == username:
                return user
        raise NotFoundError()

    def get_by_id(self, user_id: int) -> User:
        try:
            return self._users[user_id]
        except KeyError:
            raise NotFoundError() from None

    def create(self, user: UserCreate) -> int:
        if any(u.username == user.username for u in self._users.values()):
            raise AlreadyExistsError()
        user_id = next(self._seq)
        self._users[user_id] = User(
            id=user_id,
            username=user.username,
            password_hash=user.password_hash,
            role=user.role,
            created_at=user.created_at,
        )
        return user_id

    def remove(self, user_id: int) -> None:
        self._users.pop(user_id)


class InMemoryTokenRepository(TokenRepository):
    def __init__(self) -> None:
        self.tokens: dict[int, RefreshToken] = {}
        self.reads = 0

    def get_by_user_id(self, user_id: int) -> RefreshToken:
        self.reads += 1
        try:
            return self.tokens[user_id]
        except KeyError:
            raise NotFoundError() from None

    def create_or_update(self, token: RefreshToken) -> None:
        self.tokens[token.user_id] = token


class DeterministicHasher(PasswordHasher):
    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        return hashed == f"hashed:{password}"


class CountingJwtManager(JWTManager):
    """Tokens look like ``access:<user id>:<serial>``."""

    def __init__(self) -> None:
        self._serial = itertools.count(1)

    def generate_access_token(self, user_id: int) -> str:
        return f"access:{user_id}:{next(self._serial)}"

    def generate_refresh_token(self, user_id: int) -> str:
        return f"refresh:{user_id}:{next(self._serial)}"

    def parse_access_token(self, token: str) -> int:
        return self._parse(token, "access")

    def parse_refresh_token(self, token: str) -> int:
        return self._parse(token, "refresh")

    @staticmethod
    def _parse(token: str, kind: str) -> int:
        parts = token.split(":")
        if len(parts) != 3 or parts[0] != kind:
            raise MalformedTokenError(token)
        return int(parts[1])


@pytest.fixture()
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture()
def tokens() -> InMemoryTokenRepository:
    return InMemoryTokenRepository()


@pytest.fixture()
def service(users: InMemoryUserRepository, tokens: InMemoryTokenRepository) -> AuthService:
    return AuthService(
        users=users,
        tokens=tokens,
        jwt_manager=CountingJwtManager(),
        password_hasher=DeterministicHasher(),
    )


def test_register_persists_student_and_refresh_token(
    service: AuthService, users: InMemoryUserRepository, tokens: InMemoryTokenRepository
) -> None:
    pair = service.register("alice", "pw1")

    user = users.get_by_username("alice")
    assert user.role is Role.STUDENT
    assert user.password_hash == "hashed:pw1"
    assert pair.access_token.startswith(f"access:{user.id}:")
    assert tokens.tokens[user.id].refresh_token == pair.refresh_token


def test_register_duplicate_username(service: AuthService) -> None:
    service.register("alice", "pw1")

    with pytest.raises(UsernameAlreadyTakenError):
        service.register("alice", "other")


def test_login_success_overwrites_refresh_token(
    service: AuthService, tokens: InMemoryTokenRepository
) -> None:
    registered = service.register("alice", "pw1")

    pair = service.login("alice", "pw1")

    assert pair.refresh_token != registered.refresh_token
    assert tokens.tokens[1].refresh_token == pair.refresh_token


@pytest.mark.parametrize(
    ("username", "password"),
    [("alice", "wrong"), ("bob", "pw1"), ("", "")],
)
def test_login_failures_collapse_to_one_error(
    service: AuthService, username: str, password: str
) -> None:
    service.register("alice", "pw1")

    with pytest.raises(InvalidLoginOrPasswordError):
        service.login(username, password)


def test_refresh_rotates_and_rejects_superseded_token(service: AuthService) -> None:
    first = service.register("alice", "pw1")

    second = service.refresh_token(first.refresh_token)
    assert second.refresh_token != first.refresh_token
    assert second.access_token != first.access_token

    with pytest.raises(InvalidRefreshTokenError):
        service.refresh_token(first.refresh_token)

    third = service.refresh_token(second.refresh_token)
    assert third.refresh_token not in (first.refresh_token, second.refresh_token)


def test_login_supersedes_registration_refresh_token(service: AuthService) -> None:
    registered = service.register("alice", "pw1")
    service.login("alice", "pw1")

    with pytest.raises(InvalidRefreshTokenError):
        service.refresh_token(registered.refresh_token)


def test_refresh_with_garbage_does_not_touch_repository(
    service: AuthService, tokens: InMemoryTokenRepository
) -> None:
    with pytest.raises(InvalidRefreshTokenError):
        service.refresh_token("not-a-token")

    assert tokens.reads == 0


def test_refresh_rejects_access_token(service: AuthService) -> None:
    pair = service.register("alice", "pw1")

    with pytest.raises(InvalidRefreshTokenError):
        service.refresh_token(pair.access_token)


def test_refresh_without_stored_token_is_user_not_found(service: AuthService) -> None:
    with pytest.raises(UserNotFoundError):
        service.refresh_token("refresh:42:1")


def test_get_user_from_access_token(service: AuthService) -> None:
    pair = service.register("alice", "pw1")

    user = service.get_user_from_access_token(pair.access_token)

    assert user.username == "alice"


def test_get_user_from_invalid_access_token(service: AuthService) -> None:
    pair = service.register("alice", "pw1")

    with pytest.raises(InvalidAccessTokenError):
        service.get_user_from_access_token(pair.refresh_token)


def test_get_user_from_access_token_of_deleted_user(
    service: AuthService, users: InMemoryUserRepository
) -> None:
    pair = service.register("alice", "pw1")
    users.remove(1)

    with pytest.raises(UserNotFoundError):
        service.get_user_from_access_token(pair.access_token)


def test_token_store_failure_is_wrapped(users: InMemoryUserRepository) -> None:
    class BrokenTokens(InMemoryTokenRepository):
        def create_or_update(self, token: RefreshToken) -> None:
            raise RuntimeError("disk full")

    service = AuthService(
        users=users,
        tokens=BrokenTokens(),
        jwt_manager=CountingJwtManager(),
        password_hasher=DeterministicHasher(),
    )

    with pytest.raises(ServiceError) as excinfo:
        service.register("alice", "pw1")

    assert excinfo.value.operation == "AuthService.register: create or update token"
    assert isinstance(excinfo.value.__cause__, RuntimeError)


def test_unexpected_lookup_failure_is_wrapped(tokens: InMemoryTokenRepository) -> None:
    class BrokenUsers(InMemoryUserRepository):
        def get_by_username(self, username: str) -> User:
            raise ConnectionError("db down")

    service = AuthService(
        users=BrokenUsers(),
        tokens=tokens,
        jwt_manager=CountingJwtManager(),
        password_hasher=DeterministicHasher(),
    )

    with pytest.raises(ServiceError):
        service.login("alice", "pw1")


def test_token_generation_failure_is_wrapped(
    users: InMemoryUserRepository, tokens: InMemoryTokenRepository
) -> None:
    class BrokenJwt(CountingJwtManager):
        def generate_refresh_token(self, user_id: int) -> str:
            raise ValueError("no key")

    service = AuthService(
        users=users,
        tokens=tokens,
        jwt_manager=BrokenJwt(),
        password_hasher=DeterministicHasher(),
    )

    with pytest.raises(ServiceError):
        service.register("alice", "pw1")
    assert tokens.tokens == {}


def test_alice_scenario_with_signed_tokens(
    users: InMemoryUserRepository, tokens: InMemoryTokenRepository
) -> None:
    service = AuthService(
        users=users,
        tokens=tokens,
        jwt_manager=JwtManager(secret="test-secret", access_ttl=timedelta(minutes=5)),
        password_hasher=DeterministicHasher(),
    )

    a1_r1 = service.register("alice", "pw1")
    a2_r2 = service.refresh_token(a1_r1.refresh_token)
    assert a1_r1.refresh_token != a2_r2.refresh_token

    with pytest.raises(InvalidRefreshTokenError):
        service.refresh_token(a1_r1.refresh_token)

    a3_r3 = service.refresh_token(a2_r2.refresh_token)
    assert service.get_user_from_access_token(a3_r3.access_token).username == "alice"


def test_hashing_failure_is_wrapped(
    users: InMemoryUserRepository, tokens: InMemoryTokenRepository
) -> None:
    class BrokenHasher(DeterministicHasher):
        def hash(self, password: str) -> str:
            raise ValueError("unsupported method")

    service = AuthService(
        users=users,
        tokens=tokens,
        jwt_manager=CountingJwtManager(),
        password_hasher=BrokenHasher(),
    )

    with pytest.raises(ServiceError) as excinfo:
        service.register("alice", "pw1")

    assert excinfo.value.operation == "AuthService.register: hashing password"
    assert isinstance(excinfo.value.__cause__, ValueError)
    with pytest.raises(NotFoundError):
        users.get_by_username("alice")


def test_refresh_token_lookup_failure_is_wrapped(users: InMemoryUserRepository) -> None:
    class UnreachableTokens(InMemoryTokenRepository):
        def get_by_user_id(self, user_id: int) -> RefreshToken:
            raise ConnectionError("db down")

    service = AuthService(
        users=users,
        tokens=UnreachableTokens(),
        jwt_manager=CountingJwtManager(),
        password_hasher=DeterministicHasher(),
    )

    with pytest.raises(ServiceError) as excinfo:
        service.refresh_token("refresh:1:1")

    assert excinfo.value.operation == "AuthService.refresh_token: get token by user id"
    assert isinstance(excinfo.value.__cause__, ConnectionError)
