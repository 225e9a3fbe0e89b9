"""
Одноразовые токены и блокировка входа: статусы поиска, погашение, перевыпуск.
"""
from datetime import datetime, timedelta, timezone

import pytest

from pashumitra.modules.auth_token.model import PURPOSE_RESET_PASSWORD, PURPOSE_VERIFY_EMAIL
from pashumitra.modules.auth_token.service import (
    TokenStatus,
    consume_token,
    hash_token,
    issue_token,
    lookup_token,
)
from pashumitra.modules.user.service import (
    create_user,
    hash_password,
    is_locked,
    register_failed_login,
    register_successful_login,
)


async def _user(session, email: str = "ravi@pashumitra.in"):
    return await create_user(
        session,
        name="Ravi Kumar",
        email=email,
        hashed_password=hash_password("StrongPass1"),
    )


@pytest.mark.asyncio
async def test_issued_token_is_stored_hashed_and_valid(db_session) -> None:
    user = await _user(db_session)
    auth_token, raw = await issue_token(db_session, user.id, PURPOSE_VERIFY_EMAIL, timedelta(hours=24))

    assert auth_token.token_hash == hash_token(raw)
    assert auth_token.token_hash != raw
    lookup = await lookup_token(db_session, raw, PURPOSE_VERIFY_EMAIL)
    assert lookup.status is TokenStatus.VALID
    assert lookup.token.user_id == user.id


@pytest.mark.asyncio
async def test_lookup_distinguishes_statuses(db_session) -> None:
    user = await _user(db_session)
    _, raw = await issue_token(db_session, user.id, PURPOSE_VERIFY_EMAIL, timedelta(hours=24))

    assert (await lookup_token(db_session, "no-such-token", PURPOSE_VERIFY_EMAIL)).status is TokenStatus.NOT_FOUND
    # Токен подтверждения не подходит для сброса пароля
    assert (await lookup_token(db_session, raw, PURPOSE_RESET_PASSWORD)).status is TokenStatus.NOT_FOUND

    lookup = await lookup_token(db_session, raw, PURPOSE_VERIFY_EMAIL)
    await consume_token(db_session, lookup.token)
    assert (await lookup_token(db_session, raw, PURPOSE_VERIFY_EMAIL)).status is TokenStatus.USED


@pytest.mark.asyncio
async def test_expired_token(db_session) -> None:
    user = await _user(db_session)
    _, raw = await issue_token(db_session, user.id, PURPOSE_RESET_PASSWORD, timedelta(seconds=-1))

    lookup = await lookup_token(db_session, raw, PURPOSE_RESET_PASSWORD)

    assert lookup.status is TokenStatus.EXPIRED
    assert lookup.token is not None


@pytest.mark.asyncio
async def test_reissue_expires_previous_token(db_session) -> None:
    user = await _user(db_session)
    _, first = await issue_token(db_session, user.id, PURPOSE_VERIFY_EMAIL, timedelta(hours=24))
    _, second = await issue_token(db_session, user.id, PURPOSE_VERIFY_EMAIL, timedelta(hours=24))

    db_session.expire_all()
    assert (await lookup_token(db_session, first, PURPOSE_VERIFY_EMAIL)).status is TokenStatus.EXPIRED
    assert (await lookup_token(db_session, second, PURPOSE_VERIFY_EMAIL)).status is TokenStatus.VALID


@pytest.mark.asyncio
async def test_failed_logins_lock_account(db_session) -> None:
    user = await _user(db_session)

    for _ in range(4):
        await register_failed_login(db_session, user, max_attempts=5, lock_minutes=120)
    assert user.login_attempts == 4
    assert is_locked(user) is False

    await register_failed_login(db_session, user, max_attempts=5, lock_minutes=120)
    assert is_locked(user) is True
    assert user.login_attempts == 0
    assert is_locked(user, now=datetime.now(timezone.utc) + timedelta(minutes=121)) is False


@pytest.mark.asyncio
async def test_expired_lock_restarts_counter(db_session) -> None:
    user = await _user(db_session)
    user.lock_until = datetime.now(timezone.utc) - timedelta(minutes=1)
    user.login_attempts = 3

    await register_failed_login(db_session, user, max_attempts=5, lock_minutes=120)

    assert user.lock_until is None
    assert user.login_attempts == 1


@pytest.mark.asyncio
async def test_successful_login_resets_counter(db_session) -> None:
    user = await _user(db_session)
    await register_failed_login(db_session, user, max_attempts=5, lock_minutes=120)

    await register_successful_login(db_session, user)

    assert user.login_attempts == 0
    assert user.last_login_at is not None
