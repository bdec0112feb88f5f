import asyncio
from types import SimpleNamespace

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from jose import jwt
from starlette.requests import Request

from smartops.core import config
from smartops.core.request_context import clear_request_context, current_context
from smartops.deps import get_current_user, require_role
from smartops.models.user import User
from smartops.services.auth import create_access_token
from smartops.services.errors import AuthorizationError, InvalidToken
from smartops.services.passwords import hash_password
from smartops.services.tenants import create_business


def _build_request(path: str = "/api/resource", method: str = "GET") -> Request:
    scope = {
        "type": "http",
        "method": method,
        "path": path,
        "query_string": b"",
        "headers": [],
        "path_params": {},
        "client": ("testclient", 50000),
        "server": ("testserver", 80),
        "scheme": "http",
    }
    return Request(scope)


def _bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


def _resolve(db, credentials, request=None):
    return asyncio.run(get_current_user(request=request or _build_request(), credentials=credentials, db=db))


def _seed_user(db, *, active: bool = True, role: str = "cashier") -> User:
    business = create_business(db, name="Corner", subdomain="corner")
    user = User(
        business_id=business.id,
        email="staff@corner.com",
        password_hash=hash_password("password1"),
        first_name="Staff",
        last_name="Member",
        role=role,
        is_active=active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def test_require_role_denies_role_outside_list():
    user = SimpleNamespace(id=12, business_id=3, role="cashier")
    dependency = require_role(["owner", "manager"])

    with pytest.raises(AuthorizationError) as exc:
        dependency(request=_build_request(path="/api/users"), user=user)

    assert exc.value.status_code == 403
    assert exc.value.message == "Insufficient permissions"


def test_require_role_allows_listed_role_case_insensitive():
    user = SimpleNamespace(id=13, business_id=3, role="Manager")
    dependency = require_role(["owner", "manager"])

    assert dependency(request=_build_request(), user=user) is user

def test_get_current_user_without_token_is_401(db_session):
    with pytest.raises(HTTPException) as exc:
        _resolve(db_session, None)

    assert exc.value.status_code == 401
    assert exc.value.detail == "Access token required"


def test_get_current_user_with_garbage_token_is_403(db_session):
    with pytest.raises(InvalidToken):
        _resolve(db_session, _bearer("not-a-jwt"))


def test_get_current_user_attaches_user_to_request(db_session):
    user = _seed_user(db_session)
    request = _build_request()

    resolved = _resolve(db_session, _bearer(create_access_token(user.id, user.business_id)), request)

    assert resolved.id == user.id
    assert request.state.user is resolved


def test_get_current_user_binds_caller_in_request_task(db_session):
    user = _seed_user(db_session, role="manager")
    credentials = _bearer(create_access_token(user.id, user.business_id))

    async def handle():
        await get_current_user(request=_build_request(), credentials=credentials, db=db_session)
        return current_context()

    try:
        context = asyncio.run(handle())
    finally:
        clear_request_context()

    assert context.business_id == str(user.business_id)
    assert context.user_id == str(user.id)
    assert context.role == "manager"


def test_get_current_user_rejects_deactivated_user(db_session):
    user = _seed_user(db_session, active=False)

    with pytest.raises(InvalidToken):
        _resolve(db_session, _bearer(create_access_token(user.id, user.business_id)))


def test_get_current_user_rejects_token_for_other_business(db_session):
    user = _seed_user(db_session)

    with pytest.raises(InvalidToken):
        _resolve(db_session, _bearer(create_access_token(user.id, user.business_id + 1)))


def test_signed_token_with_non_numeric_business_is_invalid(db_session):
    user = _seed_user(db_session)
    token = jwt.encode(
        {"sub": str(user.id), "business_id": "corner"},
        config.JWT_SECRET_KEY,
        algorithm=config.JWT_ALGORITHM,
    )

    with pytest.raises(InvalidToken):
        _resolve(db_session, _bearer(token))


def test_expired_token_is_rejected(db_session):
    user = _seed_user(db_session)

    with pytest.raises(InvalidToken):
        _resolve(db_session, _bearer(create_access_token(user.id, user.business_id, expires_minutes=-1)))
