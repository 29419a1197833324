import pytest
from fastapi.security import HTTPAuthorizationCredentials

from mood_journal_api.app.core.errors import Unauthenticated
from mood_journal_api.app.core.security import (
    create_access_token,
    decode_access_token,
    require_user,
    resolve_user,
)
from mood_journal_api.app.schemas.user import CurrentUser


def bearer(token):
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


def test_token_round_trip():
    payload = decode_access_token(create_access_token({"sub": "user-1"}))
    assert payload["sub"] == "user-1"
    assert "exp" in payload


def test_tampered_token_is_rejected():
    header, payload, signature = create_access_token({"sub": "user-1"}).split(".")
    forged = create_access_token({"sub": "user-2"}).split(".")[1]
    assert decode_access_token(f"{header}.{forged}.{signature}") is None


def test_expired_token_is_rejected():
    assert decode_access_token(create_access_token({"sub": "user-1"}, expires_delta=-10)) is None


@pytest.mark.parametrize("token", ["", "abc", "a.b", "a.b.c", "a.b.c.d"])
def test_malformed_tokens_are_rejected(token):
    assert decode_access_token(token) is None


def test_resolve_user():
    assert resolve_user(None) is None
    assert resolve_user(bearer("garbage")) is None
    assert resolve_user(bearer(create_access_token({"role": "no-subject"}))) is None
    assert resolve_user(bearer(create_access_token({"sub": "user-1"}))) == CurrentUser(id="user-1")


def test_require_user():
    user = CurrentUser(id="user-1")
    assert require_user(user) is user
    with pytest.raises(Unauthenticated) as excinfo:
        require_user(None)
    assert excinfo.value.code == "UNAUTHORIZED"
