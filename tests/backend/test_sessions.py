from __future__ import annotations

import pytest

from backend.app.sessions import InvalidSession, SessionSigner


def test_issued_token_round_trips_profile() -> None:
    signer = SessionSigner("secret")
    token = signer.issue(email="me@example.org", name="Me", picture="https://example.org/me.png")

    assert signer.verify(token) == {
        "email": "me@example.org",
        "name": "Me",
        "picture": "https://example.org/me.png",
    }


def test_token_from_other_secret_is_rejected() -> None:
    token = SessionSigner("one").issue(email="me@example.org")
    with pytest.raises(InvalidSession):
        SessionSigner("two").verify(token)


def test_tampered_token_is_rejected() -> None:
    token = SessionSigner("secret").issue(email="me@example.org")
    with pytest.raises(InvalidSession):
        SessionSigner("secret").verify(token[:-2] + "xx")


def test_expired_token_is_rejected() -> None:
    signer = SessionSigner("secret", max_age_s=-1)
    token = signer.issue(email="me@example.org")
    with pytest.raises(InvalidSession, match="expired"):
        signer.verify(token)
