# tests/services/test_tokens.py
"""Tests for session token issuance, validation and rotation."""

import os
from datetime import timedelta

import pytest
from jose import jwt

from agentboards.core.errors import (
    AuthError,
    TokenExpired,
    TokenMalformed,
    TokenReplayed,
    TokenWrongType,
)
from agentboards.db.time import utcnow
from agentboards.services.tokens import TokenAuthority, purge_spent_refresh_tokens


class TestIssueAndValidate:
    """Signing and verifying access/refresh tokens."""

    def test_access_token_round_trip(self, tokens, test_user):
        """A fresh access token validates to its subject."""
        pair = tokens.issue_pair(test_user.id)

        assert tokens.validate_access(pair.access_token) == test_user.id
        assert pair.expires_at < pair.refresh_expires_at

    def test_claims_carry_type_and_identifier(self, tokens, test_user):
        """Both tokens carry sub/type/iat/exp/jti claims."""
        pair = tokens.issue_pair(test_user.id)
        access = jwt.get_unverified_claims(pair.access_token)
        refresh = jwt.get_unverified_claims(pair.refresh_token)

        assert access["type"] == "access"
        assert refresh["type"] == "refresh"
        assert access["sub"] == refresh["sub"] == str(test_user.id)
        assert access["jti"] != refresh["jti"]
        assert refresh["exp"] - refresh["iat"] == int(timedelta(days=7).total_seconds())
        assert access["exp"] - access["iat"] == int(timedelta(minutes=60).total_seconds())

    def test_expired_access_token(self, tokens, test_user):
        """Tokens past their exp are rejected as expired."""
        pair = tokens.issue_pair(test_user.id, now=utcnow() - timedelta(hours=2))

        with pytest.raises(TokenExpired):
            tokens.validate_access(pair.access_token)

    def test_refresh_token_is_not_an_access_token(self, tokens, test_user):
        """Presenting a refresh token where an access token is expected fails."""
        pair = tokens.issue_pair(test_user.id)

        with pytest.raises(TokenWrongType):
            tokens.validate_access(pair.refresh_token)
        with pytest.raises(TokenWrongType):
            tokens.validate_refresh(pair.access_token)

    @pytest.mark.parametrize("token", ["", "not.a.jwt", "garbage"])
    def test_malformed_tokens(self, tokens, token):
        """Undecodable input is malformed."""
        with pytest.raises(TokenMalformed):
            tokens.validate_access(token)

    def test_wrong_secret_is_malformed(self, tokens, test_user):
        """A token signed with another key fails signature verification."""
        forged = TokenAuthority(secret_key="someone-else").issue_pair(test_user.id)

        with pytest.raises(TokenMalformed):
            tokens.validate_access(forged.access_token)

    def test_missing_subject_is_malformed(self, tokens):
        """A well-signed token without a usable sub claim is rejected."""
        now = int(utcnow().timestamp())
        token = jwt.encode(
            {"type": "access", "iat": now, "exp": now + 60, "sub": "not-a-uuid"},
            os.environ["SECRET_KEY"],
            algorithm="HS256",
        )

        with pytest.raises(TokenMalformed):
            tokens.validate_access(token)


class TestRotate:
    """Exchanging refresh tokens for new pairs."""

    def test_rotate_issues_newer_pair_for_same_subject(self, tokens, test_user, db_session):
        """The new refresh token has the same sub, iat >= and exp > the old one."""
        original = tokens.issue_pair(test_user.id, now=utcnow() - timedelta(hours=1))
        old_claims = tokens.validate_refresh(original.refresh_token)

        rotated = tokens.rotate(original.refresh_token, db_session)
        new_claims = tokens.validate_refresh(rotated.refresh_token)

        assert new_claims.subject == old_claims.subject == test_user.id
        assert new_claims.issued_at >= old_claims.issued_at
        assert new_claims.expires_at > old_claims.expires_at
        assert tokens.validate_access(rotated.access_token) == test_user.id

    def test_rotate_right_after_issue_extends_expiry(self, tokens, test_user, db_session):
        """Rotating within the same second still yields a later refresh expiry."""
        for _ in range(5):
            original = tokens.issue_pair(test_user.id)
            old_claims = tokens.validate_refresh(original.refresh_token)

            rotated = tokens.rotate(original.refresh_token, db_session)
            new_claims = tokens.validate_refresh(rotated.refresh_token)

            assert new_claims.issued_at > old_claims.issued_at
            assert new_claims.expires_at > old_claims.expires_at
            assert rotated.refresh_expires_at > original.refresh_expires_at

    def test_chained_rotations_keep_extending(self, tokens, test_user, db_session):
        pair = tokens.issue_pair(test_user.id)
        expiries = [tokens.validate_refresh(pair.refresh_token).expires_at]
        for _ in range(3):
            pair = tokens.rotate(pair.refresh_token, db_session)
            expiries.append(tokens.validate_refresh(pair.refresh_token).expires_at)

        assert expiries == sorted(set(expiries))

    def test_rotate_rejects_access_token(self, tokens, test_user, db_session):
        """Only refresh-typed tokens can be rotated."""
        pair = tokens.issue_pair(test_user.id)

        with pytest.raises(TokenWrongType):
            tokens.rotate(pair.access_token, db_session)

    def test_rotate_rejects_expired_refresh_token(self, tokens, test_user, db_session):
        """Refresh tokens past their natural expiry cannot be rotated."""
        pair = tokens.issue_pair(test_user.id, now=utcnow() - timedelta(days=8))

        with pytest.raises(TokenExpired):
            tokens.rotate(pair.refresh_token, db_session)

    def test_single_use_refresh_token_replay_is_rejected(self, tokens, test_user, db_session):
        """A refresh token can be exchanged once."""
        pair = tokens.issue_pair(test_user.id)
        tokens.rotate(pair.refresh_token, db_session)

        with pytest.raises(TokenReplayed):
            tokens.rotate(pair.refresh_token, db_session)

    def test_reusable_refresh_tokens_when_single_use_disabled(self, test_user, db_session):
        """With single-use off, the old token stays valid until it expires."""
        authority = TokenAuthority(
            secret_key=os.environ["SECRET_KEY"], single_use_refresh=False
        )
        pair = authority.issue_pair(test_user.id)

        authority.rotate(pair.refresh_token, db_session)
        again = authority.rotate(pair.refresh_token, db_session)

        assert authority.validate_access(again.access_token) == test_user.id

    def test_rotate_requires_live_account(self, tokens, test_user, db_session):
        """Soft-deleted accounts cannot refresh."""
        pair = tokens.issue_pair(test_user.id)
        test_user.deleted_at = utcnow()
        db_session.commit()

        with pytest.raises(AuthError):
            tokens.rotate(pair.refresh_token, db_session)


def test_purge_removes_only_expired_records(tokens, test_user, db_session):
    """The nightly purge drops spent-token rows whose tokens expired."""
    stale = tokens.issue_pair(test_user.id, now=utcnow() - timedelta(days=6, hours=23))
    fresh = tokens.issue_pair(test_user.id)
    tokens.rotate(stale.refresh_token, db_session)
    tokens.rotate(fresh.refresh_token, db_session)

    purged = purge_spent_refresh_tokens(db_session, now=utcnow() + timedelta(hours=2))
    db_session.commit()

    assert purged == 1
