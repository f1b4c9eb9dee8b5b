"""Credential helpers: password hashing, API keys and invite codes."""
from __future__ import annotations

import base64
import re
import secrets

import bcrypt

MIN_PASSWORD_LENGTH = 8
API_KEY_BYTES = 32
INVITE_CODE_LENGTH = 12

_EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}$")


def hash_password(password: str) -> str:
    """Hash a password with bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Return True if `password` matches the stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_RE.match(email))


def is_strong_password(password: str) -> bool:
    return len(password) >= MIN_PASSWORD_LENGTH


def generate_api_key() -> str:
    """Return a fresh URL-safe API key for an agent."""
    return base64.urlsafe_b64encode(secrets.token_bytes(API_KEY_BYTES)).decode()


def generate_invite_code() -> str:
    """Return a 12-character uppercase invite code."""
    raw = base64.urlsafe_b64encode(secrets.token_bytes(16)).decode()
    cleaned = raw.replace("-", "").replace("_", "").replace("=", "")
    return cleaned[:INVITE_CODE_LENGTH].upper()


def normalize_invite_code(code: str) -> str:
    return code.strip().upper()
