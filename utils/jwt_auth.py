"""
Подписанный токен админа в формате JWT (HS256).

Токен живёт в HTTP-only cookie; в полезной нагрузке id, email, имя и роль.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import time
from typing import Any

from fastapi import HTTPException, status

from config import get_settings

ALGORITHM = "HS256"
_HEADER = {"alg": ALGORITHM, "typ": "JWT"}


def _unauthorized(code: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=code)


def _encode_segment(data: dict[str, Any]) -> str:
    raw = json.dumps(data, separators=(",", ":")).encode("utf-8")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _decode_segment(segment: str) -> dict[str, Any]:
    padding = "=" * (-len(segment) % 4)
    try:
        decoded = json.loads(base64.urlsafe_b64decode(segment + padding))
    except ValueError:
        raise _unauthorized("token_invalid")
    if not isinstance(decoded, dict):
        raise _unauthorized("token_invalid")
    return decoded


def _jwt_secret() -> str:
    secret = (get_settings().jwt_secret or "").strip()
    if not secret:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="jwt_secret_missing",
        )
    return secret


def _signature(signing_input: str, secret: str) -> str:
    digest = hmac.new(secret.encode("utf-8"), signing_input.encode("utf-8"), hashlib.sha256).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


def create_access_token(
    *,
    user_id: int,
    email: str,
    name: str,
    role: str,
    ttl_seconds: int | None = None,
) -> str:
    ttl = get_settings().jwt_ttl_seconds if ttl_seconds is None else ttl_seconds
    if ttl <= 0:
        raise ValueError("ttl_seconds must be positive")

    secret = _jwt_secret()
    issued_at = int(time.time())
    claims: dict[str, Any] = {
        "user_id": int(user_id),
        "email": email,
        "name": name,
        "role": role,
        "iat": issued_at,
        "exp": issued_at + int(ttl),
    }
    signing_input = f"{_encode_segment(_HEADER)}.{_encode_segment(claims)}"
    return f"{signing_input}.{_signature(signing_input, secret)}"


def decode_access_token(token: str | None) -> dict[str, Any]:
    """Проверяет подпись и срок действия; ошибки отдаются как HTTP 401 с кодом в detail."""

    if not token:
        raise _unauthorized("token_missing")

    try:
        header_segment, payload_segment, signature_segment = token.split(".")
    except ValueError:
        raise _unauthorized("token_invalid")

    expected = _signature(f"{header_segment}.{payload_segment}", _jwt_secret())
    if not hmac.compare_digest(expected, signature_segment):
        raise _unauthorized("token_invalid")

    if _decode_segment(header_segment).get("alg") != ALGORITHM:
        raise _unauthorized("token_invalid")

    claims = _decode_segment(payload_segment)
    try:
        expires_at = int(claims.get("exp"))
    except (TypeError, ValueError):
        raise _unauthorized("token_invalid")

    if expires_at < int(time.time()):
        raise _unauthorized("token_expired")
    return claims


__all__ = ["ALGORITHM", "create_access_token", "decode_access_token"]
