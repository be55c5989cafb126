"""Request identity resolution for autofill routes."""

from __future__ import annotations

import logging

from fastapi import Request
from jose import JWTError, jwt

logger = logging.getLogger(__name__)


class Authenticator:
    """Resolve ``Authorization: Bearer <jwt>`` to the token's user id.

    Any missing, malformed, expired or mis-signed token resolves to ``None``;
    callers decide whether anonymous access is allowed.
    """

    def __init__(self, secret: str, algorithm: str = "HS256") -> None:
        self._secret = secret
        self._algorithm = algorithm

    def authenticate(self, request: Request) -> str | None:
        token = extract_bearer_token(request.headers.get("authorization"))
        if token is None:
            return None
        try:
            claims = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JWTError as exc:
            logger.info("autofill.auth_rejected reason=%s", exc.__class__.__name__)
            return None
        user_id = claims.get("userId") or claims.get("sub")
        if not isinstance(user_id, str) or not user_id.strip():
            return None
        return user_id.strip()

    def issue_token(self, user_id: str, **extra_claims: object) -> str:
        """Sign a token for ``user_id``; used by the seed script and tests."""

        return jwt.encode({"userId": user_id, **extra_claims}, self._secret, algorithm=self._algorithm)


def extract_bearer_token(auth_header: str | None) -> str | None:
    if not auth_header:
        return None
    scheme, _, token = auth_header.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()
