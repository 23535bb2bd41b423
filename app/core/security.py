"""Security related functions."""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional
from uuid import UUID

import jwt
from jwt import InvalidTokenError

from app.core.config import settings
from app.exceptions.base import UnauthorizedError

logger = logging.getLogger(__name__)


@dataclass
class AuthUser:
    """Identity resolved from a provider-issued access token."""

    id: UUID
    email: Optional[str] = None
    claims: dict[str, Any] = field(default_factory=dict)


class SupabaseAuthenticator:
    """
    Verifies Supabase access tokens.

    Supabase signs session JWTs with the project's JWT secret (HS256 by
    default) and sets ``sub`` to the user id and ``aud`` to ``authenticated``.
    The same token arrives either as a bearer header (mobile) or in the session
    cookie (web).

    :ivar secret_key: The secret used to verify token signatures.
    :type secret_key: str
    """

    def __init__(
        self,
        secret_key: Optional[str] = None,
        algorithm: Optional[str] = None,
        audience: Optional[str] = None,
    ):
        self.secret_key = secret_key if secret_key is not None else settings.auth_jwt_secret
        self.algorithm = algorithm or settings.auth_jwt_algorithm
        self.audience = audience if audience is not None else settings.auth_jwt_audience

    def verify_token(self, token: str) -> AuthUser:
        """
        Decode and validate ``token``. Signature, expiry and audience are all
        checked; any failure raises ``UnauthorizedError`` carrying the decoder's
        message.

        :param token: The JWT to verify.
        :return: The user the token was issued to.
        """
        if not self.secret_key:
            raise UnauthorizedError("Unauthorized: authentication is not configured")

        try:
            payload = jwt.decode(
                token,
                key=self.secret_key,
                algorithms=[self.algorithm],
                audience=self.audience or None,
                options={"verify_aud": bool(self.audience), "require": ["sub", "exp"]},
            )
        except InvalidTokenError as e:
            logger.debug(f"Token rejected: {e}")
            raise UnauthorizedError(f"Unauthorized: {e}") from e

        try:
            user_id = UUID(str(payload["sub"]))
        except ValueError as e:
            raise UnauthorizedError("Unauthorized: Invalid token") from e

        return AuthUser(id=user_id, email=payload.get("email"), claims=payload)
