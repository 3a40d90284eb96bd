"""JWT Token Service."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt

from taskflow.config import Settings, get_settings
from taskflow.exceptions import InvalidSignature, MalformedToken, TokenExpired


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a verified token."""

    user_id: str
    role: str


class JWTService:
    """Issues and verifies signed, time-limited bearer tokens."""

    def __init__(self, settings: Settings) -> None:
        self.secret_key = settings.JWT_SECRET_KEY
        self.algorithm = settings.JWT_ALGORITHM
        self.expire_minutes = settings.JWT_EXPIRE_MINUTES

    def issue(self, user_id: str, role: str, ttl: timedelta | None = None) -> str:
        """Create a token embedding the user's id and current role."""
        issued_at = datetime.now(timezone.utc)
        if ttl is None:
            ttl = timedelta(minutes=self.expire_minutes)
        payload = {
            "sub": str(user_id),
            "role": role,
            "iat": issued_at,
            "exp": issued_at + ttl,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """Verify a token and return its claims.

        Raises MalformedToken if the token cannot be parsed or lacks the
        identity claims, InvalidSignature if it was not signed with our secret,
        and TokenExpired once its expiry has passed.
        """
        try:
            jwt.get_unverified_claims(token)
        except JWTError as e:
            raise MalformedToken(str(e)) from None

        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError as e:
            raise TokenExpired(str(e)) from None
        except JWTError as e:
            raise InvalidSignature(str(e)) from None

        user_id = payload.get("sub")
        role = payload.get("role")
        if not user_id or not role:
            raise MalformedToken("Token is missing identity claims")
        return TokenClaims(user_id=user_id, role=role)


_jwt_service: JWTService | None = None


def get_jwt_service() -> JWTService:
    """Get singleton JWT service instance."""
    global _jwt_service
    if _jwt_service is None:
        _jwt_service = JWTService(get_settings())
    return _jwt_service
