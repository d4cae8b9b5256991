"""JWT token creation and verification.

Learn: JWT (JSON Web Token) provides stateless authentication. The token
carries the user id ("sub") and an expiry ("exp"), signed with a
server-held secret. Nothing is stored server-side, so there is no
logout: a token stays valid until it expires.

TokenService is frozen and built once from settings at startup
(see main.create_app), so the secret can't be swapped at runtime.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

import jwt

from devconnect.config import Settings
from devconnect.errors import ErrorKind, Rejected


@dataclass(frozen=True)
class TokenService:
    """Issues and verifies signed, time-limited bearer tokens."""

    secret: str = field(repr=False)
    algorithm: str = "HS256"
    ttl_seconds: int = 360000

    @classmethod
    def from_settings(cls, cfg: Settings) -> "TokenService":
        return cls(
            secret=cfg.jwt_secret,
            algorithm=cfg.jwt_algorithm,
            ttl_seconds=cfg.token_ttl_seconds,
        )

    def issue(self, identity: str, now: Optional[datetime] = None) -> str:
        """Create a token for `identity`, expiring ttl_seconds after `now`."""
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "sub": identity,
            "iat": issued_at,
            "exp": issued_at + timedelta(seconds=self.ttl_seconds),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> Union[str, Rejected]:
        """Verify a token and return the identity it carries.

        Returns a Rejected (EXPIRED, INVALID_SIGNATURE or MALFORMED)
        instead of raising. The signature is checked before the claims,
        so a tampered token is reported as INVALID_SIGNATURE even if
        it has also expired.
        """
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            return Rejected(ErrorKind.EXPIRED, "Token has expired")
        except jwt.InvalidSignatureError:
            return Rejected(ErrorKind.INVALID_SIGNATURE, "Token is not valid")
        except jwt.InvalidTokenError:
            return Rejected(ErrorKind.MALFORMED, "Token is not valid")
        return payload["sub"]
