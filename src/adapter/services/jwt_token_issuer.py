from calendar import timegm
from datetime import timedelta
from typing import Optional
from uuid import UUID

from jose import JWTError, jwt

from libs.result import Error, Result, Return
from src.app.services.clock import Clock
from src.app.services.token_issuer import ITokenIssuer

SESSION = "session"
PURPOSE = "purpose"


class JwtTokenIssuer(ITokenIssuer):
    """
    HS256 JWT implementation of the token issuer.

    Expiry is checked against the injected clock rather than inside
    jose.jwt.decode, so tests can move time forward.
    """

    def __init__(
        self,
        secret: str,
        clock: Clock,
        session_ttl: timedelta = timedelta(days=7),
        purpose_ttl: timedelta = timedelta(hours=1),
        algorithm: str = "HS256",
    ):
        self.secret = secret
        self.clock = clock
        self.session_ttl = session_ttl
        self.purpose_ttl = purpose_ttl
        self.algorithm = algorithm

    def issue_session(self, user_id: UUID) -> str:
        return self._encode({"sub": str(user_id), "typ": SESSION}, self.session_ttl)

    def verify_session(self, token: str) -> Result[UUID]:
        decoded = self._decode(token, SESSION)
        if decoded.is_err():
            return Return.err(decoded.error)

        try:
            user_id = UUID(decoded.value.get("sub", ""))
        except (TypeError, ValueError):
            return Return.err(Error("INVALID_TOKEN", "Invalid session token"))
        return Return.ok(user_id)

    def issue_purpose_token(
        self, purpose: str, payload: dict, ttl: Optional[timedelta] = None
    ) -> str:
        claims = {"typ": PURPOSE, "purpose": purpose, "data": payload}
        return self._encode(claims, ttl or self.purpose_ttl)

    def verify_purpose_token(self, token: str, purpose: str) -> Result[dict]:
        decoded = self._decode(token, PURPOSE)
        if decoded.is_err():
            return Return.err(decoded.error)

        claims = decoded.value
        if claims.get("purpose") != purpose or not isinstance(claims.get("data"), dict):
            return Return.err(Error("INVALID_TOKEN", "Invalid token"))
        return Return.ok(claims["data"])

    def _encode(self, claims: dict, ttl: timedelta) -> str:
        now = self.clock.now()
        payload = {**claims, "iat": now, "exp": now + ttl}
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def _decode(self, token: str, token_type: str) -> Result[dict]:
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"verify_exp": False},
            )
        except JWTError:
            return Return.err(Error("INVALID_TOKEN", "Invalid token"))

        if claims.get("typ") != token_type:
            return Return.err(Error("INVALID_TOKEN", "Invalid token"))

        exp = claims.get("exp")
        if not isinstance(exp, (int, float)):
            return Return.err(Error("INVALID_TOKEN", "Invalid token"))
        if timegm(self.clock.now().utctimetuple()) >= exp:
            return Return.err(Error("TOKEN_EXPIRED", "Token has expired"))

        return Return.ok(claims)
