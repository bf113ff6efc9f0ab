import time
from typing import Any, Dict

import httpx
from jose import JWTError, jwt
from loguru import logger

from hoodsgoods.config import settings
from hoodsgoods.errors import AuthenticationError
from hoodsgoods.schemas.auth import Claims


class IdentityVerifier:
    """Verifies bearer tokens issued by the external identity provider.

    RS256 tokens are checked against the provider's JWKS, which is fetched with
    httpx and cached for ``jwks_cache_seconds``. When ``AUTH_JWT_SECRET`` is set
    tokens are verified as HS256 with that secret instead.
    """

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(connect=5.0, read=10.0, write=10.0, pool=5.0),
            headers={"Accept": "application/json"},
        )
        self._jwks: Dict[str, Any] | None = None
        self._jwks_fetched_at = 0.0

    async def close(self) -> None:
        await self._client.aclose()

    async def fetch_jwks(self, force: bool = False) -> Dict[str, Any]:
        fresh = (time.monotonic() - self._jwks_fetched_at) < settings.jwks_cache_seconds
        if self._jwks is not None and fresh and not force:
            return self._jwks
        if not settings.auth_jwks_url:
            raise AuthenticationError("Token verification is not configured")
        logger.bind(event="identity.jwks.request").info("Fetching JWKS from {url}", url=settings.auth_jwks_url)
        resp = await self._client.get(settings.auth_jwks_url)
        resp.raise_for_status()
        self._jwks = resp.json()
        self._jwks_fetched_at = time.monotonic()
        return self._jwks

    async def _signing_key(self, token: str) -> Dict[str, Any]:
        try:
            kid = jwt.get_unverified_header(token).get("kid")
        except JWTError:
            raise AuthenticationError("Malformed token")
        for attempt in range(2):
            # second pass picks up rotated keys
            jwks = await self.fetch_jwks(force=attempt > 0)
            for key in jwks.get("keys", []):
                if kid is None or key.get("kid") == kid:
                    return key
        raise AuthenticationError("Unknown signing key")

    async def verify(self, token: str) -> Claims:
        if settings.auth_jwt_secret:
            key: Any = settings.auth_jwt_secret
            algorithms = ["HS256"]
        else:
            key = await self._signing_key(token)
            algorithms = settings.algorithms
        try:
            payload = jwt.decode(
                token,
                key,
                algorithms=algorithms,
                audience=settings.auth_audience,
                issuer=settings.auth_issuer,
                options={"verify_aud": settings.auth_audience is not None},
            )
        except JWTError as e:
            logger.bind(event="identity.token.rejected", error=str(e)).warning("Token rejected")
            raise AuthenticationError("Invalid or expired token")
        if not payload.get("sub"):
            raise AuthenticationError("Token has no subject")
        return Claims(
            sub=payload["sub"],
            email=payload.get("email"),
            name=payload.get("name") or payload.get("nickname"),
        )


identity_verifier = IdentityVerifier()
