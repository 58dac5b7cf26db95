# This project was developed with assistance from AI tools.
"""
Keycloak bearer-token authentication and route-level role gates.

Tokens are RS256 JWTs checked against the realm's published key set,
which is cached for ``JWKS_CACHE_TTL`` seconds and refetched early when a
token names a key id the cache has not seen (key rotation).

Set AUTH_DISABLED=true to skip validation and act as a dev admin.
"""

import logging
import time
from typing import Annotated

import httpx
import jwt
from db.enums import UserRole
from fastapi import Depends, HTTPException, Request, status

from ..core.auth import build_data_scope
from ..core.config import settings
from ..schemas.auth import DataScope, RequestMeta, TokenPayload, UserContext

logger = logging.getLogger(__name__)


def _realm_url() -> str:
    return f"{settings.KEYCLOAK_URL}/realms/{settings.KEYCLOAK_REALM}"


class JwksCache:
    """Signing keys by ``kid``, refreshed on expiry or on an unknown kid."""

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._keys: dict[str, jwt.PyJWK] = {}
        self._loaded_at: float | None = None

    def _fetch(self) -> dict:
        response = httpx.get(f"{_realm_url()}/protocol/openid-connect/certs", timeout=5)
        response.raise_for_status()
        return response.json()

    def _reload(self) -> None:
        key_set = jwt.PyJWKSet.from_dict(self._fetch())
        self._keys = {key.key_id: key for key in key_set.keys}
        self._loaded_at = self._clock()
        logger.info("Loaded %d signing key(s) from Keycloak", len(self._keys))

    def _stale(self) -> bool:
        return self._loaded_at is None or self._clock() - self._loaded_at > settings.JWKS_CACHE_TTL

    def key_for(self, kid: str | None) -> jwt.PyJWK:
        try:
            if self._stale() or kid not in self._keys:
                self._reload()
        except httpx.HTTPError as exc:
            logger.error("Keycloak key set unavailable: %s", exc)
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Authentication service unavailable",
            ) from exc

        key = self._keys.get(kid)
        if key is None:
            raise jwt.InvalidTokenError(f"Unknown signing key {kid!r}")
        return key


jwks_cache = JwksCache()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _bearer_token(request: Request) -> str:
    scheme, _, credentials = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not credentials:
        raise _unauthorized("Missing authentication token")
    return credentials


def decode_token(token: str) -> TokenPayload:
    """Verify signature and issuer; audience is not checked."""
    try:
        kid = jwt.get_unverified_header(token).get("kid")
        claims = jwt.decode(
            token,
            jwks_cache.key_for(kid).key,
            algorithms=["RS256"],
            issuer=_realm_url(),
            options={"verify_aud": False},
        )
    except jwt.ExpiredSignatureError as exc:
        raise _unauthorized("Token has expired") from exc
    except jwt.InvalidTokenError as exc:
        raise _unauthorized("Invalid token") from exc
    return TokenPayload(**claims)


# Most privileged first. ``system`` is internal and never granted by a token.
_ROLE_PRIORITY: tuple[UserRole, ...] = (
    UserRole.ADMIN,
    UserRole.PROPERTY_MANAGER,
    UserRole.LANDLORD,
    UserRole.AGENT,
    UserRole.APPLICANT,
)


def _resolve_role(token_payload: TokenPayload) -> UserRole:
    """Effective role from ``realm_access.roles``; Keycloak defaults are ignored."""
    granted = set(token_payload.realm_access.get("roles", []))
    matches = [role for role in _ROLE_PRIORITY if role.value in granted]
    if not matches:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="No recognized role assigned",
        )
    if len(matches) > 1:
        logger.warning(
            "User %s holds roles %s; acting as %s", token_payload.sub, sorted(granted), matches[0].value
        )
    return matches[0]


_DEV_USER = UserContext(
    user_id="dev-user",
    role=UserRole.ADMIN,
    email="dev@leasedesk.local",
    name="Dev User",
    data_scope=DataScope(all_applications=True),
)


async def get_current_user(request: Request) -> UserContext:
    """Resolve the caller from the bearer token (or the dev admin when auth is off)."""
    if settings.AUTH_DISABLED:
        return _DEV_USER

    payload = decode_token(_bearer_token(request))
    role = _resolve_role(payload)
    return UserContext(
        user_id=payload.sub,
        role=role,
        email=payload.email,
        name=payload.name or payload.preferred_username,
        data_scope=build_data_scope(role, payload.sub),
    )


CurrentUser = Annotated[UserContext, Depends(get_current_user)]


def require_roles(*allowed_roles: UserRole):
    """Route dependency that rejects callers outside ``allowed_roles`` with 403."""

    async def _check(user: CurrentUser) -> UserContext:
        if user.role in allowed_roles:
            return user
        logger.warning(
            "Role %s denied for user %s (allowed: %s)",
            user.role.value,
            user.user_id,
            ", ".join(r.value for r in allowed_roles),
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Insufficient permissions",
        )

    return _check


def get_request_meta(request: Request) -> RequestMeta:
    """Client IP (first X-Forwarded-For hop when proxied) and user agent."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        ip_address = forwarded.split(",")[0].strip()
    else:
        ip_address = request.client.host if request.client else None
    return RequestMeta(ip_address=ip_address, user_agent=request.headers.get("user-agent"))


ClientMeta = Annotated[RequestMeta, Depends(get_request_meta)]
