"""
École API — Token Verifier & Role Gate
=======================================

What:  FastAPI dependencies that authenticate the caller and enforce roles.
Why:   Every protected route needs the same two answers: "who is this?" and
       "may they call this route?". Both are answered here, once.
How:   `get_current_identity` reads the bearer token, verifies it with
       python-jose and attaches an `Identity` to the request.
       `require_roles(...)` builds a dependency that checks set membership
       of the identity's role.
       `enforce_route_gates` replays both for a request whose body failed to
       decode, so 401/403 still win over 400.

Status mapping:
    no Authorization header / no bearer token     → 401 UnauthorizedError
    bad signature, expired, wrong audience        → 403 ForbiddenError
    authenticated but role not in the allowed set → 403 ForbiddenError

Tokens are issued by the auth provider and trusted until expiry: there is no
refresh, revocation list or provider round-trip here.
"""

import logging
from typing import Any, Dict, FrozenSet, List, Optional

from fastapi import Depends, Request
from fastapi.dependencies.models import Dependant
from fastapi.routing import APIRoute
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from starlette.routing import Match

from ecole_api.config import settings
from ecole_api.exceptions import ForbiddenError, UnauthorizedError
from ecole_api.models.identity import Identity, Role

logger = logging.getLogger(__name__)

# auto_error=False: a missing header must become our 401, not FastAPI's 403
bearer_scheme = HTTPBearer(auto_error=False)


class TokenVerifier:
    """Validates provider-issued access tokens against the shared secret."""

    def __init__(
        self,
        secret: Optional[str] = None,
        algorithm: Optional[str] = None,
        audience: Optional[str] = None,
    ):
        self.secret = secret if secret is not None else settings.jwt_secret
        self.algorithm = algorithm or settings.jwt_algorithm
        self.audience = audience if audience is not None else settings.jwt_audience

    def decode(self, token: str) -> Dict[str, Any]:
        """
        Verify signature, expiry and (optionally) audience; return the claims.

        Raises:
            ForbiddenError on any verification failure, including a missing
            signing secret (no token can be trusted then).
        """
        if not self.secret:
            logger.error("JWT_SECRET is not configured; rejecting token")
            raise ForbiddenError(message="Token invalide", context={"reason": "no_secret"})

        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                audience=self.audience or None,
                options={"verify_aud": bool(self.audience)},
            )
        except JWTError as e:
            logger.warning("JWT verification failed: %s", str(e))
            raise ForbiddenError(message="Token invalide", context={"reason": str(e)})

    def verify(self, token: str) -> Identity:
        claims = self.decode(token)
        identity = Identity.from_claims(claims)
        if not identity.id:
            raise ForbiddenError(message="Token invalide", context={"reason": "missing_sub"})
        return identity


token_verifier = TokenVerifier()


def get_token_verifier() -> TokenVerifier:
    return token_verifier


async def get_current_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> Identity:
    """
    Authenticate the request and attach the caller to `request.state.identity`.

    Used directly by routes that only need *some* authenticated caller, and
    indirectly (through `require_roles`) by role-gated routes.
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError()

    identity = verifier.verify(credentials.credentials)
    request.state.identity = identity
    return identity


class RoleGate:
    """
    Callable dependency allowing only identities whose role is in `allowed`.

    Stateless: the decision is a pure function of (identity.role, allowed).
    """

    def __init__(self, *roles: Role):
        if not roles:
            raise ValueError("RoleGate needs at least one allowed role")
        self.allowed: FrozenSet[Role] = frozenset(roles)

    def permits(self, identity: Identity) -> bool:
        return identity.role is not None and identity.role in self.allowed

    async def __call__(
        self, identity: Identity = Depends(get_current_identity)
    ) -> Identity:
        if not self.permits(identity):
            logger.warning(
                "Role gate refused user %s (role=%s, allowed=%s)",
                identity.id,
                identity.role.value if identity.role else None,
                sorted(role.value for role in self.allowed),
            )
            raise ForbiddenError(
                message="Permissions insuffisantes",
                context={"allowed": sorted(role.value for role in self.allowed)},
            )
        return identity


def require_roles(*roles: Role) -> RoleGate:
    """
    Build the dependency for a route restricted to `roles`.

    Example:
        @router.get("/users")
        async def list_users(actor: Identity = Depends(require_roles(Role.ADMIN))):
            ...
    """
    return RoleGate(*roles)


# ── Gates for requests whose body never reached the route ─────────────────

def _matched_route(request: Request) -> Optional[APIRoute]:
    for route in request.app.router.routes:
        if isinstance(route, APIRoute):
            match, _ = route.matches(request.scope)
            if match is Match.FULL:
                return route
    return None


def _collect_gates(dependant: Dependant) -> List[Any]:
    gates: List[Any] = []
    for sub in dependant.dependencies:
        if sub.call is get_current_identity or isinstance(sub.call, RoleGate):
            gates.append(sub.call)
        else:
            gates.extend(_collect_gates(sub))
    return gates


async def enforce_route_gates(request: Request) -> None:
    """
    Run the matched route's Token Verifier and Role Gate outside FastAPI's
    dependency resolution.

    FastAPI decodes a JSON body before it solves dependencies, so a
    malformed body fails with RequestValidationError before any gate had a
    say. The validation handler calls this first: an anonymous caller still
    gets 401 and a caller with the wrong role still gets 403, whatever the
    payload looks like.

    Raises:
        UnauthorizedError / ForbiddenError exactly as the dependencies would.
    """
    route = _matched_route(request)
    if route is None:
        return

    gates = _collect_gates(route.dependant)
    if not gates:
        return

    overrides = request.app.dependency_overrides
    verifier = overrides.get(get_token_verifier, get_token_verifier)()
    credentials = await bearer_scheme(request)
    identity = await get_current_identity(request, credentials, verifier)

    for gate in gates:
        if isinstance(gate, RoleGate):
            await gate(identity=identity)
