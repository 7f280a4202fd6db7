"""Per-route access policy and the two-stage access gate.

Every route added to a ``GuardedRouter`` gets an effective ``RoutePolicy``
computed once, when the route is registered:

* ``public`` skips authentication entirely. Routes are secure by default.
* ``required_permissions`` enables the authorization stage; holding any
  one of the listed permissions is enough.

Handler-level markers (``@public()``, ``@require_permissions(...)``) take
precedence over the router-level policy, field by field.

Non-public routes receive an ``AccessGate`` dependency that runs the
stages in order: ``TokenAuthenticator`` then ``PermissionResolver``.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from typing import Annotated, Any, TypeVar

from fastapi import APIRouter, Depends, Request
from fastapi.security import HTTPAuthorizationCredentials

from erp_api.dependencies import get_permission_resolver, get_token_authenticator
from erp_api.exceptions import MissingCredentialsError
from erp_api.models.domain.identity import Identity
from erp_api.security.auth import TokenAuthenticator, bearer_scheme
from erp_api.services.authorization_service import PermissionResolver

ROUTE_POLICY_ATTR = "__route_policy__"

F = TypeVar("F", bound=Callable[..., Any])


@dataclass(frozen=True)
class RoutePolicy:
    """Access metadata of a route.

    ``None`` means "not specified at this level".
    """

    public: bool | None = None
    required_permissions: frozenset[str] | None = None

    @property
    def is_public(self) -> bool:
        """Whether authentication is skipped. Unspecified means protected."""
        return bool(self.public)

    def overriding(self, fallback: "RoutePolicy | None") -> "RoutePolicy":
        """Combine with a lower-precedence policy.

        Args:
            fallback: Policy used for fields this one leaves unspecified

        Returns:
            Combined policy
        """
        if fallback is None:
            return self
        return RoutePolicy(
            public=self.public if self.public is not None else fallback.public,
            required_permissions=(
                self.required_permissions
                if self.required_permissions is not None
                else fallback.required_permissions
            ),
        )


def _policy_of(endpoint: Callable[..., Any]) -> RoutePolicy:
    return getattr(endpoint, ROUTE_POLICY_ATTR, None) or RoutePolicy()


def public(flag: bool = True) -> Callable[[F], F]:
    """Mark a handler as public (or explicitly protected with ``flag=False``)."""

    def decorator(endpoint: F) -> F:
        setattr(endpoint, ROUTE_POLICY_ATTR, replace(_policy_of(endpoint), public=flag))
        return endpoint

    return decorator


def require_permissions(*names: str) -> Callable[[F], F]:
    """Declare the permissions of which a caller must hold at least one."""

    def decorator(endpoint: F) -> F:
        setattr(
            endpoint,
            ROUTE_POLICY_ATTR,
            replace(_policy_of(endpoint), required_permissions=frozenset(names)),
        )
        return endpoint

    return decorator


def resolve_route_policy(
    endpoint: Callable[..., Any], router_policy: RoutePolicy | None = None
) -> RoutePolicy:
    """Compute the effective policy of a handler.

    Args:
        endpoint: Route handler, possibly carrying a handler-level policy
        router_policy: Router-level policy

    Returns:
        Effective policy
    """
    return _policy_of(endpoint).overriding(router_policy)


class AccessGate:
    """Ordered authentication and authorization chain for one route."""

    def __init__(self, policy: RoutePolicy) -> None:
        self.policy = policy

    async def __call__(
        self,
        request: Request,
        credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
        authenticator: Annotated[TokenAuthenticator, Depends(get_token_authenticator)],
        resolver: Annotated[PermissionResolver, Depends(get_permission_resolver)],
    ) -> Identity:
        identity = authenticator.authenticate(credentials)
        await resolver.authorize(identity, self.policy.required_permissions)
        request.state.identity = identity
        return identity

    def __repr__(self) -> str:
        return f"AccessGate({self.policy!r})"


class GuardedRouter(APIRouter):
    """APIRouter that installs an ``AccessGate`` on every protected route."""

    def __init__(
        self,
        *args: Any,
        public: bool | None = None,
        required_permissions: Iterable[str] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.policy = RoutePolicy(
            public=public,
            required_permissions=(
                frozenset(required_permissions) if required_permissions is not None else None
            ),
        )

    def add_api_route(self, path: str, endpoint: Callable[..., Any], **kwargs: Any) -> None:
        policy = resolve_route_policy(endpoint, self.policy)
        dependencies = list(kwargs.get("dependencies") or [])
        # Routes re-added by include_router already carry their gate
        gated = any(isinstance(dep.dependency, AccessGate) for dep in dependencies)
        if not policy.is_public and not gated:
            kwargs["dependencies"] = [Depends(AccessGate(policy)), *dependencies]
        super().add_api_route(path, endpoint, **kwargs)
        self.routes[-1].access_policy = policy


def get_optional_identity(request: Request) -> Identity | None:
    """Identity resolved by the access gate, None on public routes."""
    return getattr(request.state, "identity", None)


def get_current_identity(
    identity: Annotated[Identity | None, Depends(get_optional_identity)],
) -> Identity:
    """Identity resolved by the access gate.

    Raises:
        MissingCredentialsError: If the route did not authenticate the caller
    """
    if identity is None:
        raise MissingCredentialsError()
    return identity
