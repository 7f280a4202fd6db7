"""Tests for route access metadata and gate installation."""

import pytest
from fastapi import FastAPI
from fastapi.routing import APIRoute
from httpx import ASGITransport, AsyncClient

from erp_api.middleware.error_handler import register_exception_handlers
from erp_api.security.access import (
    AccessGate,
    GuardedRouter,
    RoutePolicy,
    public,
    require_permissions,
    resolve_route_policy,
)


def _gates(route: APIRoute) -> list[AccessGate]:
    return [d.dependency for d in route.dependencies if isinstance(d.dependency, AccessGate)]


def _route(router: GuardedRouter, path: str, method: str = "GET") -> APIRoute:
    return next(
        r
        for r in router.routes
        if isinstance(r, APIRoute) and r.path == path and method in r.methods
    )


class TestResolveRoutePolicy:
    """Precedence between handler and router metadata."""

    def test_handler_permissions_override_router(self) -> None:
        @require_permissions("b")
        async def handler() -> None: ...

        policy = resolve_route_policy(handler, RoutePolicy(required_permissions=frozenset({"a"})))

        assert policy.required_permissions == frozenset({"b"})

    def test_router_permissions_apply_when_handler_is_silent(self) -> None:
        async def handler() -> None: ...

        policy = resolve_route_policy(handler, RoutePolicy(required_permissions=frozenset({"a"})))

        assert policy.required_permissions == frozenset({"a"})
        assert not policy.is_public

    def test_handler_can_reprotect_public_router(self) -> None:
        @public(False)
        async def handler() -> None: ...

        assert not resolve_route_policy(handler, RoutePolicy(public=True)).is_public

    def test_unmarked_route_is_protected(self) -> None:
        async def handler() -> None: ...

        policy = resolve_route_policy(handler)

        assert not policy.is_public
        assert policy.required_permissions is None

    def test_markers_compose(self) -> None:
        @public()
        @require_permissions("a", "b")
        async def handler() -> None: ...

        policy = resolve_route_policy(handler)

        assert policy.is_public
        assert policy.required_permissions == frozenset({"a", "b"})


class TestGuardedRouter:
    """Gate installation on registered routes."""

    @pytest.fixture
    def router(self) -> GuardedRouter:
        router = GuardedRouter(required_permissions=["things.view"])

        @router.get("/things")
        async def list_things() -> dict[str, str]:
            return {"status": "ok"}

        @router.post("/things")
        @require_permissions("things.create")
        async def create_thing() -> dict[str, str]:
            return {"status": "ok"}

        @router.get("/open")
        @public()
        async def open_route() -> dict[str, str]:
            return {"status": "ok"}

        return router

    @pytest.fixture
    def app(self, router: GuardedRouter) -> FastAPI:
        app = FastAPI()
        register_exception_handlers(app)
        app.include_router(router, prefix="/api")
        return app

    def test_protected_route_has_exactly_one_gate(self, router: GuardedRouter) -> None:
        gates = _gates(_route(router, "/things"))

        assert len(gates) == 1
        assert gates[0].policy.required_permissions == frozenset({"things.view"})

    def test_handler_override_gates_on_its_own_permissions(self, router: GuardedRouter) -> None:
        gates = _gates(_route(router, "/things", "POST"))

        assert [g.policy.required_permissions for g in gates] == [frozenset({"things.create"})]

    def test_public_route_has_no_gate(self, router: GuardedRouter) -> None:
        route = _route(router, "/open")

        assert _gates(route) == []

    def test_handler_policy_is_recorded(self) -> None:
        router = GuardedRouter(required_permissions=["things.view"])

        @router.post("/things")
        @require_permissions("things.create")
        async def create_thing() -> None: ...

        route = router.routes[-1]
        assert route.access_policy.required_permissions == frozenset({"things.create"})
        assert len(_gates(route)) == 1

    async def test_public_route_needs_no_header(self, app: FastAPI) -> None:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            response = await ac.get("/api/open")

        assert response.status_code == 200

    async def test_protected_route_rejects_missing_header(self, app: FastAPI) -> None:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            response = await ac.get("/api/things")

        assert response.status_code == 401
        assert response.json()["detail"] == "Authentication required"
        assert response.headers["www-authenticate"] == "Bearer"
