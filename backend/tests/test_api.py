"""End-to-end tests through the HTTP surface."""

from uuid import uuid4

import pytest

PASSWORD = "correct-horse-battery"


@pytest.fixture
def admin_headers(bearer):  # type: ignore[no-untyped-def]
    return bearer(uuid4(), "ADMIN")


class TestPublicSurface:
    async def test_health_needs_no_token(self, client) -> None:
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    async def test_responses_carry_request_id_and_security_headers(self, client) -> None:
        response = await client.get("/health")

        assert response.headers["x-request-id"]
        assert response.headers["x-content-type-options"] == "nosniff"
        assert response.headers["x-frame-options"] == "DENY"

    async def test_well_formed_request_id_is_echoed(self, client) -> None:
        reused = await client.get("/health", headers={"X-Request-ID": "trace-1234abcd"})
        replaced = await client.get("/health", headers={"X-Request-ID": "bad id\nwith newline"})

        assert reused.headers["x-request-id"] == "trace-1234abcd"
        assert replaced.headers["x-request-id"] != "bad id\nwith newline"


class TestAuthentication:
    async def test_login_and_me(self, client, seed) -> None:
        role_id = await seed.role("EDITOR")
        user_id = await seed.user("editor@example.com", role_id, password=PASSWORD)

        login = await client.post(
            "/api/v1/auth/login", json={"email": "editor@example.com", "password": PASSWORD}
        )
        assert login.status_code == 200
        token = login.json()["accessToken"]

        me = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json() == {"userId": str(user_id), "role": "EDITOR"}

    async def test_bad_credentials(self, client, seed) -> None:
        role_id = await seed.role("EDITOR")
        await seed.user("editor@example.com", role_id, password=PASSWORD)

        wrong = await client.post(
            "/api/v1/auth/login", json={"email": "editor@example.com", "password": "nope"}
        )
        unknown = await client.post(
            "/api/v1/auth/login", json={"email": "ghost@example.com", "password": PASSWORD}
        )

        assert wrong.status_code == unknown.status_code == 401
        assert wrong.json() == unknown.json() == {"detail": "Invalid credentials"}

    async def test_login_is_rate_limited(self, client) -> None:
        body = {"email": "ghost@example.com", "password": PASSWORD}
        statuses = [(await client.post("/api/v1/auth/login", json=body)).status_code for _ in range(6)]

        assert statuses[:5] == [401] * 5
        assert statuses[5] == 429

    async def test_protected_route_without_token(self, client) -> None:
        response = await client.get("/api/v1/users")

        assert response.status_code == 401
        assert response.json() == {"detail": "Authentication required"}
        assert response.headers["www-authenticate"] == "Bearer"

    async def test_garbage_token(self, client) -> None:
        response = await client.get(
            "/api/v1/users", headers={"Authorization": "Bearer not-a-token"}
        )

        assert response.status_code == 401
        assert response.json() == {"detail": "Invalid or expired token"}


class TestAuthorization:
    async def test_editor_can_view_but_not_create(self, client, seed, bearer) -> None:
        await seed.role("EDITOR", ["users.view", "users.edit"])
        headers = bearer(uuid4(), "EDITOR")

        listed = await client.get("/api/v1/users", headers=headers)
        created = await client.post(
            "/api/v1/users",
            headers=headers,
            json={"email": "new@example.com", "fullName": "New", "password": "long-enough-pw"},
        )

        assert listed.status_code == 200
        assert created.status_code == 403
        assert created.json() == {"detail": "You do not have permission to perform this action."}

    async def test_role_removed_after_token_was_issued(self, client, bearer) -> None:
        response = await client.get("/api/v1/users", headers=bearer(uuid4(), "GHOST"))

        assert response.status_code == 403
        assert response.json() == {"detail": "Role not found"}

    async def test_lowercase_admin_gets_no_bypass(self, client, bearer) -> None:
        response = await client.get("/api/v1/users", headers=bearer(uuid4(), "admin"))

        assert response.status_code == 403

    async def test_either_view_or_manage_reads_roles(self, client, seed, bearer) -> None:
        await seed.role("AUDITOR", ["roles.view"])
        await seed.role("ROLE_ADMIN", ["roles.manage"])

        for role in ("AUDITOR", "ROLE_ADMIN"):
            response = await client.get("/api/v1/roles", headers=bearer(uuid4(), role))
            assert response.status_code == 200

        denied = await client.post(
            "/api/v1/roles", headers=bearer(uuid4(), "AUDITOR"), json={"name": "X"}
        )
        assert denied.status_code == 403


class TestUserManagement:
    async def test_create_user_gets_default_role(self, client, seed, admin_headers) -> None:
        await seed.role("USER")

        response = await client.post(
            "/api/v1/users",
            headers=admin_headers,
            json={"email": "Jane@Example.com", "fullName": "Jane", "password": "long-enough-pw"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["email"] == "jane@example.com"
        assert body["role"]["name"] == "USER"
        assert "passwordHash" not in body
        assert "password" not in body

    async def test_missing_default_role_is_server_error(self, client, admin_headers) -> None:
        response = await client.post(
            "/api/v1/users",
            headers=admin_headers,
            json={"email": "jane@example.com", "fullName": "Jane", "password": "long-enough-pw"},
        )

        assert response.status_code == 500
        assert response.json()["detail"] == (
            "The system is not configured correctly (Missing default role)."
        )

    async def test_duplicate_email_conflicts(self, client, seed, admin_headers) -> None:
        role_id = await seed.role("USER")
        await seed.user("jane@example.com", role_id)

        response = await client.post(
            "/api/v1/users",
            headers=admin_headers,
            json={"email": "jane@example.com", "fullName": "Jane", "password": "long-enough-pw"},
        )

        assert response.status_code == 409
        assert response.json() == {"detail": "Email already registered"}

    async def test_soft_delete_and_restore(self, client, seed, admin_headers) -> None:
        role_id = await seed.role("USER")
        user_id = await seed.user("jane@example.com", role_id)

        deleted = await client.delete(f"/api/v1/users/{user_id}", headers=admin_headers)
        hidden = await client.get(f"/api/v1/users/{user_id}", headers=admin_headers)
        trash = await client.get("/api/v1/users/deleted", headers=admin_headers)
        restored = await client.post(f"/api/v1/users/{user_id}/restore", headers=admin_headers)

        assert deleted.status_code == 200
        assert deleted.json()["deletedAt"] is not None
        assert hidden.status_code == 404
        assert [u["id"] for u in trash.json()["items"]] == [str(user_id)]
        assert restored.json()["deletedAt"] is None

    async def test_lookup_by_email(self, client, seed, admin_headers) -> None:
        role_id = await seed.role("USER")
        user_id = await seed.user("jane@example.com", role_id)

        response = await client.get(
            "/api/v1/users", params={"email": "jane@example.com"}, headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["id"] == str(user_id)

    async def test_malformed_id(self, client, admin_headers) -> None:
        response = await client.get("/api/v1/users/not-a-uuid", headers=admin_headers)

        assert response.status_code == 422

    @pytest.mark.parametrize("body", [{"fullName": None}, {"password": None}])
    async def test_null_update_is_rejected(self, client, seed, admin_headers, body) -> None:
        role_id = await seed.role("USER")
        user_id = await seed.user("jane@example.com", role_id)

        response = await client.patch(f"/api/v1/users/{user_id}", headers=admin_headers, json=body)
        unchanged = await client.get(f"/api/v1/users/{user_id}", headers=admin_headers)

        assert response.status_code == 422
        assert unchanged.json()["fullName"] == "Test User"

    async def test_omitted_fields_are_kept(self, client, seed, admin_headers) -> None:
        role_id = await seed.role("USER")
        user_id = await seed.user("jane@example.com", role_id)

        response = await client.patch(
            f"/api/v1/users/{user_id}", headers=admin_headers, json={"phone": "+49 30 1234"}
        )

        assert response.status_code == 200
        assert response.json()["fullName"] == "Test User"
        assert response.json()["phone"] == "+49 30 1234"


class TestPrivilegedUsers:
    """Creating users that hold ADMIN or MANAGER."""

    async def test_regular_endpoint_refuses_restricted_role(
        self, client, seed, admin_headers
    ) -> None:
        admin_role_id = await seed.role("ADMIN")

        response = await client.post(
            "/api/v1/users",
            headers=admin_headers,
            json={
                "email": "boss@example.com",
                "fullName": "Boss",
                "password": "long-enough-pw",
                "roleId": str(admin_role_id),
            },
        )

        assert response.status_code == 403
        assert response.json() == {"detail": "You cannot create this role from this endpoint."}

    async def test_privileged_endpoint_assigns_restricted_role(self, client, seed, bearer) -> None:
        manager_role_id = await seed.role("MANAGER")
        await seed.role("HR", ["users.create_privileged"])

        response = await client.post(
            "/api/v1/users/privileged",
            headers=bearer(uuid4(), "HR"),
            json={
                "email": "manager@example.com",
                "fullName": "Manager",
                "password": "long-enough-pw",
                "roleId": str(manager_role_id),
            },
        )

        assert response.status_code == 201
        assert response.json()["role"]["name"] == "MANAGER"

    async def test_privileged_endpoint_needs_its_own_permission(
        self, client, seed, bearer
    ) -> None:
        manager_role_id = await seed.role("MANAGER")
        await seed.role("CLERK", ["users.create"])

        response = await client.post(
            "/api/v1/users/privileged",
            headers=bearer(uuid4(), "CLERK"),
            json={
                "email": "manager@example.com",
                "fullName": "Manager",
                "password": "long-enough-pw",
                "roleId": str(manager_role_id),
            },
        )

        assert response.status_code == 403


class TestRoleManagement:
    async def test_replace_permissions(self, client, seed, admin_headers) -> None:
        role_id = await seed.role("EDITOR", ["users.view"])
        edit_id = await seed.permission("users.edit")

        response = await client.put(
            f"/api/v1/roles/{role_id}/permissions",
            headers=admin_headers,
            json={"permissionIds": [str(edit_id)]},
        )

        assert response.status_code == 200
        assert [p["name"] for p in response.json()["permissions"]] == ["users.edit"]

    async def test_replace_with_unknown_permission(self, client, seed, admin_headers) -> None:
        role_id = await seed.role("EDITOR", ["users.view"])

        response = await client.put(
            f"/api/v1/roles/{role_id}/permissions",
            headers=admin_headers,
            json={"permissionIds": [str(uuid4())]},
        )
        role = await client.get(f"/api/v1/roles/{role_id}", headers=admin_headers)

        assert response.status_code == 404
        assert [p["name"] for p in role.json()["permissions"]] == ["users.view"]

    async def test_omitted_permission_ids_clear_each_role(self, client, seed, admin_headers) -> None:
        first_id = await seed.role("EDITOR", ["users.view"])
        second_id = await seed.role("VIEWER", ["users.edit"])

        first = await client.put(
            f"/api/v1/roles/{first_id}/permissions", headers=admin_headers, json={}
        )
        second = await client.put(
            f"/api/v1/roles/{second_id}/permissions", headers=admin_headers, json={}
        )

        assert first.status_code == second.status_code == 200
        assert first.json()["permissions"] == []
        assert second.json()["permissions"] == []

    async def test_delete_role_in_use(self, client, seed, admin_headers) -> None:
        role_id = await seed.role("EDITOR")
        await seed.user("jane@example.com", role_id)

        response = await client.delete(f"/api/v1/roles/{role_id}", headers=admin_headers)

        assert response.status_code == 409

    async def test_delete_unused_role(self, client, seed, admin_headers) -> None:
        role_id = await seed.role("EDITOR")

        response = await client.delete(f"/api/v1/roles/{role_id}", headers=admin_headers)

        assert response.status_code == 204

    async def test_permission_changes_apply_to_next_request(self, client, seed, bearer) -> None:
        role_id = await seed.role("EDITOR")
        view_id = await seed.permission("users.view")
        editor = bearer(uuid4(), "EDITOR")
        admin = bearer(uuid4(), "ADMIN")

        before = await client.get("/api/v1/users", headers=editor)
        await client.post(f"/api/v1/roles/{role_id}/permissions/{view_id}", headers=admin)
        after = await client.get("/api/v1/users", headers=editor)

        assert before.status_code == 403
        assert after.status_code == 200


class TestPermissionManagement:
    async def test_create_and_delete(self, client, admin_headers) -> None:
        created = await client.post(
            "/api/v1/permissions", headers=admin_headers, json={"name": "reports.view"}
        )
        permission_id = created.json()["id"]

        deleted = await client.delete(f"/api/v1/permissions/{permission_id}", headers=admin_headers)

        assert created.status_code == 201
        assert deleted.status_code == 204

    async def test_permission_in_use(self, client, seed, admin_headers) -> None:
        await seed.role("EDITOR", ["users.view"])
        by_name = await client.get("/api/v1/permissions/by-name/users.view", headers=admin_headers)

        response = await client.delete(
            f"/api/v1/permissions/{by_name.json()['id']}", headers=admin_headers
        )

        assert response.status_code == 409
