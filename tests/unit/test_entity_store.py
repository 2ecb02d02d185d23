"""Unit tests for the entity store (routes, roles, rbac edges)."""

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from rbac_registry.errors import ConflictError, NotFoundError, StoreError
from rbac_registry.kernel.store import (
    RbacEdge,
    RbacStore,
    RoleEntry,
    RoleStore,
    RouteEntry,
    RouteStore,
)


def _route(method="GET", path="/users", service="svc", active=True, id=None) -> RouteEntry:
    return RouteEntry(method=method, path=path, service=service, active=active, id=id)


class TestRouteStore:
    """Route upserts, queries and deactivation."""

    @pytest.mark.asyncio
    async def test_add_inserts_with_submitted_id(self, db_session):
        route_id = uuid.uuid4()
        stored = await RouteStore(db_session).add(_route(id=route_id))

        assert stored.id == route_id
        assert stored.natural_key == ("GET", "/users", "svc")
        assert stored.active is True

    @pytest.mark.asyncio
    async def test_add_generates_id_when_missing(self, db_session):
        stored = await RouteStore(db_session).add(_route())
        assert isinstance(stored.id, uuid.UUID)

    @pytest.mark.asyncio
    async def test_add_existing_key_keeps_stored_id(self, db_session):
        store = RouteStore(db_session)
        original = await store.add(_route(id=uuid.uuid4()))

        again = await store.add(_route(id=uuid.uuid4(), active=False))

        assert again.id == original.id
        assert again.active is False
        assert len(await store.find()) == 1

    @pytest.mark.asyncio
    async def test_same_method_and_path_in_other_service_is_distinct(self, db_session):
        store = RouteStore(db_session)
        a = await store.add(_route(service="billing"))
        b = await store.add(_route(service="users"))

        assert a.id != b.id
        assert len(await store.find()) == 2

    @pytest.mark.asyncio
    async def test_find_orders_by_path_then_method(self, db_session):
        store = RouteStore(db_session)
        await store.add(_route(method="POST", path="/b"))
        await store.add(_route(method="GET", path="/b"))
        await store.add(_route(method="DELETE", path="/a"))

        routes = await store.find()

        assert [(r.path, r.method) for r in routes] == [
            ("/a", "DELETE"),
            ("/b", "GET"),
            ("/b", "POST"),
        ]

    @pytest.mark.asyncio
    async def test_set_inactive_only_touches_service(self, db_session):
        store = RouteStore(db_session)
        await store.add(_route(path="/a", service="svc"))
        await store.add(_route(path="/b", service="svc"))
        other = await store.add(_route(path="/a", service="other"))

        touched = await store.set_inactive("svc")

        assert touched == 2
        assert all(not r.active for r in await store.find_by_service("svc"))
        assert (await store.find_by_service("other"))[0] == other

    @pytest.mark.asyncio
    async def test_set_inactive_unknown_service_is_noop(self, db_session):
        assert await RouteStore(db_session).set_inactive("nobody") == 0

    @pytest.mark.asyncio
    async def test_find_by_service_active_only(self, db_session):
        store = RouteStore(db_session)
        await store.add(_route(path="/on"))
        await store.add(_route(path="/off", active=False))

        active = await store.find_by_service("svc", active_only=True)

        assert [r.path for r in active] == ["/on"]

    @pytest.mark.asyncio
    async def test_exists(self, db_session):
        store = RouteStore(db_session)
        stored = await store.add(_route())

        assert await store.exists(stored.id) is True
        assert await store.exists(uuid.uuid4()) is False

    @pytest.mark.asyncio
    async def test_delete_is_idempotent(self, db_session):
        store = RouteStore(db_session)
        stored = await store.add(_route())

        await store.delete(stored.id)
        await store.delete(stored.id)

        assert await store.find() == []

    @pytest.mark.asyncio
    async def test_update_overwrites_fields(self, db_session):
        store = RouteStore(db_session)
        stored = await store.add(_route())

        updated = await store.update(
            RouteEntry(id=stored.id, method="PUT", path="/users/{id}", service="svc", active=False)
        )

        assert updated.id == stored.id
        assert updated.natural_key == ("PUT", "/users/{id}", "svc")
        assert updated.active is False

    @pytest.mark.asyncio
    async def test_update_colliding_key_raises_conflict(self, db_session):
        store = RouteStore(db_session)
        await store.add(_route(path="/a"))
        b = await store.add(_route(path="/b"))

        with pytest.raises(ConflictError):
            await store.update(RouteEntry(id=b.id, method="GET", path="/a", service="svc"))

        # session stays usable after the rollback
        assert len(await store.find()) == 2

    @pytest.mark.asyncio
    async def test_add_with_taken_id_raises_conflict(self, db_session):
        store = RouteStore(db_session)
        a = await store.add(_route(path="/a"))

        with pytest.raises(ConflictError) as exc_info:
            await store.add(_route(path="/b", id=a.id))

        assert exc_info.value.message == "route with the given id already exists"
        assert [r.path for r in await store.find()] == ["/a"]

    @pytest.mark.asyncio
    async def test_update_missing_route_raises_not_found(self, db_session):
        with pytest.raises(NotFoundError):
            await RouteStore(db_session).update(_route(id=uuid.uuid4()))

    @pytest.mark.asyncio
    async def test_storage_fault_raises_store_error(self):
        session = MagicMock()
        session.execute = AsyncMock(
            side_effect=OperationalError("SELECT 1", {}, Exception("connection refused"))
        )
        session.rollback = AsyncMock()
        session.commit = AsyncMock()

        with pytest.raises(StoreError) as exc_info:
            await RouteStore(session).exists(uuid.uuid4())

        assert exc_info.value.message == "failed to check if route exists"
        session.rollback.assert_awaited_once()
        session.commit.assert_not_awaited()


class TestRoleStore:
    """Role upserts, ordering and rename conflicts."""

    @pytest.mark.asyncio
    async def test_add_existing_name_returns_stored_role(self, db_session):
        store = RoleStore(db_session)
        first = await store.add(RoleEntry(name="admin", id=uuid.uuid4()))

        second = await store.add(RoleEntry(name="admin", id=uuid.uuid4()))

        assert second.id == first.id
        assert len(await store.find()) == 1

    @pytest.mark.asyncio
    async def test_find_orders_by_name(self, db_session):
        store = RoleStore(db_session)
        for name in ("viewer", "admin", "editor"):
            await store.add(RoleEntry(name=name))

        assert [r.name for r in await store.find()] == ["admin", "editor", "viewer"]

    @pytest.mark.asyncio
    async def test_update_to_taken_name_raises_conflict(self, db_session):
        store = RoleStore(db_session)
        await store.add(RoleEntry(name="admin"))
        viewer = await store.add(RoleEntry(name="viewer"))

        with pytest.raises(ConflictError) as exc_info:
            await store.update(RoleEntry(id=viewer.id, name="admin"))

        assert exc_info.value.message == "role with the given name already exists"

    @pytest.mark.asyncio
    async def test_update_missing_role_raises_not_found(self, db_session):
        with pytest.raises(NotFoundError):
            await RoleStore(db_session).update(RoleEntry(id=uuid.uuid4(), name="ghost"))

    @pytest.mark.asyncio
    async def test_delete_unknown_role_is_noop(self, db_session):
        await RoleStore(db_session).delete(uuid.uuid4())


class TestRbacStore:
    """Edge CRUD and cascades."""

    @pytest.mark.asyncio
    async def test_add_twice_keeps_one_edge(self, db_session):
        route = await RouteStore(db_session).add(_route())
        role = await RoleStore(db_session).add(RoleEntry(name="admin"))
        store = RbacStore(db_session)
        edge = RbacEdge(route_id=route.id, role_id=role.id)

        await store.add(edge)
        await store.add(edge)

        assert await store.find() == [edge]

    @pytest.mark.asyncio
    async def test_delete_absent_edge_is_noop(self, db_session):
        await RbacStore(db_session).delete(RbacEdge(route_id=uuid.uuid4(), role_id=uuid.uuid4()))

    @pytest.mark.asyncio
    async def test_deleting_route_cascades_to_edges(self, db_session):
        routes = RouteStore(db_session)
        a = await routes.add(_route(path="/a"))
        b = await routes.add(_route(path="/b"))
        role = await RoleStore(db_session).add(RoleEntry(name="admin"))
        rbac = RbacStore(db_session)
        await rbac.add(RbacEdge(route_id=a.id, role_id=role.id))
        await rbac.add(RbacEdge(route_id=b.id, role_id=role.id))

        await routes.delete(a.id)

        assert await rbac.find() == [RbacEdge(route_id=b.id, role_id=role.id)]

    @pytest.mark.asyncio
    async def test_join_queries(self, db_session):
        routes = RouteStore(db_session)
        roles = RoleStore(db_session)
        users = await routes.add(_route(path="/users"))
        orders = await routes.add(_route(path="/orders"))
        admin = await roles.add(RoleEntry(name="admin"))
        viewer = await roles.add(RoleEntry(name="viewer"))
        rbac = RbacStore(db_session)
        await rbac.add(RbacEdge(route_id=users.id, role_id=admin.id))
        await rbac.add(RbacEdge(route_id=orders.id, role_id=admin.id))
        await rbac.add(RbacEdge(route_id=users.id, role_id=viewer.id))

        assert [r.path for r in await routes.find_by_role(admin.id)] == ["/orders", "/users"]
        assert [r.name for r in await roles.find_by_route(users.id)] == ["admin", "viewer"]
        assert await routes.find_by_role(uuid.uuid4()) == []
        assert await roles.find_by_route(uuid.uuid4()) == []
