"""Unit tests for the live endpoint snapshot."""

from fastapi import APIRouter, FastAPI

from rbac_registry.kernel.registry import LiveEndpoint, collect_live_endpoints


def _app() -> FastAPI:
    app = FastAPI(docs_url="/docs")
    router = APIRouter()

    @router.get("/items/{item_id}")
    async def get_item(item_id: str):
        return {}

    @router.api_route("/items", methods=["GET", "POST"])
    async def items():
        return {}

    app.include_router(router, prefix="/api/v1")
    return app


def test_collects_api_routes_sorted():
    endpoints = collect_live_endpoints(_app().routes)

    assert endpoints == (
        LiveEndpoint(path="/api/v1/items", method="GET"),
        LiveEndpoint(path="/api/v1/items", method="POST"),
        LiveEndpoint(path="/api/v1/items/{item_id}", method="GET"),
    )


def test_snapshot_is_immutable_tuple():
    endpoints = collect_live_endpoints(_app().routes)
    assert isinstance(endpoints, tuple)
    assert all(e.path != "/docs" for e in endpoints)


def test_registry_app_exposes_registration_endpoints():
    from rbac_registry.main import app

    endpoints = set(collect_live_endpoints(app.routes))

    assert LiveEndpoint(path="/api/v1/routes/mark-active", method="POST") in endpoints
    assert LiveEndpoint(path="/api/v1/routes/{service}", method="POST") in endpoints
    assert LiveEndpoint(path="/api/v1/rbac", method="DELETE") in endpoints
