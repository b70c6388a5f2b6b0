"""Service routes — health, readiness, banner, CORS probe, docs and the /api catch-all."""


async def test_health_returns_ok(client):
    res = await client.get("/api/health")
    assert res.status_code == 200
    assert res.json() == {"status": "ok"}


async def test_readiness_reports_database(client):
    res = await client.get("/api/health/ready")
    assert res.status_code == 200
    assert res.json()["checks"]["database"] == "healthy"


async def test_readiness_without_database_returns_503(client, monkeypatch):
    monkeypatch.setattr("userdesk.infrastructure.database.db_manager", None)
    res = await client.get("/api/health/ready")
    assert res.status_code == 503


async def test_api_banner(client):
    res = await client.get("/api")
    assert res.status_code == 200
    assert res.text == "This is the v1 API"


async def test_cors_test_echoes_origin(client):
    res = await client.get(
        "/api/cors-test", headers={"Origin": "http://localhost:5173"},
    )
    body = res.json()
    assert body["message"] == "CORS is working!"
    assert body["origin"] == "http://localhost:5173"


async def test_openapi_document_lists_user_routes(client):
    res = await client.get("/api/docs.json")
    assert res.status_code == 200
    paths = res.json()["paths"]
    assert "/api/users" in paths
    assert "/api/users/{user_id}" in paths
    assert "delete" in paths["/api/users/nuke"]


async def test_swagger_ui_served(client):
    res = await client.get("/api/docs")
    assert res.status_code == 200
    assert "swagger" in res.text.lower()


async def test_unknown_api_path_returns_json_404(client):
    res = await client.get("/api/nothing-here")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_trailing_slash_redirects_instead_of_404(client):
    res = await client.get("/api/users/?take=5")
    assert res.status_code == 307
    assert res.headers["location"] == "http://test/api/users?take=5"


async def test_trailing_slash_list_reaches_users(client, seed_user):
    res = await client.get("/api/users/", follow_redirects=True)
    assert res.status_code == 200
    assert res.json()["total"] == 1
    assert res.json()["data"][0]["email"] == "ada@x.com"
