from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel, Field

from vlife.api.error_handlers import register_exception_handlers
from vlife.api.responses import NO_STORE_HEADERS, no_store_json
from vlife.core.errors import DependencyNotConfiguredError, NotFoundError, StateConflictError


class Body(BaseModel):
    name: str = Field(min_length=1)
    count: int = Field(ge=1)


def _app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/missing")
    def missing():
        raise NotFoundError("Thing not found")

    @app.get("/conflict")
    def conflict():
        raise StateConflictError("Already done", details={"id": "x"})

    @app.get("/unconfigured")
    def unconfigured():
        raise DependencyNotConfiguredError("Provider not configured")

    @app.get("/boom")
    def boom():
        raise RuntimeError("kaboom")

    @app.post("/things")
    def create(body: Body):
        return {"ok": True}

    @app.get("/things/{thing_id}")
    def get_thing(thing_id: int):
        return {"id": thing_id}

    @app.get("/cached")
    def cached():
        return no_store_json({"ok": True})

    return app


def test_domain_errors_render_status_and_message():
    client = TestClient(_app())

    assert client.get("/missing").status_code == 404
    assert client.get("/missing").json() == {"error": "Thing not found"}
    assert client.get("/conflict").json() == {"error": "Already done", "details": {"id": "x"}}
    assert client.get("/conflict").status_code == 400
    assert client.get("/unconfigured").status_code == 503


def test_validation_errors_are_400_with_paths():
    client = TestClient(_app())

    response = client.post("/things", json={"name": "", "count": 0})

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Invalid request data"
    assert {d["path"] for d in body["details"]} == {"name", "count"}


def test_validation_errors_on_paths_with_braces():
    client = TestClient(_app())

    response = client.get("/things/%7Bteam%7D")

    assert response.status_code == 400
    assert [d["path"] for d in response.json()["details"]] == ["thing_id"]


def test_unexpected_errors_are_500():
    client = TestClient(_app(), raise_server_exceptions=False)

    response = client.get("/boom")

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error", "details": "kaboom"}


def test_no_store_headers():
    response = TestClient(_app()).get("/cached")

    for header, value in NO_STORE_HEADERS.items():
        assert response.headers[header] == value


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
