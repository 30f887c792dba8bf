"""Integration tests for FastAPI integration across layers."""

import pytest

pytest.importorskip("fastapi")
pytest.importorskip("httpx")

from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from keystone_di import Container
from keystone_di.infrastructure.fastapi_integration import ScopeResetMiddleware, create_fastapi_dependency


class TestFastAPIIntegrationEndToEnd:
    """Test complete FastAPI integration scenarios."""

    def test_endpoint_receives_resolved_service(self):
        """Test that an endpoint gets a fully wired service."""
        app = FastAPI()
        container = Container()

        class DatabaseService:
            def get_data(self):
                return {"data": "test"}

        class UserService:
            def __init__(self, db: DatabaseService):
                self.db = db

            def get_users(self):
                return self.db.get_data()

        container.register_singleton(DatabaseService)
        container.register_transient(UserService)

        get_user_service = create_fastapi_dependency(container, UserService)

        @app.get("/users")
        def get_users(service: UserService = Depends(get_user_service)):
            return service.get_users()

        client = TestClient(app)
        response = client.get("/users")

        assert response.status_code == 200
        assert response.json() == {"data": "test"}

    def test_scoped_dependency_per_request(self):
        """Test that each request sees its own scoped instance and the same singleton."""
        app = FastAPI()
        container = Container()

        class Config:
            instance_count = 0

            def __init__(self):
                Config.instance_count += 1
                self.id = Config.instance_count

        class RequestContext:
            instance_count = 0

            def __init__(self, config: Config):
                RequestContext.instance_count += 1
                self.id = RequestContext.instance_count
                self.config = config

        container.register_singleton(Config)
        container.register_scoped(RequestContext)
        app.add_middleware(ScopeResetMiddleware, container=container)

        get_context = create_fastapi_dependency(container, RequestContext)

        @app.get("/context")
        def read_context(first: RequestContext = Depends(get_context)):
            second = container.resolve(RequestContext)
            return {"id": first.id, "same": first is second, "config": first.config.id}

        client = TestClient(app)
        first = client.get("/context").json()
        second = client.get("/context").json()

        assert first["same"] is True
        assert second["same"] is True
        assert first["id"] != second["id"]
        assert first["config"] == second["config"] == 1
        assert container.cached_resolved_dependencies.keys() == {container.create_dependency_token(Config)}
