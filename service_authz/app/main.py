"""
Authorization Service for the Access Layer.

Hosts the reference deployment: two resource types behind the route filter
and the method interceptor, both backed by one policy table and one
decision engine.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Request, Response

from shared.base_service import BaseService
from shared.config import ServiceConfig
from .adapters.repository import InMemoryRepository, Record
from .auth.provider import AuthenticationProvider, load_user_directory
from .auth.resolver import AuthenticationContextResolver
from .domain.method_interceptor import MethodAuthorizationInterceptor, SecuredRepository
from .domain.route_filter import RouteAuthorizationFilter
from .policy.engine import DecisionEngine
from .policy.loader import load_policy_table
from .policy.models import OperationKind
from .policy.table import PolicyTable

RESOURCE_TYPES = ("employees", "items")


class AuthzService(BaseService):
    """Authorization service implementation."""

    def __init__(self, config: Optional[ServiceConfig] = None,
                 policy_table: Optional[PolicyTable] = None,
                 provider: Optional[AuthenticationProvider] = None):
        self._policy_table_override = policy_table
        self._provider_override = provider
        super().__init__("authz", 8000, config=config)

        for resource_type in RESOURCE_TYPES:
            self.app.include_router(self._resource_router(resource_type, self.repositories[resource_type]))

        # Expose service instance via app state for introspection/testing
        self.app.state.authz_service = self

    def _setup_components(self):
        """Load policy and identities, then build the enforcement points."""
        self.policy_table = self._policy_table_override or load_policy_table(self.config.policy_file)
        self.provider = self._provider_override or load_user_directory(self.config.users_file)

        self.engine = DecisionEngine(metrics=self.metrics)
        self.resolver = AuthenticationContextResolver(
            self.provider,
            role_hierarchy=self.policy_table.role_hierarchy,
            metrics=self.metrics,
        )
        self.route_filter = RouteAuthorizationFilter(
            self.policy_table, self.engine, self.resolver, realm=self.config.realm
        )
        self.interceptor = MethodAuthorizationInterceptor(self.policy_table, self.engine)

        self.repositories: Dict[str, SecuredRepository] = {
            resource_type: SecuredRepository(InMemoryRepository(resource_type), self.interceptor)
            for resource_type in RESOURCE_TYPES
        }

        self.logger.info("Authorization components ready", **self.policy_table.get_table_stats())

    def _setup_middleware(self):
        """Register the route filter innermost, under timing and CORS."""
        self.app.middleware("http")(self.route_filter.dispatch)
        super()._setup_middleware()

    def _resource_router(self, resource_type: str, repository: SecuredRepository) -> APIRouter:
        """CRUD routes for one resource type."""
        router = APIRouter(prefix=f"/{resource_type}", tags=[resource_type])

        @router.get("")
        async def list_records() -> List[Record]:
            return repository.list()

        @router.post("", status_code=201)
        async def create_record(request: Request, payload: Dict[str, Any] = Body(...)) -> Response:
            record = repository.create(payload)
            location = f"{str(request.base_url).rstrip('/')}/{resource_type}/{record['id']}"
            return Response(status_code=201, headers={"Location": location})

        @router.get("/{record_id}")
        async def read_record(record_id: int) -> Record:
            return repository.read(record_id)

        @router.put("/{record_id}")
        async def replace_record(record_id: int, payload: Dict[str, Any] = Body(...)) -> Record:
            return repository.update(record_id, payload)

        @router.patch("/{record_id}")
        async def patch_record(record_id: int, payload: Dict[str, Any] = Body(...)) -> Record:
            # Check the update up front so a read never runs for a caller who cannot write
            self.interceptor.authorize(resource_type, OperationKind.UPDATE, target_id=record_id)
            current = repository.read(record_id)
            current.update(payload)
            current.pop("id", None)
            return repository.update(record_id, current)

        @router.delete("/{record_id}", status_code=204)
        async def delete_record(record_id: int) -> Response:
            repository.delete(record_id)
            return Response(status_code=204)

        return router


def create_app(config: Optional[ServiceConfig] = None, **kwargs):
    """Create FastAPI application."""
    service = AuthzService(config=config, **kwargs)
    return service.app


if __name__ == "__main__":
    service = AuthzService()
    service.run()
