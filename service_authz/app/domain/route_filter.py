"""
Route-level authorization for inbound HTTP requests.
"""

from typing import Awaitable, Callable, Optional

from fastapi import Request, Response
from fastapi.responses import JSONResponse

from shared.errors import AuthenticationError
from shared.logging import get_logger, set_user_context
from ..auth.context import AuthenticationResult, security_context
from ..auth.resolver import AuthenticationContextResolver
from ..policy.engine import DecisionEngine
from ..policy.models import AuthorizationContext, EvaluationResult, normalize_path
from ..policy.table import PolicyTable
from .decisions import rejection_for


class RouteAuthorizationFilter:
    """Authorize requests by HTTP verb and normalized path before dispatch.

    Clients are credential-bearing and session-less: no CSRF token is
    expected, no session or cookie is created, and the resolved principal
    lives only as long as the request.
    """

    def __init__(self, policy_table: PolicyTable, engine: DecisionEngine,
                 resolver: AuthenticationContextResolver, realm: str = "Realm"):
        self.policy_table = policy_table
        self.engine = engine
        self.resolver = resolver
        self.realm = realm
        self.logger = get_logger("authz.route_filter")

    def check(self, http_method: str, path: str, authentication: AuthenticationResult) -> EvaluationResult:
        """Route-level verdict for ``http_method`` on ``path``."""
        context = AuthorizationContext.for_route(authentication.principal, http_method, path)
        rules = self.policy_table.rules_for_route(context.http_method, context.path)
        return self.engine.evaluate(context, rules)

    async def dispatch(self, request: Request,
                       call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        """HTTP middleware entry point."""
        authentication = await self.resolver.resolve_async(request.headers.get("Authorization"))
        if authentication.principal is not None:
            set_user_context(authentication.principal.identifier, authentication.principal.roles)

        result = self.check(request.method, request.url.path, authentication)
        rejection = self.reject(result, request)
        if rejection is not None:
            return rejection

        request.state.authentication = authentication
        with security_context(authentication):
            return await call_next(request)

    def reject(self, result: EvaluationResult, request: Request) -> Optional[Response]:
        """Terminal response for a failed route check, or None on PERMIT."""
        error = rejection_for(result, layer="route")
        if error is None:
            return None

        self.logger.warning(
            "Request rejected",
            method=request.method,
            path=normalize_path(request.url.path),
            code=error.code,
            rule_id=result.failed_rule,
        )
        headers = {"WWW-Authenticate": f'Basic realm="{self.realm}"'} if isinstance(error, AuthenticationError) else None
        return JSONResponse(
            status_code=error.status_code,
            content=error.to_response(request.url.path).model_dump(),
            headers=headers,
        )
