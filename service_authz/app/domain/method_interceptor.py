"""
Method-level authorization for data-access operations.
"""

from typing import Any, Callable, List, Optional, TypeVar

from shared.logging import get_logger
from ..adapters.repository import InMemoryRepository, Record
from ..auth.context import AuthenticationResult, get_current_authentication
from ..policy.engine import DecisionEngine
from ..policy.models import AuthorizationContext, EvaluationResult, OperationKind
from ..policy.table import PolicyTable
from .decisions import rejection_for

T = TypeVar("T")


class MethodAuthorizationInterceptor:
    """Authorize a data-access operation before it runs.

    The underlying call is only made after a PERMIT verdict, so a denied
    create, update or delete never starts.
    """

    def __init__(self, policy_table: PolicyTable, engine: DecisionEngine):
        self.policy_table = policy_table
        self.engine = engine
        self.logger = get_logger("authz.method_interceptor")

    def authorize(self, resource_type: str, operation: OperationKind,
                  authentication: Optional[AuthenticationResult] = None,
                  target_id: Optional[int] = None) -> EvaluationResult:
        """Raise unless the current principal may run ``operation`` on ``resource_type``."""
        if authentication is None:
            authentication = get_current_authentication()

        context = AuthorizationContext.for_method(
            authentication.principal, resource_type, operation, target_id
        )
        rules = self.policy_table.rules_for_method(resource_type, context.operation)
        result = self.engine.evaluate(context, rules)

        rejection = rejection_for(result, layer="method")
        if rejection is not None:
            raise rejection

        return result

    def invoke(self, resource_type: str, operation: OperationKind, func: Callable[..., T], *args: Any,
               authentication: Optional[AuthenticationResult] = None,
               target_id: Optional[int] = None, **kwargs: Any) -> T:
        """Authorize, then call ``func``. Its result or error passes through untouched."""
        self.authorize(resource_type, operation, authentication=authentication, target_id=target_id)
        return func(*args, **kwargs)


class SecuredRepository:
    """Wrap every operation of a repository in the method interceptor."""

    def __init__(self, delegate: InMemoryRepository, interceptor: MethodAuthorizationInterceptor,
                 resource_type: Optional[str] = None):
        self.delegate = delegate
        self.interceptor = interceptor
        self.resource_type = resource_type or delegate.resource_type

    def create(self, record: Record) -> Record:
        return self.interceptor.invoke(self.resource_type, OperationKind.CREATE, self.delegate.create, record)

    def read(self, record_id: int) -> Record:
        return self.interceptor.invoke(
            self.resource_type, OperationKind.READ, self.delegate.read, record_id, target_id=record_id
        )

    def update(self, record_id: int, record: Record) -> Record:
        return self.interceptor.invoke(
            self.resource_type, OperationKind.UPDATE, self.delegate.update, record_id, record,
            target_id=record_id
        )

    def delete(self, record_id: int) -> None:
        return self.interceptor.invoke(
            self.resource_type, OperationKind.DELETE, self.delegate.delete, record_id, target_id=record_id
        )

    def list(self) -> List[Record]:
        return self.interceptor.invoke(self.resource_type, OperationKind.LIST, self.delegate.list)
