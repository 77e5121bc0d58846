"""
Policy data models for the Authorization Service.
"""

import posixpath
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from ..principal.models import Principal, validate_role_name

ROUTE_WILDCARD = "/**"


class ScopeKind(str, Enum):
    """Interception layer a rule applies to."""
    METHOD = "method"
    ROUTE = "route"


class Effect(str, Enum):
    """Rule effects. Rules only ever add requirements."""
    REQUIRE = "require"


class OperationKind(str, Enum):
    """Data-access operations guarded by the method layer."""
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    LIST = "list"


class Decision(str, Enum):
    """Outcome of evaluating a request against policy."""
    PERMIT = "permit"
    DENY = "deny"
    UNAUTHENTICATED = "unauthenticated"


def normalize_path(path: str) -> str:
    """Canonical form of a request path or route pattern.

    Duplicate slashes collapse, ``.`` and ``..`` segments are resolved and
    trailing slashes are dropped, so ``//items/./1/`` and ``/items/1`` are
    checked against the same rules.
    """
    if not path:
        return "/"
    path = "/" + path.lstrip("/")
    path = re.sub(r"/{2,}", "/", path)
    normalized = posixpath.normpath(path)
    return "/" if normalized in ("", ".") else normalized


def normalize_http_method(http_method: str) -> str:
    if not http_method or not http_method.strip():
        raise ValueError("HTTP method must be a non-empty string")
    return http_method.strip().upper()


@dataclass(frozen=True)
class MethodMatcher:
    """Matches operations on a resource type.

    ``operation=None`` is the type-wide default covering every operation.
    """
    resource_type: str
    operation: Optional[OperationKind] = None

    def __post_init__(self):
        if not self.resource_type:
            raise ValueError("Method rules need a resource type")
        if self.operation is not None:
            object.__setattr__(self, "operation", OperationKind(self.operation))

    @property
    def is_type_wide(self) -> bool:
        return self.operation is None

    def matches(self, resource_type: str, operation: OperationKind) -> bool:
        if resource_type != self.resource_type:
            return False
        return self.operation is None or self.operation == operation

    def describe(self) -> str:
        op = self.operation.value if self.operation else "*"
        return f"{self.resource_type}.{op}"


@dataclass(frozen=True)
class RouteMatcher:
    """Matches an HTTP verb and path pattern.

    A pattern is a literal path, optionally followed by a single trailing
    ``/**`` which matches the prefix itself and anything below it.
    ``http_method=None`` matches every verb.
    """
    pattern: str
    http_method: Optional[str] = None
    literal_prefix: str = field(init=False)
    is_wildcard: bool = field(init=False)

    def __post_init__(self):
        pattern = normalize_path(self.pattern)
        is_wildcard = pattern == ROUTE_WILDCARD or pattern.endswith(ROUTE_WILDCARD)
        literal = pattern[: -len(ROUTE_WILDCARD)] if is_wildcard else pattern
        if "*" in literal:
            raise ValueError(
                f"Route pattern {self.pattern!r} may only use a single trailing '/**' wildcard"
            )
        object.__setattr__(self, "pattern", pattern)
        object.__setattr__(self, "literal_prefix", literal)
        object.__setattr__(self, "is_wildcard", is_wildcard)
        if self.http_method is not None:
            object.__setattr__(self, "http_method", normalize_http_method(self.http_method))

    def matches(self, http_method: str, path: str) -> bool:
        if self.http_method is not None and self.http_method != http_method:
            return False
        if not self.is_wildcard:
            return path == self.literal_prefix
        if not self.literal_prefix:
            return True
        return path == self.literal_prefix or path.startswith(self.literal_prefix + "/")

    def describe(self) -> str:
        return f"{self.http_method or '*'} {self.pattern}"


@dataclass(frozen=True)
class PolicyRule:
    """Declarative requirement binding a method or route scope to a role."""
    scope: ScopeKind
    matcher: Union[MethodMatcher, RouteMatcher]
    required_role: str
    effect: Effect = Effect.REQUIRE
    rule_id: str = ""
    description: Optional[str] = None

    def __post_init__(self):
        validate_role_name(self.required_role)
        expected = MethodMatcher if self.scope == ScopeKind.METHOD else RouteMatcher
        if not isinstance(self.matcher, expected):
            raise ValueError(f"{self.scope.value} rules need a {expected.__name__}")
        if not self.rule_id:
            object.__setattr__(
                self, "rule_id", f"{self.scope.value}:{self.matcher.describe()}:{self.required_role}"
            )

    @classmethod
    def method(cls, resource_type: str, required_role: str,
               operation: Optional[OperationKind] = None, **kwargs) -> "PolicyRule":
        return cls(ScopeKind.METHOD, MethodMatcher(resource_type, operation), required_role, **kwargs)

    @classmethod
    def route(cls, pattern: str, required_role: str,
              http_method: Optional[str] = None, **kwargs) -> "PolicyRule":
        return cls(ScopeKind.ROUTE, RouteMatcher(pattern, http_method), required_role, **kwargs)


@dataclass(frozen=True)
class AuthorizationContext:
    """Per-request input to the decision engine. Never shared across requests."""
    principal: Optional[Principal]
    scope: ScopeKind
    operation: Optional[OperationKind] = None
    resource_type: Optional[str] = None
    target_id: Optional[int] = None
    http_method: Optional[str] = None
    path: Optional[str] = None

    @classmethod
    def for_method(cls, principal: Optional[Principal], resource_type: str,
                   operation: OperationKind, target_id: Optional[int] = None) -> "AuthorizationContext":
        return cls(
            principal=principal,
            scope=ScopeKind.METHOD,
            operation=OperationKind(operation),
            resource_type=resource_type,
            target_id=target_id,
        )

    @classmethod
    def for_route(cls, principal: Optional[Principal], http_method: str, path: str) -> "AuthorizationContext":
        return cls(
            principal=principal,
            scope=ScopeKind.ROUTE,
            http_method=normalize_http_method(http_method),
            path=normalize_path(path),
        )

    @property
    def is_authenticated(self) -> bool:
        return self.principal is not None

    def log_fields(self) -> Dict[str, Any]:
        fields: Dict[str, Any] = {
            "layer": self.scope.value,
            "principal": self.principal.identifier if self.principal else None,
        }
        if self.scope == ScopeKind.METHOD:
            fields.update(
                resource_type=self.resource_type,
                operation=self.operation.value if self.operation else None,
                target_id=self.target_id,
            )
        else:
            fields.update(http_method=self.http_method, path=self.path)
        return fields


@dataclass
class EvaluationResult:
    """Result of a decision, with rationale for observability."""
    decision: Decision
    reason: Optional[str] = None
    matched_rules: List[str] = field(default_factory=list)
    failed_rule: Optional[str] = None
    evaluation_time_ms: float = 0.0

    @property
    def allowed(self) -> bool:
        return self.decision == Decision.PERMIT
