"""
Policy table shared by the route filter and the method interceptor.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from shared.logging import get_logger
from .models import (
    PolicyRule, ScopeKind, OperationKind, MethodMatcher, RouteMatcher,
    normalize_http_method, normalize_path,
)


class PolicyTable:
    """Ordered, read-only collection of policy rules.

    The table is built once at startup. Lookups return tuples and nothing
    mutates the table afterwards, so request threads read it without locks.
    """

    def __init__(self, rules: Iterable[PolicyRule], role_hierarchy: Optional[Mapping[str, Iterable[str]]] = None):
        self.logger = get_logger("authz.policy_table")
        self._rules: Tuple[PolicyRule, ...] = tuple(rules)
        self._method_rules: Tuple[Tuple[int, PolicyRule], ...] = tuple(
            (index, rule) for index, rule in enumerate(self._rules) if rule.scope == ScopeKind.METHOD
        )
        self._route_rules: Tuple[Tuple[int, PolicyRule], ...] = tuple(
            (index, rule) for index, rule in enumerate(self._rules) if rule.scope == ScopeKind.ROUTE
        )
        self.role_hierarchy: Dict[str, Tuple[str, ...]] = {
            role: tuple(implied) for role, implied in (role_hierarchy or {}).items()
        }

        self.logger.info(
            "Policy table loaded",
            method_rules=len(self._method_rules),
            route_rules=len(self._route_rules),
        )

    @property
    def rules(self) -> Tuple[PolicyRule, ...]:
        return self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def rules_for_method(self, resource_type: str, operation: OperationKind) -> Tuple[PolicyRule, ...]:
        """Rules guarding ``operation`` on ``resource_type``, most specific first.

        Per-operation overrides come before type-wide defaults; rules of equal
        specificity keep their declaration order.
        """
        operation = OperationKind(operation)
        matched: List[Tuple[Tuple[int, int], PolicyRule]] = []
        for index, rule in self._method_rules:
            matcher: MethodMatcher = rule.matcher
            if matcher.matches(resource_type, operation):
                matched.append(((1 if matcher.is_type_wide else 0, index), rule))
        matched.sort(key=lambda item: item[0])
        return tuple(rule for _, rule in matched)

    def rules_for_route(self, http_method: str, path: str) -> Tuple[PolicyRule, ...]:
        """Rules guarding ``http_method`` on ``path``, most specific first.

        Longer literal prefixes win; at equal length an exact pattern beats a
        wildcard and a verb-specific rule beats an any-verb one. Declaration
        order breaks the remaining ties.
        """
        http_method = normalize_http_method(http_method)
        path = normalize_path(path)
        matched: List[Tuple[Tuple[int, int, int, int], PolicyRule]] = []
        for index, rule in self._route_rules:
            matcher: RouteMatcher = rule.matcher
            if matcher.matches(http_method, path):
                key = (
                    -len(matcher.literal_prefix),
                    1 if matcher.is_wildcard else 0,
                    1 if matcher.http_method is None else 0,
                    index,
                )
                matched.append((key, rule))
        matched.sort(key=lambda item: item[0])
        return tuple(rule for _, rule in matched)

    def get_table_stats(self) -> Dict[str, Any]:
        """Get table statistics."""
        return {
            "total_rules": len(self._rules),
            "method_rules": len(self._method_rules),
            "route_rules": len(self._route_rules),
            "resource_types": sorted({r.matcher.resource_type for _, r in self._method_rules}),
            "roles": sorted({r.required_role for r in self._rules}),
        }
