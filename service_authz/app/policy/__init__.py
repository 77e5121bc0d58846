"""
Policy package.

Defines the declarative rule model, the read-only policy table and the
decision engine used by both the route filter and the method interceptor.

Modules of interest:
- models: Rules, matchers, contexts and decisions.
- table: Rule lookup by operation or by route, most specific first.
- loader: Builds the table from a mapping or YAML file.
- engine: Evaluation algorithm shared by both layers.
"""

from .models import (
    AuthorizationContext,
    Decision,
    Effect,
    EvaluationResult,
    MethodMatcher,
    OperationKind,
    PolicyRule,
    RouteMatcher,
    ScopeKind,
    normalize_path,
)
from .table import PolicyTable
from .engine import DecisionEngine
from .loader import build_policy_table, load_policy_table

__all__ = [
    "AuthorizationContext",
    "Decision",
    "DecisionEngine",
    "Effect",
    "EvaluationResult",
    "MethodMatcher",
    "OperationKind",
    "PolicyRule",
    "PolicyTable",
    "RouteMatcher",
    "ScopeKind",
    "build_policy_table",
    "load_policy_table",
    "normalize_path",
]
