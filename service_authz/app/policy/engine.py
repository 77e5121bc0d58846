"""
Authorization decision engine shared by both interception layers.
"""

import time
from typing import Optional, Sequence

from shared.logging import get_logger
from shared.metrics import MetricsCollector
from shared.tracing import add_span_attributes, trace_operation
from .models import AuthorizationContext, Decision, EvaluationResult, PolicyRule


class DecisionEngine:
    """Combine a principal's roles with the rules matched for a request.

    Every matched rule must hold (AND); the first rule whose role is missing
    denies. Requests matched by no rule are permitted whether or not a
    principal is present. The engine keeps no state between calls.
    """

    def __init__(self, metrics: Optional[MetricsCollector] = None):
        self.logger = get_logger("authz.decision_engine")
        self.metrics = metrics

    def decide(self, context: AuthorizationContext, rules: Sequence[PolicyRule]) -> Decision:
        """Return the decision for ``context`` under ``rules``."""
        return self.evaluate(context, rules).decision

    def evaluate(self, context: AuthorizationContext, rules: Sequence[PolicyRule]) -> EvaluationResult:
        """Evaluate rules against context, keeping the rationale."""
        start_time = time.time()

        with trace_operation("authz.decide", **{"authz.layer": context.scope.value}):
            result = self._evaluate(context, rules)
            result.evaluation_time_ms = (time.time() - start_time) * 1000
            add_span_attributes(**{
                "authz.decision": result.decision.value,
                "authz.matched_rules": len(result.matched_rules),
                "authz.failed_rule": result.failed_rule,
            })

        log_fields = dict(
            context.log_fields(),
            decision=result.decision.value,
            reason=result.reason,
            matched_rules=result.matched_rules,
        )
        if result.allowed:
            self.logger.info("Authorization decision", **log_fields)
        else:
            self.logger.warning("Authorization decision", failed_rule=result.failed_rule, **log_fields)

        if self.metrics:
            self.metrics.record_decision(
                layer=context.scope.value,
                decision=result.decision.value,
                duration=result.evaluation_time_ms / 1000,
            )

        return result

    def _evaluate(self, context: AuthorizationContext, rules: Sequence[PolicyRule]) -> EvaluationResult:
        matched = [rule.rule_id for rule in rules]

        if not rules:
            return EvaluationResult(
                decision=Decision.PERMIT,
                reason="No rules apply",
            )

        if context.principal is None:
            return EvaluationResult(
                decision=Decision.UNAUTHENTICATED,
                reason="Authentication required",
                matched_rules=matched,
                failed_rule=rules[0].rule_id,
            )

        for rule in rules:
            if not context.principal.has_role(rule.required_role):
                return EvaluationResult(
                    decision=Decision.DENY,
                    reason=f"Missing role {rule.required_role}",
                    matched_rules=matched,
                    failed_rule=rule.rule_id,
                )

        return EvaluationResult(
            decision=Decision.PERMIT,
            reason="All required roles held",
            matched_rules=matched,
        )
