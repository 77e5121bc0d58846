"""
Map engine verdicts onto the shared error types.
"""

from typing import Optional

from shared.errors import AccessLayerException, AuthenticationError, AuthorizationError
from ..policy.models import Decision, EvaluationResult


def rejection_for(result: EvaluationResult, layer: str) -> Optional[AccessLayerException]:
    """The error a caller should surface for ``result``, or None on PERMIT.

    Details name the failed rule for server-side logs only; rendered bodies
    carry the fixed message so nothing leaks about the targeted record.
    """
    details = {"layer": layer, "rule_id": result.failed_rule}
    if result.decision == Decision.UNAUTHENTICATED:
        return AuthenticationError(details=details)
    if result.decision == Decision.DENY:
        return AuthorizationError(details=details)
    return None
