"""
Shared logging configuration for the Access Authorization Service.

Every event is rendered as JSON and carries the request correlation id,
the authenticated principal and its roles (when one was resolved) and the
active trace ids. Credential-bearing fields are masked before rendering.
"""

import sys
import structlog
import logging
import uuid
from typing import Any, Dict, FrozenSet, Iterable, Optional
from contextvars import ContextVar

from opentelemetry import trace

# Context variables for correlation IDs
request_id_var: ContextVar[Optional[str]] = ContextVar('request_id', default=None)
user_id_var: ContextVar[Optional[str]] = ContextVar('user_id', default=None)
roles_var: ContextVar[FrozenSet[str]] = ContextVar('roles', default=frozenset())

REDACTED = "[REDACTED]"
SENSITIVE_KEYS = frozenset({"authorization", "password", "credentials", "secret"})


def configure_logging(service_name: str, log_level: str = "info") -> None:
    """Configure structured logging for a service."""

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            add_component_context,
            add_trace_context,
            add_principal_context,
            redact_credentials,
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )


def add_component_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Split ``authz.route_filter`` into service and component fields."""
    logger_name = event_dict.get("logger", "")
    service_name, _, component = logger_name.partition(".")
    if component:
        event_dict["service"] = service_name
        event_dict["component"] = component

    return event_dict


def add_trace_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add trace context to log events."""
    current_span = trace.get_current_span()
    if current_span and current_span.is_recording():
        span_context = current_span.get_span_context()
        if span_context.trace_id != 0:
            event_dict["trace_id"] = f"{span_context.trace_id:032x}"
        if span_context.span_id != 0:
            event_dict["span_id"] = f"{span_context.span_id:016x}"

    return event_dict


def add_principal_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add the request id and the resolved principal to log events.

    Explicit fields on the event win over the bound context.
    """
    request_id = request_id_var.get()
    if request_id:
        event_dict.setdefault("request_id", request_id)

    user_id = user_id_var.get()
    if user_id:
        event_dict.setdefault("user_id", user_id)
        event_dict.setdefault("roles", sorted(roles_var.get()))

    return event_dict


def redact_credentials(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Mask credential-bearing fields."""
    for key in event_dict:
        if key.lower() in SENSITIVE_KEYS:
            event_dict[key] = REDACTED

    return event_dict


def set_request_id(request_id: Optional[str] = None) -> str:
    """Set request ID in context."""
    if request_id is None:
        request_id = str(uuid.uuid4())
    request_id_var.set(request_id)
    return request_id


def set_user_context(user_id: Optional[str] = None, roles: Iterable[str] = ()):
    """Bind the authenticated principal for the rest of the request."""
    if user_id:
        user_id_var.set(user_id)
        roles_var.set(frozenset(roles))


def clear_context():
    """Clear all context variables."""
    request_id_var.set(None)
    user_id_var.set(None)
    roles_var.set(frozenset())


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
