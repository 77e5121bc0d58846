"""
Domain utilities for the Authorization Service.

Holds the two enforcement points, both calling into the shared decision
engine: the route filter (HTTP verb + path, before dispatch) and the method
interceptor (data-access operations, before they execute).
"""

from .decisions import rejection_for
from .method_interceptor import MethodAuthorizationInterceptor, SecuredRepository
from .route_filter import RouteAuthorizationFilter

__all__ = [
    "MethodAuthorizationInterceptor",
    "RouteAuthorizationFilter",
    "SecuredRepository",
    "rejection_for",
]
