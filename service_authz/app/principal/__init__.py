"""
Principal and role model.

Pure data: principals carry an identifier and a flat set of role names.
"""

from .models import Principal, has_role, expand_roles, validate_role_name

__all__ = [
    "Principal",
    "has_role",
    "expand_roles",
    "validate_role_name",
]
