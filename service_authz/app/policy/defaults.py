"""
Built-in policy and user directory for the reference deployment.

``/employees`` is guarded only at the route layer: creating and replacing
employees needs ADMIN, reads and deletes are open. ``/items`` needs USER
for everything, and saving or deleting an item additionally needs ADMIN
at the method layer.
"""

DEFAULT_POLICY = {
    "role_hierarchy": {},
    "rules": [
        {
            "scope": "route",
            "pattern": "/employees",
            "http_method": "POST",
            "required_role": "ADMIN",
            "description": "Only administrators may create employees",
        },
        {
            "scope": "route",
            "pattern": "/employees/**",
            "http_method": "PUT",
            "required_role": "ADMIN",
            "description": "Only administrators may replace employees",
        },
        {
            "scope": "route",
            "pattern": "/employees/**",
            "http_method": "PATCH",
            "required_role": "ADMIN",
            "description": "Only administrators may modify employees",
        },
        {
            "scope": "route",
            "pattern": "/items/**",
            "required_role": "USER",
            "description": "Items are visible to signed-in users only",
        },
        {
            "scope": "method",
            "resource_type": "items",
            "required_role": "USER",
            "description": "Every item operation needs USER",
        },
        {
            "scope": "method",
            "resource_type": "items",
            "operation": "create",
            "required_role": "ADMIN",
            "description": "Saving a new item needs ADMIN",
        },
        {
            "scope": "method",
            "resource_type": "items",
            "operation": "update",
            "required_role": "ADMIN",
            "description": "Saving an existing item needs ADMIN",
        },
        {
            "scope": "method",
            "resource_type": "items",
            "operation": "delete",
            "required_role": "ADMIN",
            "description": "Deleting an item needs ADMIN",
        },
    ],
}

DEFAULT_USERS = {
    "users": [
        {"username": "user", "password": "password", "roles": ["USER"]},
        {"username": "admin", "password": "password", "roles": ["USER", "ADMIN"]},
    ],
}
