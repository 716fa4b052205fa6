"""
Roles and Capabilities Configuration
This config defines which capabilities each role label grants in the back office,
plus the reference data seeded by scripts/seed_reference_data.py.
"""

# Role labels stored in user_roles.role
ROLES = ["admin", "operator", "field_operator", "service_provider", "store"]

# Role assigned by the privileged create functions, per entity type
ENTITY_ROLES = {
    "operator": "operator",
    "field_operator": "field_operator",
    "service_provider": "service_provider",
    "store": "store",
}

CAPABILITIES = {
    "can_read": "List and view entities and reference data",
    "can_create": "Create operators, field operators, service providers and stores",
    "can_update": "Edit entity profiles and addresses",
    "can_delete": "Delete entities and their login accounts",
    "can_manage_taxonomy": "Edit service categories and reference data",
    "can_manage_roles": "Assign and remove user roles",
}

ROLE_CAPABILITIES = {
    "admin": list(CAPABILITIES.keys()),
    "operator": ["can_read", "can_create", "can_update"],
}

# Reference data seeded on a fresh project
SEED_WORKING_AREAS = ["North", "South", "East", "West", "Center"]

SEED_STORE_CATEGORIES = ["Grocery", "Hardware", "Pharmacy", "Restaurant"]

SEED_COUNTRIES = [
    {"name": "Germany", "code": "DE", "phone_code": "+49"},
    {"name": "Israel", "code": "IL", "phone_code": "+972"},
    {"name": "United Kingdom", "code": "GB", "phone_code": "+44"},
    {"name": "United States", "code": "US", "phone_code": "+1"},
]


def get_capability_matrix():
    """
    Returns a dictionary with every role and the capabilities it grants
    Format: {
        "capabilities": [{"name": "can_read", "description": "..."}, ...],
        "roles": [{"name": "admin", "capabilities": ["can_create", ...]}, ...]
    }
    """
    capabilities = [
        {"name": name, "description": description}
        for name, description in CAPABILITIES.items()
    ]
    roles = []
    for role in ROLES:
        roles.append({
            "name": role,
            "capabilities": sorted(ROLE_CAPABILITIES.get(role, []))
        })
    return {
        "capabilities": capabilities,
        "roles": roles
    }


CAPABILITY_MATRIX = get_capability_matrix()
