"""Static reference data: emergency contacts and partner services."""

EMERGENCY_CONTACTS = [
    {"name": "Police Emergency", "number": "999", "type": "police", "available": "24/7"},
    {"name": "Medical Emergency", "number": "911", "type": "medical", "available": "24/7"},
    {"name": "UNHCR Emergency", "number": "+256-XXX-XXXX", "type": "unhcr", "available": "24/7"},
    {"name": "Fire Department", "number": "112", "type": "fire", "available": "24/7"},
]

SERVICES = [
    {
        "id": 1,
        "name": "UNHCR Registration",
        "category": "registration",
        "description": "Assistance with refugee registration and documentation",
        "location": "Kampala",
        "contact": "+256-XXX-XXXX",
        "website": "https://www.unhcr.org",
    },
    {
        "id": 2,
        "name": "Medical Services",
        "category": "healthcare",
        "description": "Primary healthcare services for refugees",
        "location": "Multiple locations",
        "contact": "+256-XXX-XXXX",
    },
    {
        "id": 3,
        "name": "Education Support",
        "category": "education",
        "description": "School enrollment and educational support",
        "location": "Various settlements",
        "contact": "+256-XXX-XXXX",
    },
]


def filter_services(category: str | None = None, search: str | None = None) -> list[dict]:
    """Services in `category` whose name or description contains `search` (case-insensitive)."""
    services = SERVICES
    if category:
        services = [s for s in services if s["category"] == category]
    if search:
        needle = search.lower()
        services = [s for s in services if needle in s["name"].lower() or needle in s["description"].lower()]
    return services


def find_service(service_id: int) -> dict | None:
    return next((s for s in SERVICES if s["id"] == service_id), None)
