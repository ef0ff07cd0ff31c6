"""
Entities Package: SQLAlchemy 2.0 ORM Models (PostgreSQL + UUID + UTC)
======================================================================

The `entities` package maps database tables to Python classes using
SQLAlchemy 2.0 typed mappings. DAOs (`daos` package) consume these classes.

Conventions
-----------
- UUID primary keys, timezone-aware UTC timestamps
- Nested and list-valued attributes stored as JSONB (JSON outside PostgreSQL)
- `to_dict()` returns the camelCase JSON shape served by the API

Contents
--------
- User (`app_user`)
    Registered member: contact details, hashed password, preferred language,
    refugee status, location/demographics/preferences, admin and active flags.

- Information (`information`)
    Multilingual informational article with category, audience, priority,
    location scope, media, contacts, tags, likes and a soft-delete flag.
    Carries the full-text index used by the AI assistant.

- AIInteraction (`ai_interaction`)
    Log of one assistant request: query, response, language, cited sources,
    processing time and optional user feedback.

- CommunityGroup / CommunityMessage (`community_group`, `community_message`)
    Persistent community boards.
"""
