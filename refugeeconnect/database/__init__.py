"""
The `database` package is responsible for all interactions with the application's database.
It provides configuration, entity definitions, data access and the service
functions the API routers call.

Contents:
    - config:
        Settings and the SQLAlchemy engine/metadata.

    - entities:
        ORM models: users, information records, AI interactions, community
        groups and messages.

    - daos:
        Data Access Objects wrapping the ORM queries for each entity.

    - core:
        Transactional service functions that connect routers with the DAOs
        and return API-shaped dicts.

    - helpers:
        The `@transactional` decorator and session factory.
"""
