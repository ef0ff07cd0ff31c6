"""
The `config` package provides the two building blocks for database access.

Contents:
    - config: strongly typed app settings loaded from environment variables (with .env support), exposed through a singleton Settings object
    - connection_engine: SQLAlchemy bootstrap that builds the connection URL from those settings, creates the Engine, shared MetaData, and the declarative base for ORM models
"""
