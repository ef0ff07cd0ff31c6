"""
Database Transaction Management
===============================

Utilities for managing SQLAlchemy sessions through a context variable and a
decorator-based transaction wrapper.

A function decorated with ``@transactional`` receives a ``session`` keyword
argument. Nested decorated calls reuse the session already bound to the
current context, so a chain of service functions commits (or rolls back) as
one unit.

Sessions are created with ``expire_on_commit=False`` so that ORM objects
returned from a finished transaction can still be read by the caller.
"""

from functools import wraps
from sqlalchemy.orm import sessionmaker
import contextvars
import logging
from refugeeconnect.database.config.connection_engine import connection_engine

logger = logging.getLogger(__name__)

db_session_context = contextvars.ContextVar("db_session_context", default=None)
"""Context variable storing the active SQLAlchemy session."""

SessionFactory = sessionmaker(bind=connection_engine, expire_on_commit=False)


def transactional(func):
    """
    Decorator to wrap functions in a managed SQLAlchemy transaction.

    - If a session already exists in context, it is reused.
    - Otherwise, a new session is created, committed, and closed.
    - On errors, the session is rolled back and the error re-raised.

    Example
    -------
    >>> @transactional
    ... def create_user(user: User, session=None):
    ...     session.add(user)
    ...     return user
    """
    @wraps(func)
    def wrap_func(*args, **kwargs):
        session = db_session_context.get()
        if session:
            return func(*args, session=session, **kwargs)

        session = SessionFactory()
        token = db_session_context.set(session)

        try:
            result = func(*args, session=session, **kwargs)
            session.flush()
            session.commit()
        except Exception:
            logger.debug("Rolling back transaction in %s", func.__name__)
            session.rollback()
            raise
        finally:
            session.close()
            db_session_context.reset(token)

        return result

    return wrap_func
