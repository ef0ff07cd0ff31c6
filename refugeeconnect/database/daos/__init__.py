"""
DAOs Package: Data Access Layer (SQLAlchemy 2.0)
=================================================

The `daos` package encapsulates all ORM queries behind small classes that
the service layer (`database.core`) composes.

Conventions
-----------
- Session lifecycle (open/commit/rollback) is handled by callers
  (`@transactional`).
- DAOs log and re-raise; upper layers decide error policy.

Contents
--------
- UserDao
    * Creates users with password hashing
    * Fetches users by id, email, or email-or-phone
    * Updates last login, profile fields and password

- InformationDao
    * Creates, updates and soft-deletes information records
    * Filtered/paginated listing; home and dashboard feeds
    * Full-text relevance search for the AI assistant
    * View counter and like toggling

- AIInteractionDao
    * Records assistant interactions
    * Paginated per-user history, feedback updates, bulk deletion
    * Aggregates for admin analytics

- CommunityDao
    * Groups (list, lookup, join) and message boards (post, recent)
"""
