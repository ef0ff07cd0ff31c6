"""
The `helpers` package provides transaction handling for the service layer.

Contents
--------
- transactionManagement
    - `db_session_context`: context variable carrying the active session
    - `@transactional`: runs a function inside a managed transaction, reusing
      an active session when one exists, committing on success and rolling
      back on errors
"""
