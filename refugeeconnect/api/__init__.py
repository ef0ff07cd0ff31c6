"""
API Package: FastAPI Routers • Models • JWT Utils • AI Assistant Pipeline
==========================================================================

Mission
-------
This package defines the backend's HTTP interface and the assistant pipeline
behind it: FastAPI routing, JWT cookie auth, request validation, media
uploads, rate limiting, and the retrieval-augmented question answering used
by both the HTTP route and the WebSocket channel.

Contents
--------
- fast_api
    Routers for auth, AI assistant, information records, home/dashboard
    feeds, community boards, emergency contacts and services.

- models
    Pydantic request contracts (camelCase keys accepted).

- utils
    JWT helpers and the `get_current_user` / `get_optional_user` /
    `get_admin_user` dependencies.

- ai_service
    `CompletionClient` (ChatOpenAI wrapper) and `AIService`
    (search → prompt → completion → interaction log, with language fallbacks).

- prompt_utilities
    Assistant persona, fallback answers and the prompt composer.

- uploads
    Validation and storage of media attached to information records.

- rate_limit
    Rolling-window limiters for `/api` and `/api/ai`.

- catalogs
    Static emergency contacts and partner services.
"""
