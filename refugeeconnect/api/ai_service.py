"""
Assistant pipeline: relevance search → prompt composition → chat completion → interaction log.

`AIService` is built once in the application lifespan and stored on
`app.state.ai_service`. It holds no per-request state, so the HTTP route and
the WebSocket handler share one instance and concurrent calls stay independent.

The collaborators are injectable so the pipeline can run against stubs:

- completion_client: object with ``complete(prompt) -> str``
- search: callable ``(query=, limit=, include_inactive=) -> list[dict]``
- interaction_logger: callable ``(user_id=, query=, response=, language=,
  processing_time=, sources=) -> str``
"""

import time
import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from langchain_openai import ChatOpenAI
from langchain_core.messages import HumanMessage, SystemMessage

from refugeeconnect.database.config.config import settings
from refugeeconnect.database.core.funcs import search_information
from refugeeconnect.database.core.interactions import record_interaction
from refugeeconnect.api.prompt_utilities import (
    SYSTEM_PROMPT,
    build_enhanced_prompt,
    get_fallback_response,
    lc_text_from_content,
    localized,
)

logger = logging.getLogger(__name__)


class CompletionClient:
    """
    Thin wrapper around the OpenAI chat model.

    Every call sends two messages (the fixed system persona and the composed
    user prompt) and returns the model's text. Errors are not caught here.
    """

    def __init__(self, model: Optional[ChatOpenAI] = None):
        self.model = model or ChatOpenAI(
            model=settings.OPEN_AI_MODEL,
            api_key=settings.API_KEY,
            temperature=settings.OPEN_AI_TEMPERATURE,
            max_tokens=settings.OPEN_AI_MAX_TOKENS,
            timeout=settings.OPEN_AI_TIMEOUT,
        )

    def complete(self, prompt: str) -> str:
        response = self.model.invoke([SystemMessage(content=SYSTEM_PROMPT), HumanMessage(content=prompt)])
        return lc_text_from_content(response.content)


class AIService:
    """
    Orchestrates one assistant request end to end.

    Args:
        completion_client: Chat completion backend (defaults to `CompletionClient`).
        search: Relevance search over information records.
        interaction_logger: Persists an answered request and returns its id.
    """

    def __init__(
        self,
        completion_client=None,
        search: Optional[Callable] = None,
        interaction_logger: Optional[Callable] = None,
    ):
        self._completion_client = completion_client
        self.search = search or search_information
        self.interaction_logger = interaction_logger or record_interaction

    @property
    def completion_client(self):
        # built on first use so the app can start without reaching the model provider
        if self._completion_client is None:
            self._completion_client = CompletionClient()
        return self._completion_client

    def search_relevant_info(self, query: str) -> list[dict]:
        """
        Top `AI_SEARCH_LIMIT` records for `query`, best match first.

        Store failures are logged and degrade to an empty list.
        """
        try:
            return self.search(
                query=query,
                limit=settings.AI_SEARCH_LIMIT,
                include_inactive=settings.AI_SEARCH_INCLUDE_INACTIVE,
            )
        except Exception:
            logger.exception("Relevance search failed; continuing without context")
            return []

    def log_interaction(
        self,
        user_id,
        query: str,
        response: str,
        language: str,
        processing_time: int,
        relevant_info: list[dict],
    ) -> Optional[str]:
        """
        Record the answered request for `user_id`.

        Returns the interaction id, or None when there is no user or the
        write failed (the failure is logged, the answer is still delivered).
        """
        if not user_id:
            return None
        sources = [{"title": localized(info.get("title"), language), "type": "database"} for info in relevant_info]
        try:
            return self.interaction_logger(
                user_id=str(user_id),
                query=query,
                response=response,
                language=language,
                processing_time=processing_time,
                sources=sources,
            )
        except Exception:
            logger.exception("Failed to record AI interaction for user %s", user_id)
            return None

    def process_query(self, message: str, language: str = "en", user_id=None) -> dict:
        """
        Answer `message` in `language`.

        Returns:
            dict: On success ``{response, sources, processingTime, language,
            timestamp}`` plus ``interactionId`` when the exchange was recorded.
            On failure ``{response: <fallback>, error: True, timestamp}``.
        """
        language = language or "en"
        started = time.monotonic()
        try:
            relevant_info = self.search_relevant_info(message)
            prompt = build_enhanced_prompt(message, relevant_info, language)
            response = self.completion_client.complete(prompt)
            if not isinstance(response, str) or not response.strip():
                raise ValueError("Completion returned no text")
            processing_time = int((time.monotonic() - started) * 1000)

            interaction_id = self.log_interaction(
                user_id, message, response, language, processing_time, relevant_info
            )

            result = {
                "response": response,
                "sources": relevant_info,
                "processingTime": processing_time,
                "language": language,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
            if interaction_id:
                result["interactionId"] = interaction_id
            return result
        except Exception:
            logger.exception("AI query processing failed")
            return {
                "response": get_fallback_response(language),
                "error": True,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
