# src/features/chat.py — v1
"""Chat assistant feature."""

from __future__ import annotations

import logging

from lexassist.llm.models import AIRequestOptions
from lexassist.orchestration.orchestrator import Orchestrator

logger = logging.getLogger(__name__)

CHAT_DISABLED_MESSAGE = (
    "This feature is currently disabled during development. Please try again later."
)
CHAT_ERROR_MESSAGE = (
    "I apologize, but I'm having trouble processing your request right now. "
    "Please try again in a moment."
)


async def generate_chat_response(
    orchestrator: Orchestrator,
    message: str,
    options: AIRequestOptions | None = None,
) -> str:
    """Answer a chat message; always returns text for the user."""
    if not orchestrator.flags.enable_chat_assistant:
        return CHAT_DISABLED_MESSAGE

    options = (options or AIRequestOptions()).model_copy(
        update={"log_prefix": "Chat", "json_response": False},
    )
    try:
        answer = await orchestrator.enhanced_request(message, options)
    except Exception:
        logger.exception("Chat generation error")
        return CHAT_ERROR_MESSAGE
    return answer if isinstance(answer, str) else str(answer)
