# src/features/document_enhancement.py — v2
"""Document enhancement feature: strengthen a drafted legal document.

Any provider failure returns the draft unchanged with a notice.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Any

from lexassist.cache.keys import canonical_json
from lexassist.core.models import DocumentEnhancement
from lexassist.llm.errors import ProviderError, ProvidersExhaustedError, classify_error
from lexassist.llm.models import AIRequestOptions
from lexassist.orchestration.degraded import DEGRADED_MESSAGES
from lexassist.orchestration.orchestrator import Orchestrator, ProviderTask

logger = logging.getLogger(__name__)

ENHANCEMENT_DISABLED_NOTICE = (
    "AI document enhancement is currently disabled. The document is shown as drafted."
)


class DocumentEnhancementService:
    """Enhance generated documents through the orchestrator."""

    def __init__(self, orchestrator: Orchestrator) -> None:
        self._orchestrator = orchestrator

    async def enhance(
        self,
        content: str,
        form_data: dict[str, Any],
        document_type: str,
        jurisdiction: str,
    ) -> DocumentEnhancement:
        """Enhanced text, or the original content with a notice explaining why."""
        if not self._orchestrator.flags.enable_document_generation:
            return DocumentEnhancement(
                content=content, enhanced=False, notice=ENHANCEMENT_DISABLED_NOTICE,
            )

        digest = hashlib.sha256(
            canonical_json({"content": content, "form_data": form_data}).encode("utf-8")
        ).hexdigest()
        task = ProviderTask.structured(
            "document_enhancement",
            content,
            lambda client, model: client.enhance_document(
                content, form_data, document_type, jurisdiction, model=model,
            ),
            DocumentEnhancement,
        )
        options = AIRequestOptions(
            cache_key=f"enhance:{document_type}:{jurisdiction}:{digest}",
            log_prefix="DocumentEnhancement",
        )
        try:
            return await self._orchestrator.execute(task, options, degrade=False)
        except (ProvidersExhaustedError, ProviderError) as e:
            logger.warning("Document enhancement unavailable; returning original draft")
            error: Exception = e
        except Exception as e:
            logger.exception("Unexpected document enhancement error")
            error = e
        return DocumentEnhancement(
            content=content,
            enhanced=False,
            notice=DEGRADED_MESSAGES[classify_error(error)],
        )
