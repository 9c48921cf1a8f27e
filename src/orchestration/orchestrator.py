# src/orchestration/orchestrator.py — v1
"""AI request orchestrator: cache → queue → tiered provider fallback.

Every AI feature calls through execute(), which for one call:
  1. snapshots the feature flags;
  2. checks the persistent tier, then the memory tier (a hit returns
     immediately and never touches the queue or a provider);
  3. admits the call through the RequestQueue (unless bypassed);
  4. tries each provider in chain order, each attempt bounded by
     attempt_timeout_s, logged and recorded;
  5. writes a success through to both tiers;
  6. when every provider failed, returns a degraded value cached for a
     short TTL, or raises ProvidersExhaustedError for callers that asked to.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from lexassist.cache.base_cache_store import BaseResponseCache
from lexassist.config.feature_flags import FeatureFlags, FeatureFlagStore
from lexassist.llm.base_client import BaseLLMClient
from lexassist.llm.config import parse_assignment
from lexassist.llm.errors import (
    ProviderError,
    ProvidersExhaustedError,
    classify_error,
)
from lexassist.llm.models import AIRequestOptions
from lexassist.logging.context import (
    set_provider_context,
    set_request_context,
)
from lexassist.orchestration.degraded import build_degraded_response
from lexassist.orchestration.request_queue import RequestQueue
from lexassist.tracking.call_logger import CallLogger

logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

Invoke = Callable[[BaseLLMClient, "str | None"], Awaitable[T]]


def _identity(value: str) -> str:
    return value


@dataclass(frozen=True)
class ProviderTask(Generic[T]):
    """Work to run against each provider in turn.

    Attributes:
        name: Feature label used in logs and tracking.
        prompt: Cache key material (unless options.cache_key is given)
            and the prompt length reported in logs.
        invoke: Coroutine factory taking (client, model override).
        encode: Serializes a result for the cache tiers.
        decode: Inverse of encode, applied to cache hits.
        degraded: Builds the fallback value from the last error. None
            means the task cannot degrade and exhaustion always raises.
    """

    name: str
    prompt: str
    invoke: Invoke[T]
    encode: Callable[[T], str]
    decode: Callable[[str], T]
    degraded: Callable[[BaseException | None], T] | None = None

    @classmethod
    def text(
        cls,
        name: str,
        prompt: str,
        invoke: Invoke[str],
        degraded: Callable[[BaseException | None], str] | None = None,
    ) -> ProviderTask[str]:
        return cls(name, prompt, invoke, _identity, _identity, degraded)  # type: ignore[arg-type,return-value]

    @classmethod
    def json_object(
        cls,
        name: str,
        prompt: str,
        invoke: Invoke[dict[str, Any]],
        degraded: Callable[[BaseException | None], dict[str, Any]] | None = None,
    ) -> ProviderTask[dict[str, Any]]:
        return cls(  # type: ignore[return-value]
            name,
            prompt,
            invoke,  # type: ignore[arg-type]
            lambda value: json.dumps(value, ensure_ascii=False),
            json.loads,
            degraded,  # type: ignore[arg-type]
        )

    @classmethod
    def structured(
        cls,
        name: str,
        prompt: str,
        invoke: Invoke[M],
        model_cls: type[M],
    ) -> ProviderTask[M]:
        return cls(  # type: ignore[return-value]
            name,
            prompt,
            invoke,  # type: ignore[arg-type]
            lambda value: value.model_dump_json(by_alias=True),
            model_cls.model_validate_json,
        )


class Orchestrator:
    """Cache-first, queue-bounded, provider-fallback request engine.

    Args:
        clients: Provider clients in fallback preference order.
        flags: Feature flag store, read once per call.
        persistent_cache: Durable tier, checked first.
        memory_cache: Process-local tier.
        queue: Admission queue bounding concurrent provider work.
        call_logger: Optional provider attempt history.
        attempt_timeout_s: Deadline per provider attempt (None disables).
        degraded_ttl_s: TTL for cached degraded responses.
    """

    def __init__(
        self,
        clients: list[BaseLLMClient],
        flags: FeatureFlagStore,
        persistent_cache: BaseResponseCache,
        memory_cache: BaseResponseCache,
        queue: RequestQueue,
        call_logger: CallLogger | None = None,
        attempt_timeout_s: float | None = None,
        degraded_ttl_s: int = 60,
    ) -> None:
        if not clients:
            raise ValueError("At least one provider client is required")
        self._clients = list(clients)
        self._flags = flags
        self._persistent = persistent_cache
        self._memory = memory_cache
        self._queue = queue
        self._call_logger = call_logger
        self._attempt_timeout_s = attempt_timeout_s
        self._degraded_ttl_s = degraded_ttl_s
        self.chain_label = ",".join(f"{c.provider_name}:{c.default_model}" for c in self._clients)

    # --- Accessors ---

    @property
    def clients(self) -> list[BaseLLMClient]:
        return list(self._clients)

    @property
    def flags(self) -> FeatureFlags:
        """Current feature flag snapshot."""
        return self._flags.snapshot()

    @property
    def queue(self) -> RequestQueue:
        return self._queue

    @property
    def caches(self) -> list[BaseResponseCache]:
        return [self._persistent, self._memory]

    @property
    def call_logger(self) -> CallLogger | None:
        return self._call_logger

    # --- Public entry points ---

    async def enhanced_request(
        self,
        prompt: str,
        options: AIRequestOptions | None = None,
    ) -> str | dict[str, Any]:
        """Chat completion, or a parsed JSON object when json_response is set.

        Never raises on provider exhaustion: the result is then an apology
        string, or ``{"error": True, "errorType", "fallback": True, "message"}``.
        """
        options = options or AIRequestOptions()
        if options.json_response:
            task: ProviderTask[Any] = ProviderTask.json_object(
                "request",
                prompt,
                lambda client, model: client.complete_json(
                    prompt,
                    system=options.system,
                    temperature=options.temperature,
                    max_tokens=options.max_tokens,
                    model=model,
                ),
                degraded=lambda error: build_degraded_response(error, structured=True),  # type: ignore[arg-type,return-value]
            )
        else:
            task = ProviderTask.text(
                "request",
                prompt,
                lambda client, model: self._chat(client, prompt, options, model),
                degraded=lambda error: build_degraded_response(error),  # type: ignore[arg-type,return-value]
            )
        return await self.execute(task, options)

    async def complete_with_fallback(
        self,
        prompt: str,
        options: AIRequestOptions | None = None,
    ) -> str:
        """Plain completion through the same pipeline, without degrading.

        Raises:
            ProvidersExhaustedError: If every provider failed.
            ProviderError: If fallback is disabled and the first provider failed.
        """
        options = options or AIRequestOptions()
        task = ProviderTask.text(
            "completion",
            prompt,
            lambda client, model: self._chat(client, prompt, options, model),
        )
        return await self.execute(task, options, degrade=False)

    async def execute(
        self,
        task: ProviderTask[T],
        options: AIRequestOptions | None = None,
        degrade: bool = True,
    ) -> T:
        """Run task through cache, queue and the provider chain."""
        options = options or AIRequestOptions()
        flags = self._flags.snapshot()
        feature = options.log_prefix or task.name
        request_id = set_request_context(feature)

        use_cache = flags.use_cache if options.use_cache is None else options.use_cache
        key_prompt = options.cache_key or task.prompt
        key_options = options.cache_options()

        if use_cache:
            cached = await self._cache_lookup(task, key_prompt, key_options)
            if cached is not None:
                logger.info("%s: served from cache", feature)
                return cached[0]

        async def run() -> T:
            # Queued work starts in another task; restore this call's context.
            set_request_context(feature, request_id)
            return await self._run_chain(
                task, options, flags, feature, use_cache, key_prompt, key_options, degrade,
            )

        if flags.use_request_queue and not options.skip_queue:
            return await self._queue.enqueue(run)
        return await run()

    # --- Internal pipeline ---

    async def _run_chain(
        self,
        task: ProviderTask[T],
        options: AIRequestOptions,
        flags: FeatureFlags,
        feature: str,
        use_cache: bool,
        key_prompt: str,
        key_options: dict[str, Any],
        degrade: bool,
    ) -> T:
        fallback = flags.fallback_enabled and not options.skip_fallback
        errors: list[Exception] = []

        for client, model in self._plan_attempts(options.model):
            try:
                result = await self._attempt(task, client, model, feature, flags)
            except Exception as e:
                errors.append(e)
                if not fallback:
                    raise
                logger.warning("%s: %s failed, trying next provider: %s", feature, client.provider_name, e)
                continue

            if use_cache:
                await self._cache_store(key_prompt, key_options, task.encode(result))
            return result

        set_provider_context(None)
        if not errors:
            errors.append(ProviderError(
                str(options.model), "no configured provider matches the requested model",
            ))
        exhausted = ProvidersExhaustedError(errors)
        logger.error("%s: all AI providers failed (%d attempts)", feature, len(errors))

        if not degrade or task.degraded is None:
            raise exhausted

        value = task.degraded(errors[-1])
        if use_cache:
            await self._cache_store(
                key_prompt, key_options, task.encode(value), ttl_s=self._degraded_ttl_s,
            )
        return value

    def _plan_attempts(self, model: str | None) -> list[tuple[BaseLLMClient, str | None]]:
        """Clients to try, each with its model override.

        "provider:model" targets that provider only; a bare model name
        applies to the primary provider only.
        """
        if not model:
            return [(c, None) for c in self._clients]

        parsed = parse_assignment(model)
        if parsed is not None:
            provider, model_name = parsed
            targeted = [(c, model_name) for c in self._clients if c.provider_name == provider]
            if not targeted:
                logger.warning("Requested provider %r is not in the chain", provider)
            return targeted

        primary, *rest = self._clients
        return [(primary, model), *((c, None) for c in rest)]

    async def _attempt(
        self,
        task: ProviderTask[T],
        client: BaseLLMClient,
        model: str | None,
        feature: str,
        flags: FeatureFlags,
    ) -> T:
        provider = client.provider_name
        model_name = model or client.default_model
        set_provider_context(provider)
        log = logger.info if flags.detailed_logging else logger.debug

        start = time.monotonic()
        try:
            if self._attempt_timeout_s:
                result = await asyncio.wait_for(task.invoke(client, model), self._attempt_timeout_s)
            else:
                result = await task.invoke(client, model)
        except asyncio.TimeoutError as e:
            duration_ms = int((time.monotonic() - start) * 1000)
            error = ProviderError(provider, f"no answer within {self._attempt_timeout_s}s", "transport")
            self._track(task, provider, model_name, duration_ms, feature, error)
            raise error from e
        except Exception as e:
            duration_ms = int((time.monotonic() - start) * 1000)
            self._track(task, provider, model_name, duration_ms, feature, e)
            logger.warning(
                "%s: %s request failed after %dms (prompt %d chars): %s",
                feature, provider, duration_ms, len(task.prompt), e,
            )
            raise

        duration_ms = int((time.monotonic() - start) * 1000)
        self._track(task, provider, model_name, duration_ms, feature, None)
        log(
            "%s: %s request successful in %dms (prompt %d chars)",
            feature, provider, duration_ms, len(task.prompt),
        )
        return result

    def _track(
        self,
        task: ProviderTask[Any],
        provider: str,
        model: str,
        duration_ms: int,
        feature: str,
        error: BaseException | None,
    ) -> None:
        if self._call_logger is None:
            return
        self._call_logger.record(
            provider=provider,
            model=model,
            duration_ms=duration_ms,
            prompt_chars=len(task.prompt),
            status="failed" if error is not None else "success",
            error_type=classify_error(error) if error is not None else None,
            feature=feature,
        )

    @staticmethod
    async def _chat(
        client: BaseLLMClient,
        prompt: str,
        options: AIRequestOptions,
        model: str | None,
    ) -> str:
        return await client.chat_respond(
            prompt,
            system=options.system,
            temperature=options.temperature,
            max_tokens=options.max_tokens,
            model=model,
        )

    # --- Cache tiers ---

    async def _cache_lookup(
        self,
        task: ProviderTask[T],
        key_prompt: str,
        key_options: dict[str, Any],
    ) -> tuple[T] | None:
        """Persistent tier first, then memory. Returns a 1-tuple on hit."""
        for cache in (self._persistent, self._memory):
            try:
                raw = await cache.get(self.chain_label, key_prompt, key_options)
            except Exception:
                logger.exception("Cache read failed on %s tier", cache.backend)
                continue
            if raw is None:
                continue
            try:
                return (task.decode(raw),)
            except ValueError as e:
                logger.warning("Discarding undecodable %s cache entry: %s", cache.backend, e)
        return None

    async def _cache_store(
        self,
        key_prompt: str,
        key_options: dict[str, Any],
        encoded: str,
        ttl_s: int | None = None,
    ) -> None:
        for cache in (self._persistent, self._memory):
            try:
                await cache.set(self.chain_label, key_prompt, encoded, key_options, ttl_s=ttl_s)
            except Exception:
                logger.exception("Cache write failed on %s tier", cache.backend)
