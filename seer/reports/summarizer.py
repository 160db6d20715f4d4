"""AI summarizer for reports (OpenAI or Anthropic).

SDK imports are deferred to the first call so the service runs without the
``llm`` extra installed when no provider is configured. Every call is bounded
by a timeout and a circuit breaker, and every failure is returned as
``SummaryResult.unavailable`` rather than raised.
"""

import asyncio
import logging
import re
from typing import Any

from seer.errors import SummarizerUnavailableError
from seer.reports.circuit_breaker import CircuitBreaker, CircuitOpenError
from seer.reports.config import SummarizerConfig
from seer.reports.schemas import SummaryResult

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You write concise, practical market analysis for software builders."


def first_paragraph(text: str, limit: int) -> str:
    """First non-heading paragraph of ``text``, clipped to ``limit`` chars."""
    for block in re.split(r"\n\s*\n", text.strip()):
        lines = [ln for ln in block.strip().splitlines() if not ln.lstrip().startswith("#")]
        paragraph = " ".join(ln.strip() for ln in lines).strip()
        if paragraph:
            if len(paragraph) > limit:
                return paragraph[:limit].rstrip() + "..."
            return paragraph
    return ""


class Summarizer:
    """Produces ``ai_analysis`` and ``summary`` for a report prompt."""

    def __init__(
        self,
        config: SummarizerConfig,
        breaker: CircuitBreaker | None = None,
    ) -> None:
        self._config = config
        self._client: Any = None
        self._breaker = breaker or CircuitBreaker(
            failure_threshold=config.circuit_failure_threshold,
            recovery_timeout=config.circuit_recovery_timeout,
            name=f"summarizer_{config.provider}",
        )

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    @property
    def breaker(self) -> CircuitBreaker:
        return self._breaker

    async def summarize(self, prompt: str) -> SummaryResult:
        if not self.enabled:
            return SummaryResult.unavailable("summarizer not configured")

        try:
            async with asyncio.timeout(self._config.timeout_seconds):
                text = await self._breaker.call(self._complete, prompt)
        except TimeoutError:
            reason = f"timed out after {self._config.timeout_seconds:.0f}s"
            logger.warning("Summarizer %s", reason)
            return SummaryResult.unavailable(reason)
        except CircuitOpenError as e:
            logger.warning("Summarizer skipped: %s", e)
            return SummaryResult.unavailable(str(e))
        except Exception as e:
            logger.warning("Summarizer failed: %s: %s", type(e).__name__, e)
            return SummaryResult.unavailable(f"{type(e).__name__}: {e}")

        summary = first_paragraph(text, self._config.summary_max_chars)
        return SummaryResult.ok(analysis=text.strip(), summary=summary)

    async def _complete(self, prompt: str) -> str:
        if self._config.provider == "openai":
            text = await self._complete_openai(prompt)
        elif self._config.provider == "anthropic":
            text = await self._complete_anthropic(prompt)
        else:
            raise SummarizerUnavailableError(f"Unknown provider {self._config.provider}")

        if not text or not text.strip():
            raise SummarizerUnavailableError("Summarizer returned an empty response")
        return text

    def _get_client(self) -> Any:
        """Lazy-initialize the provider's async client."""
        if self._client is None:
            key = self._config.api_key.get_secret_value() if self._config.api_key else None
            if self._config.provider == "openai":
                import openai

                self._client = openai.AsyncOpenAI(
                    api_key=key,
                    base_url=self._config.base_url,
                    timeout=self._config.timeout_seconds,
                    max_retries=0,
                )
            else:
                import anthropic

                self._client = anthropic.AsyncAnthropic(
                    api_key=key,
                    base_url=self._config.base_url,
                    timeout=self._config.timeout_seconds,
                    max_retries=0,
                )
        return self._client

    async def _complete_openai(self, prompt: str) -> str:
        client = self._get_client()
        response = await client.chat.completions.create(
            model=self._config.resolved_model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            max_tokens=self._config.max_tokens,
        )
        return response.choices[0].message.content or ""

    async def _complete_anthropic(self, prompt: str) -> str:
        client = self._get_client()
        response = await client.messages.create(
            model=self._config.resolved_model,
            max_tokens=self._config.max_tokens,
            system=SYSTEM_PROMPT,
            messages=[{"role": "user", "content": prompt}],
        )
        return "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
