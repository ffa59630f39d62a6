"""OpenAI backed generation of short notes for predefined messages."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import anyio
from openai import AsyncOpenAI, AuthenticationError, OpenAIError, PermissionDeniedError

from always_connected.config import Settings, get_settings
from always_connected.domain.entities import Participant

logger = logging.getLogger(__name__)

_TEMPERATURE = 0.8
_MAX_TOKENS = 150

_SYSTEM_PROMPT = (
    "You write for a private notifier app shared by two people who care deeply "
    "about each other. When one of them taps a short predefined message you add "
    "a warm, personal elaboration of the feeling behind it, one to three "
    "sentences long."
)


@dataclass(frozen=True)
class Enrichment:
    """Note attached to a predefined message.

    ``generated`` is ``False`` when ``note`` is one of the fallback texts.
    """

    note: str
    generated: bool


def unconfigured_note(sender: Participant) -> str:
    return f"(A special thought from {sender.value}!)"


def empty_response_note(sender: Participant) -> str:
    return f"({sender.value} is sending lots of love!)"


def access_denied_note(sender: Participant) -> str:
    return f"(There was an issue connecting to the special note service for {sender.value}.)"


def blocked_content_note(sender: Participant) -> str:
    return f"(A heartfelt thought from {sender.value} that couldn't be phrased automatically.)"


def generic_fallback_note(sender: Participant) -> str:
    return f"({sender.value} wanted to add a special note, but there was a little hiccup!)"


def build_prompt(phrase: str, sender: Participant) -> str:
    """Return the user prompt asking for an elaboration of ``phrase``."""

    name = sender.value
    return (
        f'{name} just sent the predefined message "{phrase}".\n'
        f"Write a short, expressive elaboration of that sentiment, as an extra "
        f"thought coming from {name}. Keep it warm and concise.\n"
        "Do not repeat the predefined message itself.\n"
        f'Do not open with "{name} is thinking" or "{name} wants to say"; speak '
        "directly from their perspective or describe the feeling.\n"
        f'Predefined message: "{phrase}"\n'
        f"Sender: {name}\n"
        "Elaboration:"
    )


class NoteEnrichmentService:
    """Generate notes with a bounded latency and deterministic fallbacks.

    :meth:`enrich` never raises: every failure mode maps to a fixed fallback
    text for the sender.
    """

    def __init__(
        self,
        client: Any | None = None,
        *,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self._model = settings.openai_model
        self._timeout = settings.enrichment_timeout_seconds
        if client is None and settings.openai_api_key:
            client = AsyncOpenAI(
                api_key=settings.openai_api_key,
                timeout=settings.enrichment_timeout_seconds,
                max_retries=0,
            )
        self._client = client
        if self._client is None:
            logger.warning("OPENAI_API_KEY is not configured; fallback notes will be used")

    async def enrich(self, phrase: str, sender: Participant) -> Enrichment:
        """Return a note elaborating ``phrase`` on behalf of ``sender``."""

        if self._client is None:
            return Enrichment(unconfigured_note(sender), generated=False)

        try:
            with anyio.fail_after(self._timeout):
                response = await self._client.chat.completions.create(
                    model=self._model,
                    messages=[
                        {"role": "system", "content": _SYSTEM_PROMPT},
                        {"role": "user", "content": build_prompt(phrase, sender)},
                    ],
                    temperature=_TEMPERATURE,
                    max_tokens=_MAX_TOKENS,
                )
        except TimeoutError:
            logger.warning(
                "Note generation for %r from %s exceeded %.1fs", phrase, sender.value, self._timeout
            )
            return Enrichment(generic_fallback_note(sender), generated=False)
        except (AuthenticationError, PermissionDeniedError) as exc:
            logger.error("OpenAI rejected the configured credentials: %s", exc)
            return Enrichment(access_denied_note(sender), generated=False)
        except OpenAIError as exc:
            logger.error("Error calling OpenAI (%s): %s", self._model, exc)
            return Enrichment(generic_fallback_note(sender), generated=False)

        return self._parse_response(response, sender)

    @staticmethod
    def _parse_response(response: Any, sender: Participant) -> Enrichment:
        choices = getattr(response, "choices", None) or []
        if not choices:
            logger.warning("OpenAI returned no choices; using fallback note")
            return Enrichment(empty_response_note(sender), generated=False)

        choice = choices[0]
        if getattr(choice, "finish_reason", None) == "content_filter":
            logger.warning("Note generation blocked by the content filter")
            return Enrichment(blocked_content_note(sender), generated=False)

        message = getattr(choice, "message", None)
        text = (getattr(message, "content", None) or "").strip()
        if not text:
            logger.warning(
                "OpenAI returned an empty note (finish_reason=%s)",
                getattr(choice, "finish_reason", None),
            )
            return Enrichment(empty_response_note(sender), generated=False)

        logger.debug("Generated note: %s", text)
        return Enrichment(text, generated=True)


__all__ = [
    "Enrichment",
    "NoteEnrichmentService",
    "access_denied_note",
    "blocked_content_note",
    "build_prompt",
    "empty_response_note",
    "generic_fallback_note",
    "unconfigured_note",
]
