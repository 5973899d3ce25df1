# =============================================================================
# agents/structured_model.py - Structured-Output Model Client
# =============================================================================
# Thin wrapper around the OpenAI chat completions API that returns a parsed
# JSON object shaped by a JSON Schema.
#
# Both analysis agents depend on the StructuredModel protocol rather than on
# OpenAI directly, so tests (and alternative providers) can substitute any
# object with a matching generate() method.
#
# Timeouts are an explicit httpx.Timeout applied per phase (connect, write,
# read, pool), not a wall-clock total. Connecting is capped at
# CONNECT_TIMEOUT_SECONDS; the read limit bounds the wait for the model's
# answer. The HTTP client aborts the request when a limit is hit, so nothing
# keeps running after AnalysisTimeoutError.
#
# Usage:
#   model = OpenAIStructuredClient(timeout_seconds=60)
#   data = model.generate(messages, schema=BASIC_ANALYSIS_SCHEMA,
#                         schema_name="basic_color_analysis")
# =============================================================================

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import httpx
from openai import APITimeoutError, OpenAI

from app.config import settings
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT_SECONDS = 10.0


# =============================================================================
# Exceptions
# =============================================================================

class AnalysisError(ApplicationError):
    """
    Error during an AI analysis call.

    Raised for transport and model failures. The pipeline converts these
    into a fallback analysis; they are never shown to end users.
    """

    def __init__(
        self,
        message: str,
        code: str = "ANALYSIS_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code=code, suggestion=suggestion, details=details)


class AnalysisTimeoutError(AnalysisError):
    """The model didn't answer within the configured timeout."""

    def __init__(self, timeout_seconds: float):
        super().__init__(
            message=f"AI analysis timed out after {timeout_seconds:g} seconds",
            code="ANALYSIS_TIMEOUT",
            suggestion="Retry later; the model provider may be under load",
            details={"timeout_seconds": timeout_seconds},
        )


class ModelResponseError(AnalysisError):
    """The model answered, but not with a usable JSON object."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code="MODEL_RESPONSE_ERROR",
            suggestion="The model didn't follow the response schema",
            details=details,
        )


# =============================================================================
# Protocol
# =============================================================================

class StructuredModel(Protocol):
    """A model that answers with a JSON object matching a schema."""

    def generate(
        self,
        messages: list[dict[str, Any]],
        schema: dict[str, Any],
        schema_name: str,
    ) -> dict[str, Any]:
        ...


# =============================================================================
# OpenAI Implementation
# =============================================================================

class OpenAIStructuredClient:
    """
    StructuredModel backed by OpenAI chat completions.

    SDK-level retries are disabled; retrying is decided by callers.

    Attributes:
        model: OpenAI model ID (must accept image inputs)
        temperature: Generation temperature
        timeout_seconds: Per-phase limit (read, write, pool); see http_timeout
    """

    def __init__(
        self,
        model: str | None = None,
        temperature: float | None = None,
        timeout_seconds: float | None = None,
        client: OpenAI | None = None,
    ):
        self.model = model or settings.OPENAI_MODEL
        self.temperature = (
            temperature if temperature is not None else settings.ANALYSIS_TEMPERATURE
        )
        self.timeout_seconds = timeout_seconds or settings.ANALYSIS_TIMEOUT_SECONDS
        self.http_timeout = httpx.Timeout(
            self.timeout_seconds,
            connect=min(CONNECT_TIMEOUT_SECONDS, self.timeout_seconds),
        )
        self.client = client or OpenAI(
            api_key=settings.OPENAI_API_KEY,
            timeout=self.http_timeout,
            max_retries=0,
        )

        logger.info(
            f"OpenAIStructuredClient initialized with model={self.model}, "
            f"timeout={self.timeout_seconds}s"
        )

    def generate(
        self,
        messages: list[dict[str, Any]],
        schema: dict[str, Any],
        schema_name: str,
    ) -> dict[str, Any]:
        """
        Run one structured-output completion.

        Returns:
            The parsed JSON object

        Raises:
            AnalysisTimeoutError: Request exceeded timeout_seconds
            ModelResponseError: Empty, non-JSON or non-object content
            Exception: Other SDK errors propagate unchanged
        """
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                temperature=self.temperature,
                messages=messages,
                response_format={
                    "type": "json_schema",
                    "json_schema": {"name": schema_name, "schema": schema},
                },
                timeout=self.http_timeout,
            )
        except APITimeoutError as e:
            raise AnalysisTimeoutError(self.timeout_seconds) from e

        response_text = response.choices[0].message.content or ""
        logger.debug(f"{schema_name} response: {response_text[:200]}...")
        return parse_json_object(response_text)


def parse_json_object(response_text: str) -> dict[str, Any]:
    """
    Parse model output that should be a single JSON object.

    Raises:
        ModelResponseError: Empty text, invalid JSON, or not an object
    """
    if not response_text.strip():
        raise ModelResponseError("AI analysis failed to generate results")

    try:
        data = json.loads(response_text)
    except json.JSONDecodeError as e:
        raise ModelResponseError(
            f"Invalid JSON response from model: {e}",
            details={"raw_response": response_text[:500]},
        ) from e

    if not isinstance(data, dict):
        raise ModelResponseError(
            f"Expected a JSON object, got {type(data).__name__}",
            details={"raw_response": response_text[:500]},
        )
    return data
