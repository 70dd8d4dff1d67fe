"""Thin Bedrock client wrapper for text-completion invocations."""

from __future__ import annotations

import base64
import logging
from functools import lru_cache
from typing import Any, Optional

import boto3
from fastapi.concurrency import run_in_threadpool

from app.config.settings import AwsConfig, BedrockConfig, settings

logger = logging.getLogger(__name__)


class LlmInvocationError(RuntimeError):
    """Raised when the Bedrock invocation fails."""


def _decode_bedrock_api_key(secret_value: Optional[str]) -> tuple[str, str] | None:
    """Decode the BEDROCK_API_KEY secret into access/secret key components."""

    if not secret_value:
        return None

    try:
        decoded_bytes = base64.b64decode(secret_value.strip())
    except ValueError:
        decoded_bytes = secret_value.encode("utf-8", "ignore")

    filtered = "".join(chr(b) for b in decoded_bytes if 31 < b < 127)
    if ":" not in filtered:
        return None
    access_key, secret_key = filtered.split(":", 1)
    return access_key, secret_key


BEDROCK_RUNTIME_SERVICE = "bedrock-runtime"


def _runtime_client_kwargs(config: BedrockConfig, aws: AwsConfig) -> dict[str, Any]:
    """Pick credentials for the runtime client.

    A Bedrock API key wins over the shared `AWS_` keys; with neither, boto3
    falls back to its default credential chain.
    """

    kwargs: dict[str, Any] = {"region_name": config.region or aws.region}
    api_key_pair = None
    if config.api_key:
        api_key_pair = _decode_bedrock_api_key(config.api_key.get_secret_value())
    if api_key_pair:
        kwargs["aws_access_key_id"], kwargs["aws_secret_access_key"] = api_key_pair
    elif aws.access_key and aws.secret_key:
        kwargs["aws_access_key_id"] = aws.access_key
        kwargs["aws_secret_access_key"] = aws.secret_key
    return kwargs


class BedrockLlmClient:
    """Invoke Amazon Bedrock models with standard configuration."""

    def __init__(
        self,
        config: BedrockConfig | None = None,
        aws: AwsConfig | None = None,
    ) -> None:
        self._config = config or settings.bedrock
        self._model_id = self._config.model_id

        try:
            self._client = boto3.client(
                BEDROCK_RUNTIME_SERVICE,
                **_runtime_client_kwargs(self._config, aws or settings.aws),
            )
        except Exception as exc:  # pragma: no cover - configuration issue
            logger.warning("Could not initialise Bedrock client: %s", exc)
            self._client = None

    async def invoke(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
        top_p: float | None = None,
        model_id: str | None = None,
    ) -> str | None:
        """Run a Bedrock `converse` call and return the aggregate text output."""

        target_model_id = model_id or self._model_id
        if not self._client or not target_model_id:
            raise LlmInvocationError("Bedrock client is not configured")

        inference_cfg = {
            "maxTokens": max_tokens or self._config.max_tokens,
            "temperature": (
                temperature
                if temperature is not None
                else self._config.temperature
            ),
            "topP": top_p if top_p is not None else self._config.top_p,
        }

        def _call() -> str:
            response = self._client.converse(
                modelId=target_model_id,
                system=[{"text": system_prompt}],
                messages=[{"role": "user", "content": [{"text": user_prompt}]}],
                inferenceConfig=inference_cfg,
            )
            content_blocks = (
                response.get("output", {})
                .get("message", {})
                .get("content", [])
            )
            texts = [block.get("text", "") for block in content_blocks if block.get("text")]
            return "\n".join(texts).strip()

        try:
            result = await run_in_threadpool(_call)
        except Exception as exc:  # pragma: no cover - external dependency
            raise LlmInvocationError(str(exc)) from exc

        return result or None


@lru_cache(maxsize=1)
def get_llm_client() -> BedrockLlmClient:
    """Return a lazily-instantiated Bedrock client singleton."""
    return BedrockLlmClient(settings.bedrock, settings.aws)


__all__ = ["BedrockLlmClient", "LlmInvocationError", "get_llm_client"]
