"""Bedrock client construction and invocation with boto3 stubbed out."""

from __future__ import annotations

import asyncio
import base64

import pytest

from app.config.settings import AwsConfig, BedrockConfig
from app.services import llm_client
from app.services.llm_client import BedrockLlmClient, LlmInvocationError


class FakeRuntime:
    def __init__(self, response=None, error=None):
        self.response = response or {
            "output": {"message": {"content": [{"text": " 4 "}]}},
        }
        self.error = error
        self.requests = []

    def converse(self, **kwargs):
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def boto3_calls(monkeypatch):
    calls = []

    def fake_client(service_name, **kwargs):
        calls.append((service_name, kwargs))
        return FakeRuntime()

    monkeypatch.setattr(llm_client.boto3, "client", fake_client)
    return calls


def test_bedrock_api_key_takes_precedence(boto3_calls):
    api_key = base64.b64encode(b"AKIAKEY:bedrock-secret").decode()
    config = BedrockConfig(BEDROCK_REGION="eu-west-1", BEDROCK_API_KEY=api_key)
    aws = AwsConfig(access_key="shared", secret_key="shared-secret")

    BedrockLlmClient(config, aws)

    assert boto3_calls == [
        (
            "bedrock-runtime",
            {
                "region_name": "eu-west-1",
                "aws_access_key_id": "AKIAKEY",
                "aws_secret_access_key": "bedrock-secret",
            },
        )
    ]


def test_shared_aws_credentials_are_used_without_api_key(boto3_calls):
    aws = AwsConfig(access_key="shared", secret_key="shared-secret")

    BedrockLlmClient(BedrockConfig(BEDROCK_REGION="us-west-2"), aws)

    _, kwargs = boto3_calls[0]
    assert kwargs["aws_access_key_id"] == "shared"
    assert kwargs["aws_secret_access_key"] == "shared-secret"


def test_default_credential_chain_without_keys(boto3_calls):
    BedrockLlmClient(BedrockConfig(), AwsConfig(access_key=None, secret_key=None))

    _, kwargs = boto3_calls[0]
    assert "aws_access_key_id" not in kwargs


def test_invoke_sends_completion_settings(boto3_calls):
    client = BedrockLlmClient(BedrockConfig(), AwsConfig(access_key=None, secret_key=None))
    runtime = FakeRuntime()
    client._client = runtime

    reply = asyncio.run(client.invoke(system_prompt="system", user_prompt="user"))

    assert reply == "4"
    request = runtime.requests[0]
    assert request["system"] == [{"text": "system"}]
    assert request["messages"][0]["content"] == [{"text": "user"}]
    assert request["inferenceConfig"]["maxTokens"] == 100
    assert request["inferenceConfig"]["temperature"] == 0.3


def test_invoke_wraps_runtime_errors(boto3_calls):
    client = BedrockLlmClient(BedrockConfig(), AwsConfig(access_key=None, secret_key=None))
    client._client = FakeRuntime(error=RuntimeError("throttled"))

    with pytest.raises(LlmInvocationError):
        asyncio.run(client.invoke(system_prompt="system", user_prompt="user"))


def test_invoke_without_client_fails():
    client = BedrockLlmClient.__new__(BedrockLlmClient)
    client._config = BedrockConfig()
    client._model_id = "model"
    client._client = None

    with pytest.raises(LlmInvocationError):
        asyncio.run(client.invoke(system_prompt="system", user_prompt="user"))
