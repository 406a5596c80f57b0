"""大模型客户端测试."""

from types import SimpleNamespace
from unittest.mock import patch

import pytest
from openai import OpenAIError

from pdf_explainer.config.settings import LLMConfig
from pdf_explainer.service.llm_client import LLMClient
from pdf_explainer.utils.errors import MissingCredentialsError, ProviderError


@pytest.fixture
def config():
    """测试用大模型配置."""
    return LLMConfig(
        model_name="gpt-test",
        api_key="sk-test",
        api_base_url=None,
        max_tokens=100,
        temperature=0.3,
        timeout=10,
    )


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """避免本机环境变量影响测试."""
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_API_BASE", raising=False)


def make_response(content):
    message = SimpleNamespace(content=content)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def test_missing_api_key():
    """测试未配置API密钥."""
    with pytest.raises(MissingCredentialsError) as exc_info:
        LLMClient(LLMConfig(api_key=None))

    assert "OPENAI_API_KEY" in exc_info.value.message


@patch("pdf_explainer.service.llm_client.OpenAI")
def test_init_with_base_url(mock_openai, config):
    """测试配置了API基础URL."""
    config.api_base_url = "http://localhost:11434/v1"
    LLMClient(config)

    mock_openai.assert_called_once_with(api_key="sk-test", base_url="http://localhost:11434/v1")


@patch("pdf_explainer.service.llm_client.OpenAI")
def test_chat_completion(mock_openai, config):
    """测试聊天请求."""
    mock_create = mock_openai.return_value.chat.completions.create
    mock_create.return_value = make_response("  An explanation.  ")

    client = LLMClient(config)
    result = client.chat_completion(user_message="explain this", system_message="system")

    assert result == "An explanation."
    kwargs = mock_create.call_args[1]
    assert kwargs["model"] == "gpt-test"
    assert kwargs["messages"] == [
        {"role": "system", "content": "system"},
        {"role": "user", "content": "explain this"},
    ]
    assert kwargs["max_tokens"] == 100
    assert kwargs["temperature"] == 0.3
    assert kwargs["timeout"] == 10


@patch("pdf_explainer.service.llm_client.OpenAI")
def test_chat_completion_zero_temperature(mock_openai, config):
    """测试显式传入温度0时不被默认值覆盖."""
    mock_create = mock_openai.return_value.chat.completions.create
    mock_create.return_value = make_response("ok")

    LLMClient(config).chat_completion(user_message="hi", temperature=0.0)

    assert mock_create.call_args[1]["temperature"] == 0.0


@patch("pdf_explainer.service.llm_client.OpenAI")
def test_chat_completion_no_choices(mock_openai, config):
    """测试大模型未返回有效选项."""
    mock_openai.return_value.chat.completions.create.return_value = SimpleNamespace(choices=[])

    assert LLMClient(config).chat_completion(user_message="hi") == ""


@patch("pdf_explainer.service.llm_client.OpenAI")
def test_chat_completion_none_content(mock_openai, config):
    """测试返回内容为空."""
    mock_openai.return_value.chat.completions.create.return_value = make_response(None)

    assert LLMClient(config).chat_completion(user_message="hi") == ""


@patch("pdf_explainer.service.llm_client.OpenAI")
def test_chat_completion_provider_error(mock_openai, config):
    """测试大模型请求失败."""
    mock_openai.return_value.chat.completions.create.side_effect = OpenAIError("rate limited")

    client = LLMClient(config)
    with pytest.raises(ProviderError) as exc_info:
        client.chat_completion(user_message="hi")

    assert "rate limited" in exc_info.value.message
    assert isinstance(exc_info.value.__cause__, OpenAIError)


def test_env_api_key_takes_precedence(monkeypatch, config):
    """测试环境变量中的API密钥优先."""
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    with patch("pdf_explainer.service.llm_client.OpenAI") as mock_openai:
        client = LLMClient(config)

    assert client.api_key == "sk-env"
    mock_openai.assert_called_once_with(api_key="sk-env")

