"""Dispatch of prompts to the supported AI backends."""

from dataclasses import dataclass
from typing import Any, Callable, Dict

import openai
import requests
from langchain_openai import ChatOpenAI
from loguru import logger

from worklog.errors import AIRequestError, MissingAPIKeyError, UnsupportedProviderError
from worklog.models.config import DEFAULT_MODELS, PluginConfig

TEMPERATURE = 0.7
MAX_TOKENS = 2000
FALLBACK_TEXT = "Generation failed"

OPENAI_BASE_URL = "https://api.openai.com/v1"
DEEPSEEK_BASE_URL = "https://api.deepseek.com"
ANTHROPIC_MESSAGES_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"


def _message_text(content: Any) -> str:
    """Text of a chat model reply, whose content may be a string or a list of blocks."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(block.get("text", ""))
        return "".join(parts)
    return ""


def _or_fallback(text: Any) -> str:
    """The reply itself, or FALLBACK_TEXT when it holds no visible text."""
    if isinstance(text, str) and text.strip():
        return text
    return FALLBACK_TEXT


def _complete_openai_compatible(provider: str, base_url: str, api_key: str, model: str, prompt: str) -> str:
    llm = ChatOpenAI(
        api_key=api_key,
        base_url=base_url,
        model=model or DEFAULT_MODELS[provider],
        temperature=TEMPERATURE,
        max_tokens=MAX_TOKENS,
        max_retries=0,
    )
    try:
        response = llm.invoke(prompt)
    except openai.APIStatusError as e:
        raise AIRequestError(provider, e.response.text, e.status_code) from e
    return _or_fallback(_message_text(response.content))


def complete_openai(api_key: str, model: str, prompt: str) -> str:
    return _complete_openai_compatible("openai", OPENAI_BASE_URL, api_key, model, prompt)


def complete_deepseek(api_key: str, model: str, prompt: str) -> str:
    return _complete_openai_compatible("deepseek", DEEPSEEK_BASE_URL, api_key, model, prompt)


def complete_anthropic(api_key: str, model: str, prompt: str) -> str:
    response = requests.post(
        ANTHROPIC_MESSAGES_URL,
        headers={
            "Content-Type": "application/json",
            "x-api-key": api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        },
        json={
            "model": model or DEFAULT_MODELS["anthropic"],
            "max_tokens": MAX_TOKENS,
            "messages": [{"role": "user", "content": prompt}],
        },
    )
    if not response.ok:
        raise AIRequestError("anthropic", response.text, response.status_code)

    try:
        data = response.json()
        text = data["content"][0]["text"]
    except (ValueError, KeyError, IndexError, TypeError):
        logger.warning("anthropic response carried no text content")
        return FALLBACK_TEXT
    return _or_fallback(text)


PROVIDERS: Dict[str, Callable[[str, str, str], str]] = {
    "openai": complete_openai,
    "anthropic": complete_anthropic,
    "deepseek": complete_deepseek,
}


def complete(provider: str, api_key: str, model: str, prompt: str) -> str:
    """Send `prompt` to the selected backend and return the generated text.

    The key and provider are validated before any request is made.
    """
    if not api_key:
        raise MissingAPIKeyError(provider)
    if provider not in PROVIDERS:
        raise UnsupportedProviderError(provider)

    logger.debug(f"Sending {len(prompt)} character prompt to {provider} ({model or DEFAULT_MODELS[provider]})")
    return PROVIDERS[provider](api_key, model, prompt)


@dataclass(frozen=True)
class AIClient:
    """A provider, key and model bundled for repeated completions."""

    provider: str
    api_key: str
    model: str = ""

    @classmethod
    def from_config(cls, config: PluginConfig) -> "AIClient":
        return cls(provider=config.ai_provider, api_key=config.ai_api_key, model=config.ai_model)

    def complete(self, prompt: str) -> str:
        return complete(self.provider, self.api_key, self.model, prompt)
