"""Runtime configuration, read once per invocation."""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_MODELS = {
    "openai": "gpt-4o-mini",
    "anthropic": "claude-3-haiku-20240307",
    "deepseek": "deepseek-chat",
}

ENV_PREFIX = "WORKLOG_"

ENV_FIELDS = {
    "AI_PROVIDER": "ai_provider",
    "AI_API_KEY": "ai_api_key",
    "AI_MODEL": "ai_model",
    "OUTPUT_DIR": "output_directory",
    "AUTHOR": "author_filter",
    "VCS_TYPE": "vcs_type",
    "LANGUAGE": "language",
}


class PluginConfig(BaseModel):
    """Immutable settings threaded through every core operation."""

    model_config = ConfigDict(frozen=True)

    ai_provider: str = Field("openai", description="AI backend: openai, anthropic or deepseek")
    ai_api_key: str = Field("", description="API key for the AI backend; empty disables the AI path")
    ai_model: str = Field("", description="Model name; empty selects the provider default")
    output_directory: str = Field("./reports", description="Where reports are written")
    author_filter: str = Field("", description="Default case-insensitive author substring")
    vcs_type: str = Field("auto", description="auto, git or svn")
    language: str = Field("zh-CN", description="Report language: zh-CN or en")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "PluginConfig":
        """Build a config from WORKLOG_* environment variables."""
        environ = os.environ if environ is None else environ
        values = {}
        for suffix, field_name in ENV_FIELDS.items():
            value = environ.get(ENV_PREFIX + suffix)
            if value is not None:
                values[field_name] = value.strip()
        return cls(**values)

    @property
    def model_name(self) -> str:
        return self.ai_model or DEFAULT_MODELS.get(self.ai_provider, "")

    @property
    def has_api_key(self) -> bool:
        return bool(self.ai_api_key)
