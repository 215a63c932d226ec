"""Exceptions raised by the worklog core."""

from typing import Optional


class WorklogError(Exception):
    """Base class for all worklog failures."""

    pass


class ConfigurationError(WorklogError):
    """A setting is missing or holds an unsupported value."""

    pass


class MissingAPIKeyError(ConfigurationError):
    """No AI API key is configured."""

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"ai_api_key is not configured (provider: {provider})")


class UnsupportedProviderError(ConfigurationError):
    """The configured AI provider is not one of the supported backends."""

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"Unsupported ai_provider: {provider}")


class UnsupportedVCSTypeError(ConfigurationError):
    """The configured vcs_type is neither git nor svn."""

    def __init__(self, vcs_type: str):
        self.vcs_type = vcs_type
        super().__init__(f"Unsupported vcs_type: {vcs_type}")


class RepositoryNotFoundError(WorklogError):
    """The workspace is not a repository of the selected VCS."""

    pass


class VCSQueryError(WorklogError):
    """The VCS backend failed to return the commit log or a diff."""

    def __init__(self, backend: str, cause: object):
        self.backend = backend
        self.cause = cause
        super().__init__(f"Failed to query {backend} history: {cause}")


class AIRequestError(WorklogError):
    """The AI backend answered with a non-success response."""

    def __init__(self, provider: str, detail: str, status_code: Optional[int] = None):
        self.provider = provider
        self.detail = detail
        self.status_code = status_code
        status = f" ({status_code})" if status_code is not None else ""
        super().__init__(f"{provider} API request failed{status}: {detail}")


class NothingToReportError(WorklogError):
    """There is nothing to summarize. Callers should warn, not fail."""

    pass


class NoCommitsFoundError(NothingToReportError):
    """No commits matched the query."""

    pass


class NoChangesError(NothingToReportError):
    """The diff to describe is empty."""

    pass
