"""Selection of the VCS provider for a workspace."""

from typing import Optional, Sequence

from loguru import logger

from worklog.errors import RepositoryNotFoundError, UnsupportedVCSTypeError
from worklog.providers.base import PathLike, VCSProvider
from worklog.providers.git_provider import GitProvider
from worklog.providers.svn_provider import SvnProvider

PROVIDER_TYPES = {
    "git": GitProvider,
    "svn": SvnProvider,
}

# Git is always probed before SVN
DETECTION_ORDER = ("git", "svn")


def detect(path: PathLike, providers: Optional[Sequence[VCSProvider]] = None) -> Optional[VCSProvider]:
    """Return the first provider whose repository marker exists under `path`."""
    if providers is None:
        providers = [PROVIDER_TYPES[vcs_type]() for vcs_type in DETECTION_ORDER]

    for provider in providers:
        if provider.is_repository(path):
            logger.debug(f"Detected {provider.vcs_type} repository at {path}")
            return provider
    return None


def get_by_type(vcs_type: str) -> VCSProvider:
    try:
        return PROVIDER_TYPES[vcs_type]()
    except KeyError:
        raise UnsupportedVCSTypeError(vcs_type) from None


def resolve_provider(path: PathLike, vcs_type: str = "auto") -> VCSProvider:
    """Pick the provider for `path` as configured by vcs_type (auto, git or svn)."""
    if vcs_type == "auto":
        provider = detect(path)
        if provider is None:
            raise RepositoryNotFoundError(f"No Git or SVN repository found at {path}")
        return provider

    provider = get_by_type(vcs_type)
    if not provider.is_repository(path):
        raise RepositoryNotFoundError(f"{path} is not a {vcs_type.upper()} repository")
    return provider
