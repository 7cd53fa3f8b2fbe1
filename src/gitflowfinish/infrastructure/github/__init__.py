"""GitHub infrastructure for Gitflow Finish"""

from .client import GitHubClient, SourceHostClient

__all__ = ["GitHubClient", "SourceHostClient"]
