"""Source host client used by the finish workflow

This module defines the SourceHostClient interface, the set of remote
operations the workflow needs, and GitHubClient, its implementation on
top of the GitHub REST API through the gh CLI.

Design:
- Repositories are addressed by numeric id once resolved
  (/repositories/{id}/...)
- Lookups that may legitimately find nothing return None on HTTP 404
- Every other failure surfaces as GitHubAPIError; no retries here
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import quote

from gitflowfinish.domain.exceptions import GitHubAPIError
from gitflowfinish.domain.github_models import (
    GitHubBranch,
    GitHubCommit,
    GitHubMergeCommit,
    GitHubPullRequest,
    GitHubReference,
    GitHubRepository,
    GitHubTag,
)
from gitflowfinish.domain.models import TagSpec
from gitflowfinish.infrastructure.github.operations import gh_api_call, is_not_found

logger = logging.getLogger(__name__)


class SourceHostClient(ABC):
    """Abstract interface for the remote source-control host

    Implementations raise GitHubAPIError (or a subclass) for any host
    failure: authentication, not found, rate limiting or conflicts.
    """

    @abstractmethod
    def get_repository(self, owner: str, name: str) -> GitHubRepository:
        """Resolve a repository by owner and name"""
        pass

    @abstractmethod
    def get_pull_request(self, repo_id: int, number: int) -> GitHubPullRequest:
        """Fetch a pull request snapshot"""
        pass

    @abstractmethod
    def get_branch(self, repo_id: int, name: str) -> Optional[GitHubBranch]:
        """Fetch a branch, or None if it does not exist"""
        pass

    @abstractmethod
    def get_commit(self, repo_id: int, sha: str) -> GitHubCommit:
        """Fetch a commit with its author identity"""
        pass

    @abstractmethod
    def get_reference(self, repo_id: int, ref: str) -> Optional[GitHubReference]:
        """Fetch a reference such as ``tags/v1.0.0``, or None if absent"""
        pass

    @abstractmethod
    def create_tag(self, repo_id: int, tag_spec: TagSpec) -> GitHubTag:
        """Create an annotated tag object (without a reference)"""
        pass

    @abstractmethod
    def create_reference(self, repo_id: int, ref: str, sha: str) -> GitHubReference:
        """Create a fully qualified reference (``refs/...``) pointing at sha"""
        pass

    @abstractmethod
    def create_merge(self, repo_id: int, base: str, head: str) -> GitHubMergeCommit:
        """Merge head into base"""
        pass

    @abstractmethod
    def delete_reference(self, repo_id: int, ref: str) -> None:
        """Delete a reference such as ``heads/release/v1.0.0``"""
        pass


def format_git_date(timestamp: datetime) -> str:
    """Render a timestamp in the ISO 8601 form the git data API expects"""
    if timestamp.tzinfo is None:
        timestamp = timestamp.astimezone()
    return timestamp.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class GitHubClient(SourceHostClient):
    """GitHub REST implementation of SourceHostClient

    Example:
        >>> client = GitHubClient(token="ghp_...")
        >>> repo = client.get_repository("octocat", "Hello-World")
        >>> pr = client.get_pull_request(repo.id, 42)
    """

    def __init__(self, token: Optional[str] = None):
        """Initialize the client

        Args:
            token: Authentication token; when omitted gh falls back to
                its own configured credentials
        """
        self.token = token

    def _call(self, endpoint: str, method: str = "GET", body: Optional[dict] = None) -> dict:
        logger.debug(f"{method} {endpoint}")
        return gh_api_call(endpoint, method=method, body=body, token=self.token)

    @staticmethod
    def _repo_path(repo_id: int) -> str:
        return f"/repositories/{repo_id}"

    def get_repository(self, owner: str, name: str) -> GitHubRepository:
        return GitHubRepository.from_dict(self._call(f"/repos/{owner}/{name}"))

    def get_pull_request(self, repo_id: int, number: int) -> GitHubPullRequest:
        return GitHubPullRequest.from_dict(self._call(f"{self._repo_path(repo_id)}/pulls/{number}"))

    def get_branch(self, repo_id: int, name: str) -> Optional[GitHubBranch]:
        try:
            data = self._call(f"{self._repo_path(repo_id)}/branches/{quote(name)}")
        except GitHubAPIError as e:
            if is_not_found(e):
                return None
            raise
        return GitHubBranch.from_dict(data)

    def get_commit(self, repo_id: int, sha: str) -> GitHubCommit:
        return GitHubCommit.from_dict(self._call(f"{self._repo_path(repo_id)}/commits/{sha}"))

    def get_reference(self, repo_id: int, ref: str) -> Optional[GitHubReference]:
        try:
            data = self._call(f"{self._repo_path(repo_id)}/git/ref/{quote(ref)}")
        except GitHubAPIError as e:
            if is_not_found(e):
                return None
            raise
        return GitHubReference.from_dict(data)

    def create_tag(self, repo_id: int, tag_spec: TagSpec) -> GitHubTag:
        body = {
            "tag": tag_spec.name,
            "message": tag_spec.message,
            "object": tag_spec.target_sha,
            "type": "commit",
            "tagger": {
                "name": tag_spec.tagger.name,
                "email": tag_spec.tagger.email,
                "date": format_git_date(tag_spec.timestamp),
            },
        }
        data = self._call(f"{self._repo_path(repo_id)}/git/tags", method="POST", body=body)
        return GitHubTag.from_dict(data)

    def create_reference(self, repo_id: int, ref: str, sha: str) -> GitHubReference:
        data = self._call(
            f"{self._repo_path(repo_id)}/git/refs",
            method="POST",
            body={"ref": ref, "sha": sha},
        )
        return GitHubReference.from_dict(data)

    def create_merge(self, repo_id: int, base: str, head: str) -> GitHubMergeCommit:
        # 204 (empty body) means base already contains head
        data = self._call(
            f"{self._repo_path(repo_id)}/merges",
            method="POST",
            body={"base": base, "head": head},
        )
        return GitHubMergeCommit.from_dict(data)

    def delete_reference(self, repo_id: int, ref: str) -> None:
        self._call(f"{self._repo_path(repo_id)}/git/refs/{quote(ref)}", method="DELETE")
