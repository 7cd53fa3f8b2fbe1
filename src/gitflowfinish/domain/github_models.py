"""GitHub domain models for Gitflow Finish

These models represent GitHub API objects with type-safe properties.
They encapsulate JSON parsing so the workflow service works with
well-formed domain objects rather than raw dictionaries.

Following the principle: "Parse once into well-formed models"
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class GitHubRepository:
    """Domain model for a GitHub repository

    Only the fields the workflow needs are kept; the numeric id is used
    to address every subsequent API call.
    """

    id: int
    owner: str
    name: str
    full_name: str
    default_branch: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> 'GitHubRepository':
        """Parse from GitHub API response

        Args:
            data: Dictionary from GET /repos/{owner}/{repo}

        Returns:
            GitHubRepository instance

        Example:
            >>> repo = GitHubRepository.from_dict({
            ...     "id": 1296269,
            ...     "name": "Hello-World",
            ...     "full_name": "octocat/Hello-World",
            ...     "owner": {"login": "octocat"},
            ... })
        """
        return cls(
            id=int(data["id"]),
            owner=data.get("owner", {}).get("login", ""),
            name=data["name"],
            full_name=data.get("full_name", ""),
            default_branch=data.get("default_branch"),
        )


@dataclass(frozen=True)
class GitHubPullRequest:
    """Domain model for the pull request being finished

    Immutable snapshot; fetched once per run and never refreshed.
    """

    number: int
    head_ref: str  # Branch being finished
    base_ref: str  # Branch the PR was merged into
    merged: bool
    merge_commit_sha: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> 'GitHubPullRequest':
        """Parse from GitHub API response

        Args:
            data: Dictionary from GET /repositories/{id}/pulls/{number}

        Returns:
            GitHubPullRequest instance

        Example:
            >>> pr = GitHubPullRequest.from_dict({
            ...     "number": 42,
            ...     "merged": True,
            ...     "merge_commit_sha": "abc123",
            ...     "head": {"ref": "release/v1.4.0"},
            ...     "base": {"ref": "main"},
            ... })
        """
        return cls(
            number=int(data["number"]),
            head_ref=data["head"]["ref"],
            base_ref=data["base"]["ref"],
            merged=bool(data.get("merged", False)),
            merge_commit_sha=data.get("merge_commit_sha"),
        )


@dataclass(frozen=True)
class CommitAuthor:
    """Author identity of a commit, reused as the tagger of a tag"""

    name: str
    email: str

    @classmethod
    def from_dict(cls, data: dict) -> 'CommitAuthor':
        return cls(name=data.get("name", ""), email=data.get("email", ""))


@dataclass(frozen=True)
class GitHubCommit:
    """Domain model for a commit

    Parses the ``commit.author`` block (git identity), not the
    top-level ``author`` block (GitHub account).
    """

    sha: str
    message: str
    author: CommitAuthor

    @classmethod
    def from_dict(cls, data: dict) -> 'GitHubCommit':
        """Parse from GitHub API response

        Args:
            data: Dictionary from GET /repositories/{id}/commits/{sha}

        Returns:
            GitHubCommit instance
        """
        commit = data.get("commit", {})
        return cls(
            sha=data["sha"],
            message=commit.get("message", ""),
            author=CommitAuthor.from_dict(commit.get("author") or {}),
        )


@dataclass(frozen=True)
class GitHubBranch:
    """Domain model for a branch and the commit it points at"""

    name: str
    sha: str

    @classmethod
    def from_dict(cls, data: dict) -> 'GitHubBranch':
        return cls(name=data["name"], sha=data.get("commit", {}).get("sha", ""))


@dataclass(frozen=True)
class GitHubTag:
    """Domain model for an annotated tag object

    ``sha`` is the tag object's own SHA; ``object_sha`` is the commit it
    targets. Tag references must point at ``sha``.
    """

    sha: str
    tag: str
    object_sha: str

    @classmethod
    def from_dict(cls, data: dict) -> 'GitHubTag':
        return cls(
            sha=data["sha"],
            tag=data["tag"],
            object_sha=data.get("object", {}).get("sha", ""),
        )


@dataclass(frozen=True)
class GitHubReference:
    """Domain model for a git reference (e.g. refs/tags/v1.0.0)"""

    ref: str
    sha: str

    @classmethod
    def from_dict(cls, data: dict) -> 'GitHubReference':
        return cls(ref=data["ref"], sha=data.get("object", {}).get("sha", ""))


@dataclass(frozen=True)
class GitHubMergeCommit:
    """Result of a branch merge

    sha is None when GitHub answers 204 (base already contains head).
    """

    sha: Optional[str]

    @classmethod
    def from_dict(cls, data: dict) -> 'GitHubMergeCommit':
        return cls(sha=data.get("sha"))
