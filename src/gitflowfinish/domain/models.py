"""Domain models for the finish workflow

Configuration, the tag to create, per-stage results and the final
outcome of a run.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Generic, Optional, TypeVar, Union

from gitflowfinish.domain.constants import (
    DEFAULT_DEV_BRANCH,
    DEFAULT_TAG_PREFIX,
    TAG_MESSAGE_TEMPLATE,
)
from gitflowfinish.domain.github_models import CommitAuthor
from gitflowfinish.domain.version import BranchGrammar, SemanticVersion

T = TypeVar("T")


class WorkflowMode(Enum):
    """Which gitflow branch kind is being finished.

    RELEASE allows a configurable tag prefix; FEATURE always tags with "v".
    Both modes accept the optional-"v" branch grammar by default
    (``release/1.2.3`` and ``release/v1.2.3``); an explicit allow-v-prefix
    setting overrides it.
    """

    RELEASE = "release"
    FEATURE = "feature"

    @property
    def default_grammar(self) -> BranchGrammar:
        """Branch grammar used when no allow-v-prefix setting is given"""
        return BranchGrammar.OPTIONAL_V


@dataclass(frozen=True)
class WorkflowConfig:
    """Configuration for a single finish run"""

    pull_request_number: int
    token: str
    repository_full_name: str
    merge_into_development: bool = False
    development_branch_name: str = DEFAULT_DEV_BRANCH
    delete_source_branch: bool = True
    tag_prefix: str = DEFAULT_TAG_PREFIX
    mode: WorkflowMode = WorkflowMode.RELEASE
    grammar: BranchGrammar = BranchGrammar.OPTIONAL_V


@dataclass(frozen=True)
class TagSpec:
    """Everything needed to create an annotated tag"""

    name: str
    message: str
    target_sha: str
    tagger: CommitAuthor
    timestamp: datetime

    @classmethod
    def for_version(
        cls,
        version: SemanticVersion,
        prefix: str,
        target_sha: str,
        tagger: CommitAuthor,
        timestamp: datetime,
    ) -> 'TagSpec':
        """Build the tag for a finished version

        Args:
            version: Version parsed from the branch name
            prefix: Text prepended to the version (may be empty)
            target_sha: Merge commit the tag points at
            tagger: Identity copied from the merge commit author
            timestamp: Tag creation time

        Returns:
            TagSpec named prefix + version.full
        """
        return cls(
            name=f"{prefix}{version.full}",
            message=TAG_MESSAGE_TEMPLATE.format(version=version.full),
            target_sha=target_sha,
            tagger=tagger,
            timestamp=timestamp,
        )

    @property
    def reference(self) -> str:
        """Fully qualified tag reference"""
        return f"refs/tags/{self.name}"


class OutcomeStatus(Enum):
    """Terminal state of a finish run"""

    COMPLETED = "completed"
    SKIPPED_NOT_MERGED = "skipped-not-merged"
    SKIPPED_NAME_MISMATCH = "skipped-name-mismatch"
    INVALID_CONFIGURATION = "invalid-configuration"
    FAILED = "failed"


_EXIT_CODES = {
    OutcomeStatus.COMPLETED: 0,
    OutcomeStatus.SKIPPED_NOT_MERGED: 0,
    OutcomeStatus.SKIPPED_NAME_MISMATCH: 0,
    OutcomeStatus.INVALID_CONFIGURATION: 1,
    OutcomeStatus.FAILED: -1,
}


@dataclass(frozen=True)
class WorkflowOutcome:
    """Result of one finish run; built once, at the end of the run"""

    status: OutcomeStatus
    message: str = ""
    cause: Optional[BaseException] = None
    tag_name: Optional[str] = None
    merge_sha: Optional[str] = None

    @property
    def exit_code(self) -> int:
        return _EXIT_CODES[self.status]

    @property
    def is_skipped(self) -> bool:
        return self.status in (OutcomeStatus.SKIPPED_NOT_MERGED, OutcomeStatus.SKIPPED_NAME_MISMATCH)

    @classmethod
    def completed(cls, tag_name: str, merge_sha: Optional[str] = None) -> 'WorkflowOutcome':
        return cls(
            status=OutcomeStatus.COMPLETED,
            message=f"Created tag {tag_name}",
            tag_name=tag_name,
            merge_sha=merge_sha,
        )

    @classmethod
    def skipped_not_merged(cls, pr_number: int) -> 'WorkflowOutcome':
        return cls(
            status=OutcomeStatus.SKIPPED_NOT_MERGED,
            message=f"Pull request {pr_number} has not been merged. No actions will be taken.",
        )

    @classmethod
    def skipped_name_mismatch(cls, branch: str) -> 'WorkflowOutcome':
        return cls(
            status=OutcomeStatus.SKIPPED_NAME_MISMATCH,
            message=f"Head branch {branch} does not match the required gitflow and semver syntax. "
                    f"No actions will be taken.",
        )

    @classmethod
    def invalid_configuration(cls, cause: BaseException) -> 'WorkflowOutcome':
        return cls(status=OutcomeStatus.INVALID_CONFIGURATION, message=str(cause), cause=cause)

    @classmethod
    def failed(cls, cause: BaseException, tag_name: Optional[str] = None) -> 'WorkflowOutcome':
        return cls(
            status=OutcomeStatus.FAILED,
            message=f"{type(cause).__name__}: {cause}",
            cause=cause,
            tag_name=tag_name,
        )


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Stage succeeded; the pipeline continues with value"""

    value: T


@dataclass(frozen=True)
class Skip:
    """Stage decided the run should stop without error"""

    outcome: WorkflowOutcome


@dataclass(frozen=True)
class Fault:
    """Stage failed; the run stops with cause"""

    cause: BaseException


StepResult = Union[Ok[T], Skip, Fault]
