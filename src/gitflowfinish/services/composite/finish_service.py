"""Composite service that finishes a gitflow branch for a merged pull request.

Runs the finish pipeline against a SourceHostClient:

    validate repository name -> fetch repository -> fetch pull request
    -> check merged -> parse version from head branch
    -> fetch merge commit -> create annotated tag + tag reference
    -> (optional) merge head into the development branch
    -> (optional) delete the head branch

Host calls are made strictly one after another. The run stops early,
without error, when the pull request is not merged or its head branch
does not carry a version. Nothing is rolled back: a failure after the tag
reference exists leaves the tag in place.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional, Tuple

from gitflowfinish.domain.config import parse_repository_name
from gitflowfinish.domain.constants import ACTIONS_GROUP, SETUP_GROUP
from gitflowfinish.domain.exceptions import (
    ConfigurationError,
    GitHubAPIError,
    TagAlreadyExistsError,
)
from gitflowfinish.domain.github_models import GitHubPullRequest, GitHubRepository
from gitflowfinish.domain.models import (
    Fault,
    Ok,
    Skip,
    StepResult,
    TagSpec,
    WorkflowConfig,
    WorkflowOutcome,
)
from gitflowfinish.domain.version import SemanticVersion, parse_branch_version
from gitflowfinish.infrastructure.github.client import SourceHostClient
from gitflowfinish.infrastructure.github.workflow_commands import end_open_groups, log_group

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class FinishWorkflowService:
    """Orchestrates finishing one gitflow branch.

    The service is the single place where failures become a FAILED
    outcome; every exception raised by a stage is caught in run().

    Example:
        >>> service = FinishWorkflowService(GitHubClient(token))
        >>> outcome = service.run(config)
        >>> sys.exit(outcome.exit_code)
    """

    def __init__(self, client: SourceHostClient, now: Optional[Callable[[], datetime]] = None):
        """Initialize the service

        Args:
            client: Host client used for every remote operation
            now: Clock used to timestamp the tag (defaults to current UTC time)
        """
        self.client = client
        self.now = now or _utc_now
        self._created_tag: Optional[str] = None

    def run(self, config: WorkflowConfig) -> WorkflowOutcome:
        """Run the finish pipeline once

        Args:
            config: Configuration for this run

        Returns:
            WorkflowOutcome describing how the run ended; its exit_code is
            the process exit status
        """
        self._created_tag = None
        try:
            return self._finish(config)
        except Exception as e:
            return self._fail(e)
        finally:
            end_open_groups()

    def _finish(self, config: WorkflowConfig) -> WorkflowOutcome:
        with log_group(SETUP_GROUP):
            names = self._validate_repository_name(config)
            if isinstance(names, Fault):
                logger.error(str(names.cause))
                return WorkflowOutcome.invalid_configuration(names.cause)

            repo, pr = self._resolve_pull_request(config, *names.value)

        merged = self._check_merged(pr)
        if isinstance(merged, Skip):
            logger.warning(merged.outcome.message)
            return merged.outcome

        version = self._parse_version(pr, config)
        if isinstance(version, Skip):
            logger.warning(version.outcome.message)
            return version.outcome

        with log_group(ACTIONS_GROUP):
            return self._apply_actions(config, repo, pr, version.value)

    # -------- Setup stages --------

    def _validate_repository_name(self, config: WorkflowConfig) -> StepResult[Tuple[str, str]]:
        try:
            return Ok(parse_repository_name(config.repository_full_name))
        except ConfigurationError as e:
            return Fault(e)

    def _resolve_pull_request(
        self,
        config: WorkflowConfig,
        owner: str,
        name: str
    ) -> Tuple[GitHubRepository, GitHubPullRequest]:
        logger.info(f"Fetching repository information for {config.repository_full_name}")
        repo = self.client.get_repository(owner, name)

        logger.info(f"Fetching pull request #{config.pull_request_number}")
        pr = self.client.get_pull_request(repo.id, config.pull_request_number)
        logger.info(f"Pull request #{pr.number} merges {pr.head_ref} into {pr.base_ref}")
        return repo, pr

    def _check_merged(self, pr: GitHubPullRequest) -> StepResult[GitHubPullRequest]:
        if not pr.merged:
            return Skip(WorkflowOutcome.skipped_not_merged(pr.number))
        return Ok(pr)

    def _parse_version(self, pr: GitHubPullRequest, config: WorkflowConfig) -> StepResult[SemanticVersion]:
        version = parse_branch_version(pr.head_ref, config.grammar)
        if version is None:
            return Skip(WorkflowOutcome.skipped_name_mismatch(pr.head_ref))
        return Ok(version)

    # -------- Gitflow actions --------

    def _apply_actions(
        self,
        config: WorkflowConfig,
        repo: GitHubRepository,
        pr: GitHubPullRequest,
        version: SemanticVersion
    ) -> WorkflowOutcome:
        logger.info(f"Valid gitflow and semver branch name found; tag will be created with {version.full}")

        head = pr.head_ref
        logger.info(f"Getting branch information for {head}")
        branch = self.client.get_branch(repo.id, head)
        if branch is None:
            logger.info(f"Branch {head} no longer exists")

        if not pr.merge_commit_sha:
            raise GitHubAPIError(f"Pull request #{pr.number} is merged but has no merge commit")

        commit = self.client.get_commit(repo.id, pr.merge_commit_sha)
        tag_spec = TagSpec.for_version(
            version,
            prefix=config.tag_prefix,
            target_sha=pr.merge_commit_sha,
            tagger=commit.author,
            timestamp=self.now(),
        )

        absent = self._ensure_tag_absent(repo, tag_spec)
        if isinstance(absent, Fault):
            return self._fail(absent.cause)

        self._create_tag(repo, pr, tag_spec)

        merge_sha = None
        if config.merge_into_development:
            merge_sha = self._merge_into_development(repo, head, config.development_branch_name)

        if config.delete_source_branch:
            if branch is None:
                logger.info(f"Skipping deletion of {head}; it has already been deleted")
            else:
                self._delete_branch(repo, head)

        return WorkflowOutcome.completed(tag_spec.name, merge_sha=merge_sha)

    def _ensure_tag_absent(self, repo: GitHubRepository, tag_spec: TagSpec) -> StepResult[None]:
        existing = self.client.get_reference(repo.id, f"tags/{tag_spec.name}")
        if existing is not None:
            return Fault(TagAlreadyExistsError(tag_spec.name))
        return Ok(None)

    def _create_tag(self, repo: GitHubRepository, pr: GitHubPullRequest, tag_spec: TagSpec) -> None:
        logger.info(
            f"Creating new tag {tag_spec.name} on branch {pr.base_ref} at commit {tag_spec.target_sha}"
        )
        tag = self.client.create_tag(repo.id, tag_spec)
        # The reference must name the tag object, not the commit, to keep the tag annotated
        self.client.create_reference(repo.id, f"refs/tags/{tag.tag}", tag.sha)
        self._created_tag = tag.tag
        logger.info("Tag successfully created")

    def _merge_into_development(self, repo: GitHubRepository, head: str, dev_branch: str) -> Optional[str]:
        logger.info(f"Merging {head} into {dev_branch}")
        merge = self.client.create_merge(repo.id, base=dev_branch, head=head)
        if merge.sha is None:
            logger.info(f"{dev_branch} already contains {head}; nothing to merge")
        else:
            logger.info(f"Successfully merged {head} into {dev_branch} with commit {merge.sha}")
        return merge.sha

    def _delete_branch(self, repo: GitHubRepository, head: str) -> None:
        logger.info(f"Deleting branch {head}")
        self.client.delete_reference(repo.id, f"heads/{head}")
        logger.info(f"Successfully deleted {head}")

    def _fail(self, cause: BaseException) -> WorkflowOutcome:
        logger.error(f"{type(cause).__name__}: {cause}")
        if self._created_tag:
            logger.warning(f"Tag {self._created_tag} was created and has been left in place")
        return WorkflowOutcome.failed(cause, tag_name=self._created_tag)
