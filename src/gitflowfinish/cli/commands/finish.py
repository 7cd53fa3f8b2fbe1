"""CLI command that finishes a gitflow branch for a merged pull request.

Assembles the WorkflowConfig from command-line flags, the optional YAML
configuration file and the GitHub Actions environment, runs the finish
workflow and publishes its outcome as step outputs.
"""

import argparse
import os
from typing import Mapping, Optional

from gitflowfinish.domain.config import load_config, pick
from gitflowfinish.domain.constants import (
    CONFIG_PATH_ENV,
    DEFAULT_DEV_BRANCH,
    DEFAULT_TAG_PREFIX,
    FEATURE_TAG_PREFIX,
)
from gitflowfinish.domain.exceptions import ConfigurationError
from gitflowfinish.domain.models import OutcomeStatus, WorkflowConfig, WorkflowMode, WorkflowOutcome
from gitflowfinish.domain.version import BranchGrammar
from gitflowfinish.infrastructure.github.actions import GitHubActionsHelper
from gitflowfinish.infrastructure.github.client import GitHubClient, SourceHostClient
from gitflowfinish.services.composite.finish_service import FinishWorkflowService


def build_workflow_config(args: argparse.Namespace, environ: Mapping[str, str] = os.environ) -> WorkflowConfig:
    """Build the run configuration

    Precedence is command-line flag, then configuration file, then the
    built-in default. The pull request number, token and repository name
    fall back to the standard GitHub Actions environment variables.

    Args:
        args: Parsed command-line arguments
        environ: Environment to read fallbacks from

    Returns:
        WorkflowConfig for the run

    Raises:
        ConfigurationError: If a required value is missing or the
            configuration file is invalid
    """
    mode = WorkflowMode(args.command)

    config_path = args.config_path or environ.get(CONFIG_PATH_ENV)
    file_config = load_config(config_path) if config_path else {}

    pr_number = args.pr_num
    if pr_number is None:
        env_pr_number = environ.get("PR_NUMBER", "").strip()
        if not env_pr_number:
            raise ConfigurationError("Missing required option --pr-num (or PR_NUMBER)")
        try:
            pr_number = int(env_pr_number)
        except ValueError:
            raise ConfigurationError(f"PR_NUMBER must be an integer, got '{env_pr_number}'")

    token = args.token or environ.get("GITHUB_TOKEN", "")
    if not token:
        raise ConfigurationError("Missing required option --token (or GITHUB_TOKEN)")

    repo_name = args.repo_name or environ.get("GITHUB_REPOSITORY", "")
    if not repo_name:
        raise ConfigurationError("Missing required option --repo-name (or GITHUB_REPOSITORY)")

    if mode is WorkflowMode.FEATURE:
        tag_prefix = FEATURE_TAG_PREFIX
    else:
        tag_prefix = pick(getattr(args, "tag_prefix", None), file_config.get("tag_prefix"),
                          default=DEFAULT_TAG_PREFIX)

    allow_v_prefix = pick(args.allow_v_prefix, file_config.get("allow_v_prefix"), default=None)
    if allow_v_prefix is None:
        grammar = mode.default_grammar
    else:
        grammar = BranchGrammar.OPTIONAL_V if allow_v_prefix else BranchGrammar.STRICT

    return WorkflowConfig(
        pull_request_number=pr_number,
        token=token,
        repository_full_name=repo_name,
        merge_into_development=pick(
            args.merge_into_dev, file_config.get("merge_into_development"), default=False
        ),
        development_branch_name=pick(
            args.dev_branch_name, file_config.get("development_branch_name"), default=DEFAULT_DEV_BRANCH
        ),
        delete_source_branch=pick(
            args.delete_source_branch, file_config.get("delete_source_branch"), default=True
        ),
        tag_prefix=tag_prefix,
        mode=mode,
        grammar=grammar,
    )


def cmd_finish(
    gh: GitHubActionsHelper,
    config: WorkflowConfig,
    client: Optional[SourceHostClient] = None
) -> int:
    """Finish the gitflow branch of a merged pull request

    Args:
        gh: GitHub Actions helper instance
        config: Configuration for the run
        client: Host client (defaults to a GitHubClient using config.token)

    Returns:
        Exit code (0 completed or skipped, 1 invalid configuration, -1 failure)
    """
    client = client or GitHubClient(token=config.token)
    outcome = FinishWorkflowService(client).run(config)

    gh.write_output("outcome", outcome.status.value)
    gh.write_output("tag", outcome.tag_name or "")
    gh.write_output("merge-sha", outcome.merge_sha or "")
    gh.write_step_summary(format_summary(config, outcome))

    return outcome.exit_code


def format_summary(config: WorkflowConfig, outcome: WorkflowOutcome) -> str:
    """Render the step summary markdown for an outcome"""
    icons = {
        OutcomeStatus.COMPLETED: "✅",
        OutcomeStatus.SKIPPED_NOT_MERGED: "⏭️",
        OutcomeStatus.SKIPPED_NAME_MISMATCH: "⏭️",
        OutcomeStatus.INVALID_CONFIGURATION: "❌",
        OutcomeStatus.FAILED: "❌",
    }
    lines = [
        f"## Gitflow finish: {config.repository_full_name} #{config.pull_request_number}",
        "",
        f"{icons[outcome.status]} **{outcome.status.value}**: {outcome.message}",
    ]
    if outcome.tag_name:
        lines.append(f"- Tag: `{outcome.tag_name}`")
    if outcome.merge_sha:
        lines.append(f"- Merged into `{config.development_branch_name}` at `{outcome.merge_sha}`")
    return "\n".join(lines)
