"""Common pytest fixtures for Gitflow Finish tests

This module provides shared fixtures used across the test suite.
Fixtures are organized by category: host client, configuration and logging.
"""

import io
import logging
from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from gitflowfinish.domain.github_models import (
    CommitAuthor,
    GitHubBranch,
    GitHubCommit,
    GitHubMergeCommit,
    GitHubReference,
    GitHubRepository,
    GitHubTag,
)
from gitflowfinish.infrastructure.github.client import SourceHostClient
from gitflowfinish.infrastructure.github.workflow_commands import (
    WorkflowCommandHandler,
    configure_logging,
)
from tests.builders import ConfigBuilder, PRDataBuilder


# ==============================================================================
# Host Client Fixtures
# ==============================================================================


@pytest.fixture
def sample_repository():
    """Fixture providing the repository every workflow test runs against"""
    return GitHubRepository(
        id=1296269,
        owner="octocat",
        name="hello-world",
        full_name="octocat/hello-world",
        default_branch="main",
    )


@pytest.fixture
def merge_author():
    """Fixture providing the author of the merge commit"""
    return CommitAuthor(name="Alice Example", email="alice@example.com")


@pytest.fixture
def mock_client(sample_repository, merge_author):
    """Fixture providing a mocked SourceHostClient

    Defaults describe the happy path for PR #42 (head release/v1.4.0,
    merged at abc123): the branch exists, no tag exists yet, tag creation
    returns tag object tagsha456 and the merge produces merge789.
    """
    client = Mock(spec=SourceHostClient)
    client.get_repository.return_value = sample_repository
    client.get_pull_request.return_value = PRDataBuilder.merged_release("1.4.0")
    client.get_branch.return_value = GitHubBranch(name="release/v1.4.0", sha="head999")
    client.get_commit.return_value = GitHubCommit(
        sha="abc123", message="Merge pull request #42", author=merge_author
    )
    client.get_reference.return_value = None
    client.create_tag.return_value = GitHubTag(sha="tagsha456", tag="v1.4.0", object_sha="abc123")
    client.create_reference.return_value = GitHubReference(ref="refs/tags/v1.4.0", sha="tagsha456")
    client.create_merge.return_value = GitHubMergeCommit(sha="merge789")
    client.delete_reference.return_value = None
    return client


# ==============================================================================
# Configuration Fixtures
# ==============================================================================


@pytest.fixture
def workflow_config():
    """Fixture providing a release config with merge and delete enabled"""
    return ConfigBuilder().build()


@pytest.fixture
def fixed_now():
    """Fixture providing a fixed tag creation time"""
    return datetime(2026, 3, 14, 15, 9, 26, tzinfo=timezone.utc)


# ==============================================================================
# Logging Fixtures
# ==============================================================================


@pytest.fixture
def log_stream():
    """Fixture capturing workflow command output of the package logger

    Yields:
        StringIO receiving every rendered line
    """
    stream = io.StringIO()
    handler = configure_logging(stream=stream)
    yield stream

    logger = logging.getLogger("gitflowfinish")
    logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture(autouse=True)
def _detach_workflow_handlers():
    """Ensure no test leaks a WorkflowCommandHandler into the next one"""
    yield
    logger = logging.getLogger("gitflowfinish")
    for handler in list(logger.handlers):
        if isinstance(handler, WorkflowCommandHandler):
            logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
