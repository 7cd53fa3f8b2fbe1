"""Tests for the GitHub implementation of the source host client"""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from gitflowfinish.domain.exceptions import GitHubAPIError
from gitflowfinish.domain.github_models import CommitAuthor
from gitflowfinish.domain.models import TagSpec
from gitflowfinish.domain.version import SemanticVersion
from gitflowfinish.infrastructure.github.client import GitHubClient, format_git_date
from tests.builders import PRDataBuilder

NOT_FOUND = GitHubAPIError("GitHub CLI command failed: api x: gh: Not Found (HTTP 404)")


@pytest.fixture
def client():
    return GitHubClient(token="ghp_test_token")


@pytest.fixture
def mock_api():
    with patch('gitflowfinish.infrastructure.github.client.gh_api_call') as mock:
        yield mock


class TestReads:
    """Test suite for read operations"""

    def test_get_repository(self, client, mock_api):
        """Should look the repository up by owner and name"""
        # Arrange
        mock_api.return_value = {
            "id": 1296269,
            "name": "hello-world",
            "full_name": "octocat/hello-world",
            "owner": {"login": "octocat"},
        }

        # Act
        repo = client.get_repository("octocat", "hello-world")

        # Assert
        assert repo.id == 1296269
        mock_api.assert_called_once_with(
            "/repos/octocat/hello-world", method="GET", body=None, token="ghp_test_token"
        )

    def test_get_pull_request_by_repository_id(self, client, mock_api):
        """Should address the pull request through the repository id"""
        # Arrange
        mock_api.return_value = PRDataBuilder().with_number(42).build()

        # Act
        pr = client.get_pull_request(1296269, 42)

        # Assert
        assert pr.number == 42
        assert mock_api.call_args.args[0] == "/repositories/1296269/pulls/42"

    def test_get_branch_quotes_name(self, client, mock_api):
        """Should keep slashes but escape other characters in branch names"""
        # Arrange
        mock_api.return_value = {"name": "release/1.0.0+b1", "commit": {"sha": "head999"}}

        # Act
        branch = client.get_branch(1, "release/1.0.0+b1")

        # Assert
        assert branch.sha == "head999"
        assert mock_api.call_args.args[0] == "/repositories/1/branches/release/1.0.0%2Bb1"

    def test_get_branch_returns_none_when_missing(self, client, mock_api):
        """Should return None on HTTP 404"""
        # Arrange
        mock_api.side_effect = NOT_FOUND

        # Act & Assert
        assert client.get_branch(1, "release/v1.4.0") is None

    def test_get_branch_propagates_other_errors(self, client, mock_api):
        """Should re-raise failures other than 404"""
        # Arrange
        mock_api.side_effect = GitHubAPIError("gh: Bad credentials (HTTP 401)")

        # Act & Assert
        with pytest.raises(GitHubAPIError, match="401"):
            client.get_branch(1, "release/v1.4.0")

    def test_get_commit(self, client, mock_api):
        """Should parse the commit author"""
        # Arrange
        mock_api.return_value = {
            "sha": "abc123",
            "commit": {"message": "Merge", "author": {"name": "Alice", "email": "alice@example.com"}},
        }

        # Act
        commit = client.get_commit(1, "abc123")

        # Assert
        assert commit.author == CommitAuthor("Alice", "alice@example.com")
        assert mock_api.call_args.args[0] == "/repositories/1/commits/abc123"

    def test_get_reference(self, client, mock_api):
        """Should fetch a single reference"""
        # Arrange
        mock_api.return_value = {"ref": "refs/tags/v1.4.0", "object": {"sha": "tagsha456"}}

        # Act
        ref = client.get_reference(1, "tags/v1.4.0")

        # Assert
        assert ref.sha == "tagsha456"
        assert mock_api.call_args.args[0] == "/repositories/1/git/ref/tags/v1.4.0"

    def test_get_reference_returns_none_when_missing(self, client, mock_api):
        """Should return None on HTTP 404"""
        # Arrange
        mock_api.side_effect = NOT_FOUND

        # Act & Assert
        assert client.get_reference(1, "tags/v1.4.0") is None


class TestWrites:
    """Test suite for mutating operations"""

    def test_create_tag_sends_annotated_tag(self, client, mock_api):
        """Should post the tag message, target commit and tagger"""
        # Arrange
        mock_api.return_value = {"sha": "tagsha456", "tag": "v1.4.0", "object": {"sha": "abc123"}}
        tag_spec = TagSpec.for_version(
            SemanticVersion(1, 4, 0),
            prefix="v",
            target_sha="abc123",
            tagger=CommitAuthor("Alice", "alice@example.com"),
            timestamp=datetime(2026, 3, 14, 15, 9, 26, tzinfo=timezone.utc),
        )

        # Act
        tag = client.create_tag(1, tag_spec)

        # Assert
        assert tag.sha == "tagsha456"
        mock_api.assert_called_once_with(
            "/repositories/1/git/tags",
            method="POST",
            body={
                "tag": "v1.4.0",
                "message": "Release version 1.4.0",
                "object": "abc123",
                "type": "commit",
                "tagger": {"name": "Alice", "email": "alice@example.com", "date": "2026-03-14T15:09:26Z"},
            },
            token="ghp_test_token",
        )

    def test_create_reference(self, client, mock_api):
        """Should post the fully qualified reference"""
        # Arrange
        mock_api.return_value = {"ref": "refs/tags/v1.4.0", "object": {"sha": "tagsha456"}}

        # Act
        client.create_reference(1, "refs/tags/v1.4.0", "tagsha456")

        # Assert
        mock_api.assert_called_once_with(
            "/repositories/1/git/refs",
            method="POST",
            body={"ref": "refs/tags/v1.4.0", "sha": "tagsha456"},
            token="ghp_test_token",
        )

    def test_create_merge(self, client, mock_api):
        """Should merge head into base"""
        # Arrange
        mock_api.return_value = {"sha": "merge789"}

        # Act
        merge = client.create_merge(1, base="develop", head="release/v1.4.0")

        # Assert
        assert merge.sha == "merge789"
        assert mock_api.call_args.kwargs["body"] == {"base": "develop", "head": "release/v1.4.0"}

    def test_create_merge_nothing_to_merge(self, client, mock_api):
        """Should report sha None for an empty 204 response"""
        # Arrange
        mock_api.return_value = {}

        # Act & Assert
        assert client.create_merge(1, base="develop", head="release/v1.4.0").sha is None

    def test_delete_reference(self, client, mock_api):
        """Should delete the branch reference"""
        # Arrange
        mock_api.return_value = {}

        # Act
        client.delete_reference(1, "heads/release/v1.4.0")

        # Assert
        mock_api.assert_called_once_with(
            "/repositories/1/git/refs/heads/release/v1.4.0",
            method="DELETE",
            body=None,
            token="ghp_test_token",
        )


class TestFormatGitDate:
    """Test suite for format_git_date"""

    def test_converts_to_utc(self):
        """Should render aware timestamps in UTC with a Z suffix"""
        timestamp = datetime(2026, 3, 14, 17, 9, 26, tzinfo=timezone(timedelta(hours=2)))

        assert format_git_date(timestamp) == "2026-03-14T15:09:26Z"
