"""Tests for configuration loading and validation"""

import pytest

from gitflowfinish.domain.config import (
    load_config,
    load_config_from_string,
    parse_repository_name,
    pick,
)
from gitflowfinish.domain.exceptions import ConfigurationError


class TestParseRepositoryName:
    """Test suite for parse_repository_name"""

    def test_splits_owner_and_repo(self):
        """Should split owner/repo"""
        assert parse_repository_name("octocat/hello-world") == ("octocat", "hello-world")

    def test_accepts_dots_underscores_and_hyphens(self):
        """Should accept the characters GitHub allows in names"""
        assert parse_repository_name("my-org.io/repo_name.js") == ("my-org.io", "repo_name.js")

    @pytest.mark.parametrize("name", [
        "",
        "hello-world",
        "octocat/",
        "/hello-world",
        "octocat/hello/world",
        "octo cat/hello",
        "https://github.com/octocat/hello-world",
        "octocat/h\u00e9llo",
        "\u0661octocat/hello-world",
    ])
    def test_rejects_malformed_names(self, name):
        """Should raise ConfigurationError for anything but owner/repo"""
        with pytest.raises(ConfigurationError, match="owner/repo-name"):
            parse_repository_name(name)


class TestLoadConfigFromString:
    """Test suite for load_config_from_string"""

    def test_maps_keys_to_config_fields(self):
        """Should translate YAML keys to WorkflowConfig field names"""
        content = """
mergeIntoDevelopment: true
developmentBranchName: dev
deleteSourceBranch: false
tagPrefix: release-
allowVPrefix: false
"""
        result = load_config_from_string(content)

        assert result == {
            "merge_into_development": True,
            "development_branch_name": "dev",
            "delete_source_branch": False,
            "tag_prefix": "release-",
            "allow_v_prefix": False,
        }

    def test_empty_content_returns_empty_mapping(self):
        """Should treat an empty file as no settings"""
        assert load_config_from_string("") == {}

    def test_empty_tag_prefix(self):
        """Should keep an explicitly empty tag prefix"""
        assert load_config_from_string('tagPrefix: ""') == {"tag_prefix": ""}

    def test_rejects_unknown_keys(self):
        """Should raise ConfigurationError naming unknown keys"""
        with pytest.raises(ConfigurationError, match="branchPrefix"):
            load_config_from_string("branchPrefix: release/")

    def test_rejects_non_boolean_flags(self):
        """Should require real booleans for flag settings"""
        with pytest.raises(ConfigurationError, match="mergeIntoDevelopment"):
            load_config_from_string("mergeIntoDevelopment: sometimes")

    def test_rejects_non_mapping(self):
        """Should reject a YAML list at the top level"""
        with pytest.raises(ConfigurationError, match="mapping"):
            load_config_from_string("- a\n- b\n")

    def test_rejects_invalid_yaml(self):
        """Should wrap YAML syntax errors in ConfigurationError"""
        with pytest.raises(ConfigurationError, match="Invalid YAML in custom.yml"):
            load_config_from_string("tagPrefix: [unclosed", "custom.yml")


class TestLoadConfig:
    """Test suite for load_config"""

    def test_loads_file(self, tmp_path):
        """Should read and parse a YAML file"""
        config_file = tmp_path / "gitflow.yml"
        config_file.write_text("developmentBranchName: integration\n")

        assert load_config(str(config_file)) == {"development_branch_name": "integration"}

    def test_missing_file(self, tmp_path):
        """Should raise ConfigurationError for a missing file"""
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(str(tmp_path / "missing.yml"))


class TestPick:
    """Test suite for pick"""

    def test_returns_first_non_none(self):
        assert pick(None, False, True, default=True) is False

    def test_keeps_empty_string(self):
        assert pick("", "v", default="x") == ""

    def test_falls_back_to_default(self):
        assert pick(None, None, default="develop") == "develop"
