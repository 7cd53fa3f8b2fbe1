"""
CLI Argument Parser

This module handles command-line argument parsing for Gitflow Finish.
"""

import argparse

from gitflowfinish.domain.constants import DEFAULT_DEV_BRANCH, DEFAULT_TAG_PREFIX

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off"}


def parse_bool(value: str) -> bool:
    """Parse a boolean flag value such as "true" or "False"

    Raises:
        argparse.ArgumentTypeError: If the value is not a recognised boolean
    """
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise argparse.ArgumentTypeError(f"expected true or false, got '{value}'")


def _add_bool_flag(parser: argparse.ArgumentParser, flag: str, dest: str, help: str) -> None:
    # A bare flag means true; an explicit value may follow. None means "not given"
    parser.add_argument(
        flag,
        dest=dest,
        nargs="?",
        const=True,
        default=None,
        type=parse_bool,
        metavar="{true,false}",
        help=help
    )


def _create_common_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--pr-num",
        dest="pr_num",
        type=int,
        help="The number of the pull request to finish (default: $PR_NUMBER)"
    )
    common.add_argument(
        "--token",
        help="Authentication token to allow the action to execute (default: $GITHUB_TOKEN)"
    )
    common.add_argument(
        "--repo-name",
        dest="repo_name",
        help="The full name of the containing repository in the form owner/repo (default: $GITHUB_REPOSITORY)"
    )
    _add_bool_flag(
        common,
        "--merge-into-dev",
        dest="merge_into_dev",
        help="Whether to merge the finished branch back into the development branch (default: false)"
    )
    common.add_argument(
        "--dev-branch-name",
        dest="dev_branch_name",
        help=f"The name of the development branch to merge into (default: {DEFAULT_DEV_BRANCH})"
    )
    _add_bool_flag(
        common,
        "--allow-v-prefix",
        dest="allow_v_prefix",
        help="Whether branch names may put a 'v' before the version, as in release/v1.2.3 (default: true)"
    )
    common.add_argument(
        "--config-path",
        dest="config_path",
        help="Path to an optional YAML configuration file (default: $GITFLOW_CONFIG_PATH)"
    )
    return common


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for Gitflow Finish.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="gitflow-finish",
        description="Gitflow Finish - tag, merge back and clean up a merged gitflow branch"
    )
    subparsers = parser.add_subparsers(dest="command", help="Subcommands")
    common = _create_common_parser()

    parser_release = subparsers.add_parser(
        "release",
        parents=[common],
        help="Finish a release/hotfix branch"
    )
    _add_bool_flag(
        parser_release,
        "--del-source-branch",
        dest="delete_source_branch",
        help="Whether to delete the release/hotfix branch after completing all gitflow actions (default: true)"
    )
    parser_release.add_argument(
        "--tag-prefix",
        dest="tag_prefix",
        help=f"Text to prepend to the version when creating a tag (default: {DEFAULT_TAG_PREFIX})"
    )

    parser_feature = subparsers.add_parser(
        "feature",
        parents=[common],
        help="Finish a branch whose tag always carries the 'v' prefix"
    )
    _add_bool_flag(
        parser_feature,
        "--del-rel-branch",
        dest="delete_source_branch",
        help="Whether to delete the release branch after completing all gitflow actions (default: true)"
    )

    return parser
