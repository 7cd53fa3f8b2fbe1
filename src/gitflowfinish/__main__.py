#!/usr/bin/env python3
"""
Gitflow Finish - GitHub Actions Helper Script

Entry point for finishing gitflow branches.
Run with: python3 -m gitflowfinish {release,feature} [options]
"""

import logging
import os
import sys

from gitflowfinish.cli.commands.finish import build_workflow_config, cmd_finish
from gitflowfinish.cli.parser import create_parser
from gitflowfinish.domain.exceptions import ConfigurationError
from gitflowfinish.infrastructure.github.actions import GitHubActionsHelper
from gitflowfinish.infrastructure.github.workflow_commands import configure_logging

logger = logging.getLogger("gitflowfinish")


def main(argv=None):
    """Main entry point for the script

    Returns:
        0 when the branch was finished or cleanly skipped, 1 for invalid
        arguments or configuration, -1 when the workflow failed
    """
    parser = create_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as e:
        # argparse exits with 2 on errors and 0 for --help
        return 0 if e.code in (0, None) else 1

    if not args.command:
        parser.print_help()
        return 1

    handler = configure_logging()
    try:
        try:
            config = build_workflow_config(args, os.environ)
        except ConfigurationError as e:
            logger.error(str(e))
            return 1

        gh = GitHubActionsHelper()
        return cmd_finish(gh, config)
    finally:
        handler.end_group()


if __name__ == "__main__":
    sys.exit(main())
