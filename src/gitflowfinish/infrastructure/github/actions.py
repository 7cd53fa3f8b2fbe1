"""GitHub Actions environment integration"""

import logging
import os
import uuid

logger = logging.getLogger(__name__)


class GitHubActionsHelper:
    """Handle GitHub Actions environment interactions"""

    def __init__(self):
        self.github_output_file = os.environ.get("GITHUB_OUTPUT")
        self.github_step_summary_file = os.environ.get("GITHUB_STEP_SUMMARY")

    def write_output(self, name: str, value: str) -> None:
        """Write to $GITHUB_OUTPUT for subsequent steps

        Outside of GitHub Actions the output is logged as ``name=value``
        through the package logger instead.

        Args:
            name: Output variable name
            value: Output variable value
        """
        if not self.github_output_file:
            logger.info(f"{name}={value}")
            return

        # Multi-line values need the heredoc format
        # https://docs.github.com/en/actions/writing-workflows/choosing-what-your-workflow-does/workflow-commands-for-github-actions#multiline-strings
        with open(self.github_output_file, "a") as f:
            if "\n" in value:
                delimiter = f"EOF_{uuid.uuid4().hex}"
                f.write(f"{name}<<{delimiter}\n")
                f.write(f"{value}\n")
                f.write(f"{delimiter}\n")
            else:
                f.write(f"{name}={value}\n")

    def write_step_summary(self, text: str) -> None:
        """Write to $GITHUB_STEP_SUMMARY for workflow summary

        Does nothing outside of GitHub Actions; the log already carries
        the same information.

        Args:
            text: Markdown text to append to summary
        """
        if not self.github_step_summary_file:
            return

        with open(self.github_step_summary_file, "a") as f:
            f.write(f"{text}\n")
