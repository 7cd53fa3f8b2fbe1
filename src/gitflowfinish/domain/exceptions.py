"""Custom exceptions for Gitflow Finish operations"""


class GitflowFinishError(Exception):
    """Base exception for gitflow finish operations"""
    pass


class ConfigurationError(GitflowFinishError):
    """Invalid command-line or file configuration"""
    pass


class GitHubAPIError(GitflowFinishError):
    """GitHub API call failures"""
    pass


class TagAlreadyExistsError(GitHubAPIError):
    """The tag reference to be created is already present on the host"""

    def __init__(self, tag_name: str):
        self.tag_name = tag_name
        super().__init__(f"Tag '{tag_name}' already exists; refusing to create it again")
