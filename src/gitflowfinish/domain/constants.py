"""Domain constants for Gitflow Finish.

Defines application-wide default values shared by the CLI, the
configuration loader and the finish workflow.
"""

# Default development branch that finished branches are merged back into
DEFAULT_DEV_BRANCH = "develop"

# Default text prepended to the version when creating a tag
DEFAULT_TAG_PREFIX = "v"

# Tag prefix used by feature mode (not configurable there)
FEATURE_TAG_PREFIX = "v"

# Literal branch prefix that marks a finishable branch
RELEASE_BRANCH_PREFIX = "release/"

# Annotated tag message; {version} is the full semantic version
TAG_MESSAGE_TEMPLATE = "Release version {version}"

# Log groups rendered as collapsible sections in the Actions log
SETUP_GROUP = "Initial Setup"
ACTIONS_GROUP = "Applying Gitflow actions"

# Environment variable naming an optional YAML configuration file
CONFIG_PATH_ENV = "GITFLOW_CONFIG_PATH"
