"""
Default settings for the GitLab CI provider.
"""

# Host used when neither config nor environment override it.
DEFAULT_GITLAB_URL = "gitlab.com"

# Dotted key looked up in the build-tools config mapping.
GITLAB_URL_CONFIG_KEY = "build-tools.provider.git.gitlab.url"

# Also written back to the CI variables so test runs resolve the same host.
GITLAB_URL_ENV_VAR = "TERMINUS_BUILD_TOOLS_PROVIDER_GIT_GITLAB_URL"

GITLAB_TOKEN_ENV_VAR = "GITLAB_TOKEN"

DEFAULT_TIMEOUT = 30  # seconds
