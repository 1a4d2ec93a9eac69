"""
Constants and configuration values for Codex review tooling.
"""

# Exit codes
EXIT_SUCCESS = 0
EXIT_GENERAL_ERROR = 1
EXIT_CONFIGURATION_ERROR = 2

# External commands
DEFAULT_REVIEW_COMMAND = 'codex'
DEFAULT_BASE_BRANCH = 'origin/main'
SUBPROCESS_TIMEOUT = 300  # 5 minutes per external call
VERSION_CHECK_TIMEOUT = 10

# Artifacts
DEFAULT_RESULTS_DIR = '.codex-results'
LATEST_REVIEW_JSON = 'latest-review.json'
LATEST_REVIEW_MARKDOWN = 'latest-review.md'
COMMENT_TEMP_FILE = 'comment.tmp'
DEFAULT_APPLICATION_RESULTS_FILE = 'suggestion-results.json'
CONFIG_FILE_NAME = '.codex-config.yml'

# Source files reviewed by the local review
SUPPORTED_EXTENSIONS = ('js', 'jsx', 'ts', 'tsx', 'py', 'java', 'go', 'rs', 'cpp', 'c')

# Characters of file content shown in the web paste prompt
WEB_PREVIEW_CHARS = 1000

# Auto-apply policy
AUTO_APPLY_MIN_CONFIDENCE = 0.9
AUTO_APPLY_RISK_LEVEL = 'low'

# Commit identity and message
BOT_USER_NAME = 'Codex AI Bot'
BOT_USER_EMAIL = 'codex-bot@github.com'
COMMIT_HEADER = 'Apply Codex AI suggestions'
COMMIT_TRAILER = 'Co-authored-by: Codex AI <codex@openai.com>'
