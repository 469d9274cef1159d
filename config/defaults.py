"""Project defaults and schema key constants."""

PACKAGE_NAME = "cli-actions"
BASE_NAMESPACE = "cli_actions"

# Schema file extensions, in lookup order.
SCHEMA_EXTENSIONS = (".json", ".yaml", ".yml")

# Fallback schema folder, relative to the process working directory.
CWD_SETTINGS_DIR = "settings/cli"

SCHEMA_PATH_ENV = "CLI_ACTIONS_PATH"

DEFAULT_ACTION = "build"
DEFAULT_PROMPT = "QUESTION?"
DEFAULT_LOG_LEVEL = "WARNING"

# Separator drawn under the dispatch banner is capped to this width.
SEPARATOR_MAX_WIDTH = 80

ARGS_KEY = "arguments"
HANDLER_KEY = "handler"
COMMAND_KEY = "commandKey"
ASK_CONFIRM_KEY = "askConfirm"
ECHO_RESULT_KEY = "echoResult"
LABEL_KEY = "label"
PROVIDER_KEY = "provider"
FOLLOW_UP_KEY = "followUp"

SCHEMA_KEYS = frozenset(
    {ARGS_KEY, HANDLER_KEY, COMMAND_KEY, ASK_CONFIRM_KEY, ECHO_RESULT_KEY, LABEL_KEY, PROVIDER_KEY}
)

DISPLAY_LIST = "list"
DISPLAY_ARRAY = "array"
