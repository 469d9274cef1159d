"""Reserved action names and keys shared by the store, dispatcher, and tests."""

ACTION_CONFIRM = "confirm"
ACTION_HELP = "help"

CONFIRM_KEY = "status"
CONFIRM_YES = "y"

AUTO_METHOD = "auto"
NAMESPACE_SEPARATOR = ":"

# Host package-manager lifecycle events that may arrive without an action schema.
LIFECYCLE_ACTIONS = (
    "install",
    "update",
    "status",
    "archive",
    "create-project",
    "dump-autoload",
)


def action_path(action: str) -> str:
    """Map `app:update` style names to the nested `app/update` schema path."""
    return action.strip().replace(NAMESPACE_SEPARATOR, "/")


def method_name(action: str) -> str:
    return action.strip().replace(NAMESPACE_SEPARATOR, "-")
