"""Built-in action handler modules."""

from actions.builtins import dummy_cmd, help_cmd

BUILTIN_MODULES = (
    help_cmd,
    dummy_cmd,
)
