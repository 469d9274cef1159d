"""Wire the store, resolver and dispatcher, and load built-in handlers."""

from actions.builtins import BUILTIN_MODULES
from actions.context import DispatchContext
from actions.handlers import HandlerRegistry
from actions.registry import ActionDispatcher
from actions.resolver import OptionResolver
from actions.store import SchemaStore
from common.reporting import Reporter, TableBuilder
from console.prompt_engine import PromptEngine
from console.prompting import LineProvider


def load_builtin_handlers(dispatcher: ActionDispatcher) -> None:
    for module in BUILTIN_MODULES:
        module.register(dispatcher)


def create_dispatcher(
    context: DispatchContext,
    lines: LineProvider,
    reporter: Reporter,
    table_builder: TableBuilder | None = None,
    registry: HandlerRegistry | None = None,
) -> ActionDispatcher:
    registry = registry if registry is not None else HandlerRegistry()
    store = SchemaStore(context, registry)
    resolver = OptionResolver(store, PromptEngine(lines, reporter))
    dispatcher = ActionDispatcher(context, registry, store, resolver, reporter, table_builder)
    load_builtin_handlers(dispatcher)
    return dispatcher
