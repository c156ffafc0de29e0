"""Anti-pattern rules.

Each rule is an independent, stateless matcher; ``default_rules()`` returns
the full set in a fixed order. Each rule declares the grammars it
understands; asyncio code in Python sources gets its own await-in-loop.

"""

from .async_awaited_return import AsyncFunctionAwaitedReturnRule
from .async_executor import AsyncExecutorInPromiseRule
from .asyncio_await_in_loop import AsyncioAwaitInLoopRule
from .await_in_loop import AwaitInLoopRule
from .base import Match, Rule, RuleContext
from .custom_promisification import CustomPromisificationRule
from .executor_one_arg_used import ExecutorOneArgUsedRule
from .promise_resolve_then import PromiseResolveThenRule
from .reaction_returns_promise import ReactionReturnsPromiseRule
from .redundant_wrapper import RedundantNewPromiseWrapperRule

RULE_CLASSES = (
    AwaitInLoopRule,
    AsyncFunctionAwaitedReturnRule,
    PromiseResolveThenRule,
    ExecutorOneArgUsedRule,
    CustomPromisificationRule,
    ReactionReturnsPromiseRule,
    AsyncExecutorInPromiseRule,
    RedundantNewPromiseWrapperRule,
    AsyncioAwaitInLoopRule,
)


def default_rules() -> list[Rule]:
    return [cls() for cls in RULE_CLASSES]


__all__ = [
    "Match",
    "Rule",
    "RuleContext",
    "RULE_CLASSES",
    "default_rules",
    "AwaitInLoopRule",
    "AsyncFunctionAwaitedReturnRule",
    "PromiseResolveThenRule",
    "ExecutorOneArgUsedRule",
    "CustomPromisificationRule",
    "ReactionReturnsPromiseRule",
    "AsyncExecutorInPromiseRule",
    "RedundantNewPromiseWrapperRule",
    "AsyncioAwaitInLoopRule",
]
