"""Executes a declared suite tree and reports the results."""

import asyncio
import inspect
import logging
import sys
import traceback
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Callable, List, Optional, TextIO

from nestspec.formatting import Formatter, indent, pluralize
from nestspec.hooks import resolve_hooks
from nestspec.tree import Example, Group, SuiteTree

logger = logging.getLogger(__name__)


class ExampleState(Enum):
    PENDING = 'pending'
    HOOKS_RUNNING = 'hooks_running'
    BODY_RUNNING = 'body_running'
    TEARDOWN_RUNNING = 'teardown_running'
    DONE = 'done'


@dataclass
class RunStats:
    """Counters for one run. Field order is the summary order."""
    errors: int = 0
    examples: int = 0
    failures: int = 0
    suites: int = 0

    def summary(self) -> str:
        parts = []
        for stat in fields(self):
            count = getattr(self, stat.name)
            parts.append(f"{count} {pluralize(stat.name, count)}")
        return ', '.join(parts)


@dataclass
class ExampleResult:
    """What happened to one example."""
    label: str
    state: ExampleState = ExampleState.PENDING
    outcome: str = 'passed'
    error: Optional[BaseException] = None
    teardown_errors: List[BaseException] = field(default_factory=list)


class SpecRunner:
    """Walks a suite tree depth-first and runs each example with its hooks."""

    def __init__(self, tree: SuiteTree, stream: Optional[TextIO] = None,
                 colorize: bool = True):
        """Initialize the runner for a fully declared tree."""
        self.tree = tree
        self.stream = stream if stream is not None else sys.stdout
        self.format = Formatter(enabled=colorize)
        self.stats = RunStats()
        self.results: List[ExampleResult] = []
        self._has_run = False
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def exit_code(self) -> int:
        """0 when no expectation failed. Unexpected errors do not count."""
        return 0 if self.stats.failures == 0 else 1

    def _print(self, text: str, depth: int = 0):
        print(indent(text, depth), file=self.stream)

    def _print_error(self, text: str):
        """Print in red with a blank line before and after so it stands out."""
        print('\n' + self.format.red(text) + '\n', file=self.stream)

    def _invoke(self, fn: Callable[[], Any]):
        """Call a hook or body and wait for it if it returned an awaitable."""
        result = fn()
        if inspect.isawaitable(result):
            self._loop.run_until_complete(result)

    def run(self) -> RunStats:
        """Execute the tree once, then print the summary."""
        if self._has_run:
            logger.warning("Suite already ran, not running it again")
            return self.stats
        self._has_run = True
        self.tree.sealed = True

        logger.info(f"Running {self.tree.count_examples()} examples")
        self._loop = asyncio.new_event_loop()
        try:
            self._run_children(self.tree.root.children)
        finally:
            self._loop.close()
            self._loop = None

        self.report()
        logger.info(f"Run finished: {self.stats.summary()}")
        return self.stats

    def report(self):
        self._print(self.format.underline(self.stats.summary()))

    def _run_children(self, children: List[Any]):
        for node in children:
            if isinstance(node, Group):
                self._run_group(node)
            else:
                self._run_example(node)

    def _run_group(self, group: Group):
        self._print(self.format.bold(str(group.label)), group.depth)
        self.stats.suites += 1
        self._run_children(group.children)

    def _run_example(self, example: Example) -> ExampleResult:
        self._print(str(example.label), example.depth)
        self.stats.examples += 1
        result = ExampleResult(label=example.label)
        self.results.append(result)

        try:
            result.state = ExampleState.HOOKS_RUNNING
            for hook in resolve_hooks(self.tree, 'setup', example.group_id):
                self._invoke(hook)

            result.state = ExampleState.BODY_RUNNING
            self._invoke(example.body)
        except KeyboardInterrupt:
            raise
        except AssertionError as e:
            self.stats.failures += 1
            result.outcome = 'failed'
            result.error = e
            self._print_error(str(e))
        except BaseException as e:
            # SystemExit and CancelledError stop here too
            self.stats.errors += 1
            result.outcome = 'errored'
            result.error = e
            self._print_error(''.join(traceback.format_exception(type(e), e, e.__traceback__)).rstrip())
        finally:
            # Teardown may release resources, so every hook gets a chance to run
            result.state = ExampleState.TEARDOWN_RUNNING
            for hook in resolve_hooks(self.tree, 'teardown', example.group_id):
                try:
                    self._invoke(hook)
                except KeyboardInterrupt:
                    raise
                except BaseException as e:
                    logger.warning(f"Teardown hook failed for '{example.label}': {e!r}")
                    result.teardown_errors.append(e)
                    self._print_error(''.join(traceback.format_exception_only(type(e), e)).rstrip())
            result.state = ExampleState.DONE

        return result
