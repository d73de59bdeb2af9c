"""Suite tree model and the builder that declares it."""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Union

logger = logging.getLogger(__name__)

ROOT_ID = 0


class DeclarationError(Exception):
    """Raised for invalid declarations or declarations after a run started."""
    pass


@dataclass
class Example:
    """A single test case. The body runs only when the tree is executed."""
    label: str
    depth: int
    body: Callable[[], Any]
    group_id: int


@dataclass
class Group:
    """A named group of examples, nested groups and the hooks scoped to them."""
    group_id: int
    label: Optional[str]
    depth: int
    parent_id: Optional[int]
    children: List[Union['Group', Example]] = field(default_factory=list)
    setup_hooks: List[Callable[[], Any]] = field(default_factory=list)
    teardown_hooks: List[Callable[[], Any]] = field(default_factory=list)


@dataclass
class SuiteTree:
    """Arena of groups indexed by id. Group 0 is the unlabelled root."""
    groups: List[Group] = field(default_factory=list)
    sealed: bool = False

    def __post_init__(self):
        if not self.groups:
            self.groups.append(Group(group_id=ROOT_ID, label=None, depth=-1, parent_id=None))

    @property
    def root(self) -> Group:
        return self.groups[ROOT_ID]

    def group(self, group_id: int) -> Group:
        return self.groups[group_id]

    def count_examples(self) -> int:
        """Number of examples reachable from the root."""
        total = 0
        pending = list(self.root.children)
        while pending:
            node = pending.pop()
            if isinstance(node, Group):
                pending.extend(node.children)
            else:
                total += 1
        return total


class SuiteBuilder:
    """Declares groups, examples and hooks into a ``SuiteTree``.

    The builder keeps the stack of currently open groups. ``describe`` pushes
    a group, calls its body so nested declarations land in that group, then
    pops it and attaches it to its parent.
    """

    def __init__(self, tree: Optional[SuiteTree] = None):
        self.tree = tree if tree is not None else SuiteTree()
        self._stack: List[int] = [ROOT_ID]

    @property
    def current(self) -> Group:
        return self.tree.group(self._stack[-1])

    def _ensure_open(self, what: str, fn: Any):
        if self.tree.sealed:
            raise DeclarationError(f"Cannot declare {what} after the run has started")
        if not callable(fn):
            raise DeclarationError(f"{what} expects a callable, got {type(fn).__name__}")

    def describe(self, label: str, build_fn: Callable[[], Any]) -> Group:
        """Declare a group and run ``build_fn`` to populate it."""
        self._ensure_open('a group', build_fn)
        parent = self.current
        group = Group(
            group_id=len(self.tree.groups),
            label=label,
            depth=parent.depth + 1,
            parent_id=parent.group_id
        )
        self.tree.groups.append(group)
        self._stack.append(group.group_id)
        try:
            build_fn()
        finally:
            self._stack.pop()
            parent.children.append(group)
        logger.debug(f"Declared group '{label}' at depth {group.depth}")
        return group

    context = describe

    def it(self, label: str, body: Callable[[], Any]) -> Example:
        """Declare an example in the current group. ``body`` is not called here."""
        self._ensure_open('an example', body)
        frame = self.current
        example = Example(label=label, depth=frame.depth + 1, body=body, group_id=frame.group_id)
        frame.children.append(example)
        return example

    def before_each(self, hook: Callable[[], Any]):
        self._ensure_open('a setup hook', hook)
        self.current.setup_hooks.append(hook)

    def after_each(self, hook: Callable[[], Any]):
        self._ensure_open('a teardown hook', hook)
        self.current.teardown_hooks.append(hook)
