"""Resolution of inherited setup/teardown hooks."""

from typing import Any, Callable, List, Literal

from nestspec.tree import SuiteTree


def resolve_hooks(tree: SuiteTree, kind: Literal['setup', 'teardown'],
                  group_id: int) -> List[Callable[[], Any]]:
    """Collect the hooks that apply to examples of a group.

    Walks from the group up to the root. The result is outermost first for
    both kinds: root hooks lead, the group's own hooks come last. Teardown
    is not reversed.
    """
    chain = []
    current = group_id
    while current is not None:
        group = tree.group(current)
        chain.append(group.setup_hooks if kind == 'setup' else group.teardown_hooks)
        current = group.parent_id

    hooks = []
    for group_hooks in reversed(chain):
        hooks.extend(group_hooks)
    return hooks
