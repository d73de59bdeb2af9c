"""Declaration API for spec files.

Spec files import these functions, declare their groups at module level and
are then run once::

    from nestspec.api import describe, it, expect

    describe('math', lambda: [
        it('adds', lambda: expect(1 + 1).to_be(2)),
    ])

Declarations go into a shared default builder; ``run`` executes that tree at
most once per process and returns the exit status.
"""

from typing import Optional, TextIO

from nestspec.matchers import expect
from nestspec.runner import SpecRunner
from nestspec.tree import SuiteBuilder

_builder = SuiteBuilder()
_runner: Optional[SpecRunner] = None

describe = _builder.describe
context = _builder.context
it = _builder.it
before_each = _builder.before_each
after_each = _builder.after_each


def run(stream: Optional[TextIO] = None, colorize: bool = True) -> int:
    """Run everything declared so far and return the process exit status."""
    global _runner
    if _runner is None:
        _runner = SpecRunner(_builder.tree, stream=stream, colorize=colorize)
    _runner.run()
    return _runner.exit_code


__all__ = ['describe', 'context', 'it', 'before_each', 'after_each', 'expect', 'run']
