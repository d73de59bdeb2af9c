"""Assertion matchers returned by ``expect``."""

import json
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple


class ExpectationFailed(AssertionError):
    """Raised when an expectation is not met."""
    pass


class MatcherKind(Enum):
    """The closed set of checks an expectation can perform."""
    BE = 'be'
    EQUAL = 'equal'
    BE_INSTANCE_OF = 'be instance of'
    START_WITH = 'start with'
    END_WITH = 'end with'
    MATCH = 'match'
    THROW = 'throw error'


@dataclass
class MatchResult:
    """Outcome of one evaluation."""
    passed: bool
    message: str


# Immutable scalar types compared by value in ``to_be``
_SCALAR_TYPES = (int, float, complex, str, bytes, bool, type(None))

_DROP = object()


def _jsonable(value: Any, in_sequence: bool = False) -> Any:
    """Reduce a value to what JSON can carry, dropping what it can't."""
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, dict):
        result = {}
        for key, item in value.items():
            converted = _jsonable(item)
            if converted is not _DROP:
                result[str(key)] = converted
        return result
    if isinstance(value, (list, tuple)):
        return [_jsonable(item, in_sequence=True) for item in value]
    if callable(value):
        return None if in_sequence else _DROP
    if hasattr(value, '__dict__'):
        public = {k: v for k, v in vars(value).items() if not k.startswith('_')}
        return _jsonable(public)
    return {}


def serialize(value: Any) -> Optional[str]:
    """Canonical serialized form used for deep equality.

    Two values are considered equal when these strings are identical. This
    is an approximation of structural equality: key order matters, and
    callables or other values JSON can't represent are silently dropped.
    Returns None when the value itself has no serialized form.
    """
    converted = _jsonable(value)
    if converted is _DROP:
        return None
    return json.dumps(converted, separators=(',', ':'), ensure_ascii=False)


def _describe_callable(fn: Any) -> str:
    return getattr(fn, '__name__', None) or repr(fn)


def _evaluate_be(actual: Any, expected: Any) -> Tuple[bool, str, str]:
    same = actual is expected
    if not same and type(actual) is type(expected) and isinstance(actual, _SCALAR_TYPES):
        same = actual == expected
    return same, str(actual), str(expected)


def _evaluate_equal(actual: Any, expected: Any) -> Tuple[bool, str, str]:
    actual_text = serialize(actual)
    expected_text = serialize(expected)
    return actual_text == expected_text, str(actual_text), str(expected_text)


def _evaluate_instance_of(actual: Any, expected: Any) -> Tuple[bool, str, str]:
    name = getattr(expected, '__name__', str(expected))
    return isinstance(actual, expected), str(actual), name


def _evaluate_start_with(actual: Any, expected: Any) -> Tuple[bool, str, str]:
    return actual.startswith(expected), str(actual), str(expected)


def _evaluate_end_with(actual: Any, expected: Any) -> Tuple[bool, str, str]:
    return actual.endswith(expected), str(actual), str(expected)


def _evaluate_match(actual: Any, expected: Any) -> Tuple[bool, str, str]:
    if isinstance(expected, str):
        return expected in actual, str(actual), expected
    return re.search(expected, actual) is not None, str(actual), expected.pattern


def _evaluate_throw(actual: Any, expected: Any) -> Tuple[bool, str, str]:
    thrown = False
    try:
        actual()
    except Exception as error:
        if expected is None:
            thrown = True
        elif isinstance(expected, str):
            thrown = expected in str(error)
        else:
            thrown = re.search(expected, str(error)) is not None
    return thrown, _describe_callable(actual), ''


_EVALUATORS: Dict[MatcherKind, Callable[[Any, Any], Tuple[bool, str, str]]] = {
    MatcherKind.BE: _evaluate_be,
    MatcherKind.EQUAL: _evaluate_equal,
    MatcherKind.BE_INSTANCE_OF: _evaluate_instance_of,
    MatcherKind.START_WITH: _evaluate_start_with,
    MatcherKind.END_WITH: _evaluate_end_with,
    MatcherKind.MATCH: _evaluate_match,
    MatcherKind.THROW: _evaluate_throw,
}


def evaluate(kind: MatcherKind, actual: Any, expected: Any, negated: bool) -> MatchResult:
    """Run one check; ``negated`` inverts the outcome, nothing else."""
    holds, actual_text, expected_text = _EVALUATORS[kind](actual, expected)
    conjunction = 'not to' if negated else 'to'
    message = f"Expected {actual_text} {conjunction} {kind.value}"
    if expected_text:
        message += f" {expected_text}"
    return MatchResult(passed=holds != negated, message=message)


class Expectation:
    """Checks against a captured value.

    Every check raises ``ExpectationFailed`` when it does not hold. Use
    ``not_`` for the negated form::

        expect(result).to_equal({'a': 1})
        expect(name).not_.to_start_with('_')
    """

    def __init__(self, actual: Any, negated: bool = False):
        self.actual = actual
        self.negated = negated

    @property
    def not_(self) -> 'Expectation':
        return Expectation(self.actual, negated=not self.negated)

    def _check(self, kind: MatcherKind, expected: Any = None):
        result = evaluate(kind, self.actual, expected, self.negated)
        if not result.passed:
            raise ExpectationFailed(result.message)

    def to_be(self, expected: Any):
        self._check(MatcherKind.BE, expected)

    def to_equal(self, expected: Any):
        self._check(MatcherKind.EQUAL, expected)

    def to_be_instance_of(self, cls: type):
        self._check(MatcherKind.BE_INSTANCE_OF, cls)

    def to_start_with(self, prefix: str):
        self._check(MatcherKind.START_WITH, prefix)

    def to_end_with(self, suffix: str):
        self._check(MatcherKind.END_WITH, suffix)

    def to_match(self, pattern):
        """Substring check for a ``str``, regex search for a compiled pattern."""
        self._check(MatcherKind.MATCH, pattern)

    def to_throw(self, pattern=None):
        """Call the captured value and check that it raises.

        With ``pattern`` the error message must also contain it (``str``) or
        match it (compiled pattern).
        """
        self._check(MatcherKind.THROW, pattern)


def expect(actual: Any) -> Expectation:
    """Capture a value for checking."""
    return Expectation(actual)
