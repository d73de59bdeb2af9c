"""Console formatting helpers."""

import re

# ANSI (on, off) codes
BOLD = (1, 22)
RED = (31, 39)
UNDERLINE = (4, 24)


def wrap(text: str, codes) -> str:
    return f"\x1b[{codes[0]}m{text}\x1b[{codes[1]}m"


class Formatter:
    """Applies ANSI styles, or passes text through when disabled."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled

    def _style(self, text: str, codes) -> str:
        return wrap(text, codes) if self.enabled else text

    def bold(self, text: str) -> str:
        return self._style(text, BOLD)

    def red(self, text: str) -> str:
        return self._style(text, RED)

    def underline(self, text: str) -> str:
        return self._style(text, UNDERLINE)


def indent(text: str, depth: int = 0) -> str:
    """Indent by two spaces per nesting level."""
    return ' ' * (max(depth, 0) * 2) + text


def pluralize(word: str, count: int) -> str:
    base = re.sub(r's?$', '', word, count=1)
    return base if count == 1 else f"{base}s"
