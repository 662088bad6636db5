"""
Adapter for Java-style ``.properties`` files.

Supported syntax:
- ``#`` and ``!`` comment lines
- ``key=value``, ``key: value`` and ``key value`` separators
- line continuation with a trailing backslash
- escapes ``\\t``, ``\\n``, ``\\r``, ``\\f``, ``\\uXXXX`` and escaped separators

Keys are flat: ``db.host=localhost`` is stored under the key ``db.host``.
Nested maps are flattened with ``.`` when saving.
"""

from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional

from TypedConfig.adapters.base import PersistenceAdapter
from TypedConfig.tree.utils import flatten_tree

SEPARATORS = "=:"
WHITESPACE = " \t\f"
COMMENT_CHARS = "#!"

_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_REVERSE_ESCAPES = {"\t": "\\t", "\n": "\\n", "\r": "\\r", "\f": "\\f", "\\": "\\\\"}


def _ends_with_continuation(line: str) -> bool:
    backslashes = len(line) - len(line.rstrip("\\"))
    return backslashes % 2 == 1


def _logical_lines(text: str) -> Iterator[str]:
    pending: List[str] = []
    for raw_line in text.splitlines():
        line = raw_line.lstrip(WHITESPACE) if pending else raw_line
        if not pending:
            stripped = line.lstrip(WHITESPACE)
            if not stripped or stripped[0] in COMMENT_CHARS:
                continue
            line = stripped
        if _ends_with_continuation(line):
            pending.append(line[:-1])
            continue
        pending.append(line)
        yield "".join(pending)
        pending = []
    if pending:
        yield "".join(pending)


def _unescape(text: str) -> str:
    chars: List[str] = []
    i = 0
    while i < len(text):
        char = text[i]
        if char != "\\" or i + 1 >= len(text):
            chars.append(char)
            i += 1
            continue
        escaped = text[i + 1]
        if escaped == "u" and i + 6 <= len(text):
            try:
                chars.append(chr(int(text[i + 2:i + 6], 16)))
            except ValueError as e:
                raise ValueError(f"Malformed \\uXXXX escape in '{text}'") from e
            i += 6
            continue
        chars.append(_ESCAPES.get(escaped, escaped))
        i += 2
    return "".join(chars)


def parse_line(line: str) -> tuple:
    """
    Split one logical line into an unescaped ``(key, value)`` pair.

    Examples:
        >>> parse_line("retries = 3")
        ('retries', '3')
        >>> parse_line("path\\\\:to=x")
        ('path:to', 'x')
    """
    i = 0
    while i < len(line):
        char = line[i]
        if char == "\\":
            i += 2
            continue
        if char in SEPARATORS or char in WHITESPACE:
            break
        i += 1
    key = line[:i]

    rest = line[i:].lstrip(WHITESPACE)
    if rest and rest[0] in SEPARATORS:
        rest = rest[1:].lstrip(WHITESPACE)
    return _unescape(key), _unescape(rest)


def _escape(text: str, is_key: bool) -> str:
    chars: List[str] = []
    for index, char in enumerate(text):
        if char in _REVERSE_ESCAPES:
            chars.append(_REVERSE_ESCAPES[char])
        elif char in SEPARATORS or char in COMMENT_CHARS:
            chars.append("\\" + char if is_key or index == 0 else char)
        elif char == " " and (is_key or index == 0):
            chars.append("\\ ")
        else:
            chars.append(char)
    return "".join(chars)


class PropertiesAdapter(PersistenceAdapter):
    name = "properties"

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def load(self, source: Optional[Path]) -> Dict[str, Any]:
        text = Path(source).read_text(encoding=self.encoding)
        data: Dict[str, Any] = {}
        for line in _logical_lines(text):
            key, value = parse_line(line)
            data[key] = value
        return data

    def store(self, tree: Mapping[str, Any], destination: Path) -> None:
        lines = [f"{_escape(key, True)}={_escape(value, False)}"
                 for key, value in flatten_tree(tree).items()]
        Path(destination).write_text("\n".join(lines) + ("\n" if lines else ""), encoding=self.encoding)
