"""Line classification and scope tracking shared by the GraphQL scanners."""

from __future__ import annotations

import re
from collections.abc import Iterator
from enum import Enum

from dataconnect_gql.parsing.models import OperationHeader, OperationKind

BLOCK_COMMENT_DELIMITER = '"""'
LINE_COMMENT_PREFIX = "#"

OPERATION_HEADER_RE = re.compile(r"(query|mutation|subscription)\s+([a-zA-Z0-9_]+)")


class ScopeState(Enum):
    """Where a line sits relative to the operation being extracted."""

    OUTSIDE = "outside"
    IN_COMMENT = "in_comment"
    IN_OPERATION = "in_operation"
    IN_SELECTION = "in_selection"


class SchemaState(Enum):
    """States of the schema type-block scanner."""

    NONE = "none"
    IN_TYPE = "in_type"


def classify(in_comment: bool, line: str) -> tuple[bool, bool]:
    """Classify a trimmed line.

    Returns ``(is_live, in_comment)`` where ``in_comment`` is the block
    comment state after the line. ``#`` lines never change the state. A
    line holding the block delimiter is itself ignorable and flips the state
    when it holds an odd number of delimiters.
    """
    if line.startswith(LINE_COMMENT_PREFIX):
        return False, in_comment
    delimiters = line.count(BLOCK_COMMENT_DELIMITER)
    if delimiters:
        if delimiters % 2:
            in_comment = not in_comment
        return False, in_comment
    return not in_comment, in_comment


class CommentTracker:
    """Stateful wrapper around :func:`classify` for sequential scans."""

    def __init__(self) -> None:
        self.in_comment = False

    def feed(self, line: str) -> bool:
        """Feed the next line and return True if it is live."""
        is_live, self.in_comment = classify(self.in_comment, line.strip())
        return is_live


def live_lines(content: str) -> Iterator[tuple[int, str]]:
    """Yield ``(line_number, trimmed_line)`` for every live line of *content*."""
    tracker = CommentTracker()
    for line_number, line in enumerate(content.splitlines(), start=1):
        if tracker.feed(line):
            yield line_number, line.strip()


def find_operation_header(line: str) -> OperationHeader | None:
    """Match an operation header (kind followed by a name) anywhere in *line*."""
    m = OPERATION_HEADER_RE.search(line)
    if m is None:
        return None
    return OperationHeader(kind=OperationKind(m.group(1)), name=m.group(2))


class OperationScope:
    """Follows a single named operation through a document.

    The scope opens on a header naming the target operation and closes on a
    header naming any other operation. Brace depth inside the scope tells an
    operation line apart from a selection line.
    """

    def __init__(self, target: str) -> None:
        self.target = target
        self.state = ScopeState.OUTSIDE
        self._comments = CommentTracker()
        self._inside = False
        self._depth = 0

    def feed(self, line: str) -> ScopeState:
        """Advance over *line* and return the state that applies to it."""
        if not self._comments.feed(line):
            return ScopeState.IN_COMMENT

        text = line.strip()
        header = find_operation_header(text)
        if header is not None:
            self._inside = header.name == self.target
            self._depth = 0

        if not self._inside:
            self.state = ScopeState.OUTSIDE
            return self.state

        opened = text.count("{")
        self._depth = max(self._depth + opened - text.count("}"), 0)
        if self._depth > 0 or opened:
            self.state = ScopeState.IN_SELECTION
        else:
            self.state = ScopeState.IN_OPERATION
        return self.state


def scoped_lines(content: str, target: str) -> list[str]:
    """Return the trimmed live lines that belong to the *target* operation."""
    scope = OperationScope(target)
    lines: list[str] = []
    for line in content.splitlines():
        state = scope.feed(line)
        if state in (ScopeState.IN_OPERATION, ScopeState.IN_SELECTION):
            lines.append(line.strip())
    return lines
