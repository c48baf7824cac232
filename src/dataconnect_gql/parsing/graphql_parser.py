"""Line-oriented scanner for GraphQL operations and schema type blocks."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator

from dataconnect_gql.parsing.models import (
    DEFAULT_SCALAR_TYPE,
    OBJECT_TYPE,
    Field,
    NestedFieldRegistry,
    Operation,
    OperationHeader,
    TypeDefinition,
    Variable,
)
from dataconnect_gql.parsing.scanner import (
    OPERATION_HEADER_RE,
    SchemaState,
    find_operation_header,
    live_lines,
    scoped_lines,
)

logger = logging.getLogger(__name__)

VARIABLE_RE = re.compile(r"\$([a-zA-Z0-9_]+)\s*:\s*([a-zA-Z0-9_\[\]!]+)")

_NAME = r"[a-zA-Z0-9_]+"
_ARGS = r"\([^)]*\)"
_DIRECTIVES = r"(?:\s*@[a-zA-Z0-9_]+\s*(?:\([^)]*\))?)*"

# [alias:] name(args) @dir { ...   or   [alias:] name { ...
SELECTION_RE = re.compile(
    rf"^(?:({_NAME})\s*:\s*)?({_NAME})\s*(?:{_ARGS})?{_DIRECTIVES}\s*\{{(.*)$"
)
# name   name: Type   name(args)   name @dir
SIMPLE_FIELD_RE = re.compile(
    rf"^({_NAME})\s*(?:{_ARGS})?{_DIRECTIVES}\s*(?::\s*([a-zA-Z0-9_\[\]!]+))?\s*,?$"
)
# alias: name(args) @dir
ALIASED_FIELD_RE = re.compile(
    rf"^({_NAME})\s*:\s*{_NAME}\s*(?:{_ARGS})?{_DIRECTIVES}\s*,?$"
)

TYPE_HEADER_RE = re.compile(r"^type\s+([a-zA-Z0-9_]+)(.*)$")
TABLE_DIRECTIVE_RE = re.compile(r"@table\b")
SCHEMA_FIELD_RE = re.compile(
    r"([a-zA-Z0-9_]+)\s*(?:\([^)]*\))?\s*:\s*(\[*[a-zA-Z_][a-zA-Z0-9_\[\]!]*)"
)


def _strip_trailing_comment(text: str) -> str:
    """Cut *text* at the first ``#`` that is not inside a string literal."""
    in_string = False
    escape_next = False
    for pos, ch in enumerate(text):
        if escape_next:
            escape_next = False
        elif ch == "\\" and in_string:
            escape_next = True
        elif ch == '"':
            in_string = not in_string
        elif ch == "#" and not in_string:
            return text[:pos]
    return text


def synthesize_type_name(owner: str, field_name: str) -> str:
    """Name the shape of a nested selection: owner + capitalized field name."""
    return owner + field_name[:1].upper() + field_name[1:]


def _take_block(first: str, rest: list[str]) -> tuple[list[str], int, bool]:
    """Collect the body of a block whose opening brace precedes *first*.

    Returns the body lines, the number of lines of *rest* consumed and
    whether the closing brace was found. Text after the closing brace is
    dropped.
    """
    depth = 1
    body: list[str] = []
    for consumed, text in enumerate([first, *rest]):
        for pos, ch in enumerate(text):
            if ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    body.append(text[:pos])
                    return body, consumed, True
        body.append(text)
    return body, len(rest), False


def _logical_lines(lines: Iterable[str]) -> Iterator[str]:
    """Join physical lines while a parenthesis is left open."""
    pending: list[str] = []
    depth = 0
    for line in lines:
        text = _strip_trailing_comment(line).strip()
        if not text and not pending:
            continue
        pending.append(text)
        depth += text.count("(") - text.count(")")
        if depth <= 0:
            yield " ".join(pending)
            pending = []
            depth = 0
    if pending:
        yield " ".join(pending)


class GraphQLParser:
    """Extracts operations and schema types from GraphQL documents.

    Nested selection fields found by :meth:`parse` accumulate in
    :attr:`nested_fields` for the lifetime of the instance. Use one
    instance per document when results must not mix.
    """

    def __init__(self) -> None:
        self.nested_fields = NestedFieldRegistry()

    def parse(self, content: str) -> Operation | None:
        """Parse the first operation of *content*, or return None."""
        header = self._find_header(content)
        if header is None:
            logger.debug("No operation header found")
            return None

        lines = scoped_lines(content, header.name)
        variables = self._extract_variables(lines)
        fields = self._extract_fields(lines, header.name)
        return Operation(
            kind=header.kind,
            name=header.name,
            variables=tuple(variables),
            fields=tuple(fields),
        )

    def get_nested_fields(self, type_name: str) -> list[Field] | None:
        """Look up the fields of a synthesized nested type."""
        return self.nested_fields.get(type_name)

    def parse_schema(self, content: str) -> list[TypeDefinition]:
        """Collect every ``type Name [@table] { ... }`` block of *content*.

        A block still open at the end of the document is not returned.
        """
        definitions: list[TypeDefinition] = []
        state = SchemaState.NONE
        current: TypeDefinition | None = None

        for line_number, line in live_lines(content):
            m = TYPE_HEADER_RE.match(line)
            if m is not None:
                if state is SchemaState.IN_TYPE and current is not None:
                    logger.debug(
                        "Type '%s' not closed before line %d", current.name, line_number
                    )
                    definitions.append(current)
                name, rest = m.groups()
                before, _, after = rest.partition("{")
                current = TypeDefinition(
                    name=name, is_table=TABLE_DIRECTIVE_RE.search(before) is not None
                )
                current.fields.extend(self._schema_fields(after))
                state = SchemaState.IN_TYPE
                continue

            if state is SchemaState.IN_TYPE and current is not None:
                if line == "}":
                    definitions.append(current)
                    current = None
                    state = SchemaState.NONE
                else:
                    current.fields.extend(self._schema_fields(line))

        if current is not None:
            logger.debug("Dropping unterminated type '%s'", current.name)
        return definitions

    def _find_header(self, content: str) -> OperationHeader | None:
        for _, line in live_lines(content):
            header = find_operation_header(line)
            if header is not None:
                return header
        return None

    def _extract_variables(self, lines: list[str]) -> list[Variable]:
        seen: dict[Variable, None] = {}
        for line in lines:
            for m in VARIABLE_RE.finditer(line):
                seen.setdefault(Variable(name=m.group(1), type=m.group(2)), None)
        return list(seen)

    def _extract_fields(self, lines: list[str], operation_name: str) -> list[Field]:
        if not lines:
            return []
        m = OPERATION_HEADER_RE.search(lines[0])
        remainder = [lines[0][m.end():] if m else lines[0], *lines[1:]]

        for index, text in enumerate(remainder):
            if "{" in text:
                after = text.split("{", 1)[1]
                body, _, closed = _take_block(after, remainder[index + 1:])
                if not closed:
                    logger.debug("Selection set of '%s' is not closed", operation_name)
                return self._scan_selection(body, operation_name)

        logger.debug("Operation '%s' has no selection set", operation_name)
        return []

    def _scan_selection(self, lines: list[str], owner: str) -> list[Field]:
        """Scan one selection scope, recursing into multi-line selections."""
        logical = list(_logical_lines(lines))
        fields: list[Field] = []
        names: set[str] = set()

        index = 0
        while index < len(logical):
            text = logical[index]
            index += 1

            selection = SELECTION_RE.match(text)
            if selection is not None:
                alias, field_name, after = selection.groups()
                name = alias or field_name
                body, consumed, _ = _take_block(after, logical[index:])
                index += consumed
                if name in names:
                    continue
                names.add(name)
                fields.append(self._selection_field(name, owner, body, consumed > 0))
                continue

            simple = SIMPLE_FIELD_RE.match(text)
            aliased = ALIASED_FIELD_RE.match(text) if simple is None else None
            if simple is not None or aliased is not None:
                if simple is not None:
                    name, type_name = simple.groups()
                else:
                    name, type_name = aliased.group(1), None
                if name not in names:
                    names.add(name)
                    fields.append(Field(name=name, type=type_name or DEFAULT_SCALAR_TYPE))
            elif text.count("{") > text.count("}"):
                # Unrecognised line opening a block: skip the whole block.
                _, consumed, _ = _take_block(text.split("{", 1)[1], logical[index:])
                index += consumed
            else:
                logger.debug("Skipping unrecognised selection line: %r", text)

        return fields

    def _selection_field(
        self, name: str, owner: str, body: list[str], multiline: bool
    ) -> Field:
        if not multiline:
            return Field(name=name, type=OBJECT_TYPE)

        type_name = synthesize_type_name(owner, name)
        nested = self._scan_selection(body, type_name)
        if not nested:
            return Field(name=name, type=OBJECT_TYPE)

        self.nested_fields.register(type_name, nested)
        return Field(name=name, type=type_name, selections=tuple(nested))

    def _schema_fields(self, text: str) -> list[Field]:
        return [
            Field(name=m.group(1), type=m.group(2))
            for m in SCHEMA_FIELD_RE.finditer(text)
        ]
