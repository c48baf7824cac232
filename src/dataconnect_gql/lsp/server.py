"""Data Connect GQL language server: diagnostics, hover and save-time codegen via pygls."""

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import unquote, urlparse

from lsprotocol import types
from pygls.lsp.server import LanguageServer

from dataconnect_gql.codegen import GQL_SUFFIX, codegen_for_saved_file
from dataconnect_gql.parsing import Field, GraphQLParser

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Static data
# ---------------------------------------------------------------------------

SCALAR_TYPES: dict[str, str] = {
    "String": "UTF-8 text",
    "Int": "Signed 32-bit integer",
    "Float": "Double-precision floating point number",
    "Boolean": "true or false",
    "ID": "Unique identifier",
}

UNRECOGNISED_DOCUMENT = "No GraphQL operation or type definition found"

# ---------------------------------------------------------------------------
# Helpers (module-level so they are easy to unit-test)
# ---------------------------------------------------------------------------


def uri_to_path(uri: str) -> Path:
    """Convert a ``file://`` URI into a filesystem path."""
    parsed = urlparse(uri)
    return Path(unquote(parsed.path))


def is_gql_document(uri: str) -> bool:
    return uri_to_path(uri).suffix == GQL_SUFFIX


def _word_at_position(line_text: str, character: int) -> str:
    """Return the contiguous identifier-like word surrounding *character*."""
    if character < 0 or character >= len(line_text):
        return ""
    ch = line_text[character]
    if not (ch.isalnum() or ch == "_"):
        return ""
    # Scan left
    left = character
    while left > 0 and (line_text[left - 1].isalnum() or line_text[left - 1] == "_"):
        left -= 1
    # Scan right
    right = character
    while right < len(line_text) and (line_text[right].isalnum() or line_text[right] == "_"):
        right += 1
    return line_text[left:right]


def _format_fields(title: str, fields: list[Field]) -> str:
    lines = [f"**{title}**", ""]
    lines.extend(f"- `{f.name}: {f.type}`" for f in fields)
    return "\n".join(lines)


def document_diagnostics(source: str) -> list[types.Diagnostic]:
    """Return diagnostics for a GraphQL document."""
    parser = GraphQLParser()
    if parser.parse(source) is not None or parser.parse_schema(source):
        return []
    start = types.Position(line=0, character=0)
    return [
        types.Diagnostic(
            range=types.Range(start=start, end=types.Position(line=0, character=1)),
            severity=types.DiagnosticSeverity.Warning,
            source="dataconnect-gql",
            message=UNRECOGNISED_DOCUMENT,
        )
    ]


def hover_text(source: str, word: str) -> str | None:
    """Describe *word* as a scalar, a schema type or a nested selection type."""
    if word in SCALAR_TYPES:
        return f"**{word}**: {SCALAR_TYPES[word]}"

    parser = GraphQLParser()
    for type_def in parser.parse_schema(source):
        if type_def.name == word:
            title = f"type {word} @table" if type_def.is_table else f"type {word}"
            return _format_fields(title, type_def.fields)

    operation = parser.parse(source)
    if operation is None:
        return None
    if word == operation.name:
        return _format_fields(f"{operation.kind.value} {word}", list(operation.fields))
    nested = parser.get_nested_fields(word)
    if nested is not None:
        return _format_fields(word, nested)
    return None


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------

server = LanguageServer("dataconnect-gql-language-server", "0.1.0")


@server.feature(types.TEXT_DOCUMENT_DID_OPEN)
def did_open(params: types.DidOpenTextDocumentParams) -> None:
    _validate_document(params.text_document.uri)


@server.feature(types.TEXT_DOCUMENT_DID_CHANGE)
def did_change(params: types.DidChangeTextDocumentParams) -> None:
    _validate_document(params.text_document.uri)


@server.feature(types.TEXT_DOCUMENT_DID_SAVE)
def did_save(params: types.DidSaveTextDocumentParams) -> None:
    uri = params.text_document.uri
    if not is_gql_document(uri):
        return
    root = server.workspace.root_path
    if root is None:
        logger.info("No workspace root; skipping codegen for %s", uri)
        return
    result = codegen_for_saved_file(uri_to_path(uri), root)
    if result is None:
        return
    server.window_show_message(
        types.ShowMessageParams(
            type=types.MessageType.Info if result.success else types.MessageType.Warning,
            message=result.message,
        )
    )


def _validate_document(uri: str) -> None:
    if not is_gql_document(uri):
        return
    doc = server.workspace.get_text_document(uri)
    server.text_document_publish_diagnostics(
        types.PublishDiagnosticsParams(uri=uri, diagnostics=document_diagnostics(doc.source))
    )


@server.feature(types.TEXT_DOCUMENT_HOVER)
def hover(params: types.HoverParams) -> types.Hover | None:
    doc = server.workspace.get_text_document(params.text_document.uri)
    if params.position.line >= len(doc.lines):
        return None
    line_text = doc.lines[params.position.line]
    word = _word_at_position(line_text, params.position.character)
    if not word:
        return None

    content = hover_text(doc.source, word)
    if content is None:
        return None
    return types.Hover(
        contents=types.MarkupContent(
            kind=types.MarkupKind.Markdown,
            value=content,
        )
    )


def main() -> None:
    server.start_io()


if __name__ == "__main__":
    main()
