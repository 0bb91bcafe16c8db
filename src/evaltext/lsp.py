"""Minimal LSP server for eval string literals — diagnostics and hover."""

from __future__ import annotations

import logging

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_HOVER,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Hover,
    HoverParams,
    MarkupContent,
    MarkupKind,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from evaltext import __version__
from evaltext.decoder import EscapedTextDecoder, decode_or_raise
from evaltext.errors import DecodeError
from evaltext.literals import find_eval_literals
from evaltext.ranges import offset_at, position_at

logger = logging.getLogger(__name__)

server = LanguageServer(
    "evaltext-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)


def _lsp_position(source: str, offset: int) -> Position:
    """Host offset → 0-based LSP position."""
    pos = position_at(source, offset)
    return Position(line=pos.line - 1, character=pos.column - 1)


def _lsp_range(source: str, start: int, end: int) -> Range:
    return Range(start=_lsp_position(source, start), end=_lsp_position(source, end))


def collect_diagnostics(source: str) -> list[Diagnostic]:
    """Decode every eval literal in *source* and report the ones that fail."""
    diagnostics: list[Diagnostic] = []

    for lit in find_eval_literals(source):
        if not lit.terminated:
            quote = lit.content_range.start_offset - 1
            diagnostics.append(
                Diagnostic(
                    range=_lsp_range(source, quote, quote + 1),
                    message="unterminated string",
                    severity=DiagnosticSeverity.Warning,
                    source="evaltext",
                )
            )
        try:
            decode_or_raise(lit.content, lit.content_range, source)
        except DecodeError as exc:
            diagnostics.append(
                Diagnostic(
                    range=_lsp_range(source, exc.offset, exc.offset + exc.length),
                    message=exc.message,
                    severity=DiagnosticSeverity.Error,
                    source="evaltext",
                )
            )

    return diagnostics


def _validate(ls: LanguageServer, uri: str) -> None:
    """Check the document's eval literals and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    diagnostics = collect_diagnostics(doc.source)
    logger.debug("%s: publishing %d diagnostic(s)", uri, len(diagnostics))
    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


def _hover(ls: LanguageServer, params: HoverParams) -> Hover | None:
    """Show the decoded text of the eval literal under the cursor."""
    doc = ls.workspace.get_text_document(params.text_document.uri)
    source = doc.source
    offset = offset_at(source, params.position.line + 1, params.position.character + 1)

    for lit in find_eval_literals(source):
        if not lit.content_range.contains_offset(offset):
            continue
        decoder = EscapedTextDecoder(lit.content_range)
        if not decoder.decode(lit.content):
            return None
        text = decoder.decoded_text or ""
        start = decoder.get_offset_in_host(0)
        end = decoder.get_offset_in_host(len(text))
        return Hover(
            contents=MarkupContent(
                kind=MarkupKind.Markdown,
                value=f"**eval** string decodes to:\n\n```sh\n{text}\n```",
            ),
            range=_lsp_range(source, start, end),
        )
    return None


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_HOVER)
def hover(ls: LanguageServer, params: HoverParams) -> Hover | None:
    return _hover(ls, params)


def main() -> None:
    server.start_io()
