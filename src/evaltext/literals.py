"""Locate the double-quoted arguments of ``eval`` commands in a shell document."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from evaltext.ranges import ContentRange

logger = logging.getLogger(__name__)

# Characters that end an unquoted word
_WORD_BREAK = frozenset(" \t\n;&|()\"'\\")

_RESERVED_WORDS = frozenset({"if", "then", "do", "else", "elif", "while", "until", "!", "time"})

_ASSIGNMENT = re.compile(r"[A-Za-z_][A-Za-z0-9_]*(\[[^\]]*\])?\+?=")


@dataclass(frozen=True, slots=True)
class EvalLiteral:
    """Content of one quoted eval argument and where it sits in the document."""

    content: str
    content_range: ContentRange
    terminated: bool = True


class LiteralScanner:
    """Scan a shell document for the string arguments of ``eval``."""

    def __init__(self, document: str) -> None:
        self._source = document
        self._pos = 0
        self._literals: list[EvalLiteral] = []
        self._command_start = True
        self._in_eval = False

    def scan(self) -> list[EvalLiteral]:
        """Scan the whole document and return the literals in order."""
        while self._pos < len(self._source):
            ch = self._peek()

            if ch == "\n" or ch in ";&|":
                self._pos += 1
                self._end_command()
                continue

            if ch in "(){":
                self._pos += 1
                self._end_command()
                continue

            if ch in " \t":
                self._pos += 1
                continue

            if ch == "#":
                self._skip_comment()
                continue

            if ch == "\\":
                # Escaped character or line continuation
                self._pos = min(self._pos + 2, len(self._source))
                self._command_start = False
                continue

            if ch == '"':
                literal = self._lex_double_quoted()
                if self._in_eval:
                    self._literals.append(literal)
                self._command_start = False
                continue

            if ch == "'":
                self._skip_single_quoted()
                self._command_start = False
                continue

            self._lex_word()

        return self._literals

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _peek(self) -> str:
        return self._source[self._pos]

    def _end_command(self) -> None:
        self._command_start = True
        self._in_eval = False

    def _skip_comment(self) -> None:
        nl = self._source.find("\n", self._pos)
        self._pos = len(self._source) if nl < 0 else nl

    def _lex_word(self) -> None:
        start = self._pos
        while self._pos < len(self._source) and self._peek() not in _WORD_BREAK:
            self._pos += 1
        word = self._source[start : self._pos]

        if not self._command_start:
            return
        if word == "eval":
            self._in_eval = True
            self._command_start = False
        elif word in _RESERVED_WORDS:
            # The next word is still in command position
            pass
        elif _ASSIGNMENT.match(word):
            # Prefix assignments keep the command word position open
            self._skip_assignment_value()
        else:
            self._command_start = False

    def _skip_assignment_value(self) -> None:
        """Consume quoted parts of an assignment value, e.g. FOO="a b"c."""
        while self._pos < len(self._source):
            ch = self._peek()
            if ch == '"':
                self._lex_double_quoted()
            elif ch == "'":
                self._skip_single_quoted()
            elif ch == "\\":
                self._pos = min(self._pos + 2, len(self._source))
            elif ch not in _WORD_BREAK:
                self._pos += 1
            else:
                return

    def _lex_double_quoted(self) -> EvalLiteral:
        self._pos += 1  # opening quote
        content_start = self._pos

        while self._pos < len(self._source):
            ch = self._peek()
            if ch == "\\":
                self._pos = min(self._pos + 2, len(self._source))
                continue
            if ch == '"':
                content_end = self._pos
                self._pos += 1
                return EvalLiteral(
                    self._source[content_start:content_end],
                    ContentRange.from_bounds(content_start, content_end),
                )
            self._pos += 1

        logger.debug("unterminated double-quoted string at offset %d", content_start - 1)
        return EvalLiteral(
            self._source[content_start:],
            ContentRange.from_bounds(content_start, len(self._source)),
            terminated=False,
        )

    def _skip_single_quoted(self) -> None:
        close = self._source.find("'", self._pos + 1)
        self._pos = len(self._source) if close < 0 else close + 1


def find_eval_literals(document: str) -> list[EvalLiteral]:
    """Convenience function: return every eval string literal in *document*."""
    return LiteralScanner(document).scan()
