# konjure_plugins/core_compiler/compressors.py
"""
Adapters around the third-party minifiers.

rjsmin and rcssmin do the actual compaction. They never wrap lines, so the
optional maximum line length is applied afterwards: once the current line
is longer than the limit, a newline is inserted after the next statement
(JS, ``;``) or rule (CSS, ``}``) terminator found outside a string or, for
JS, a regular expression literal.
"""
from typing import List, Optional, Tuple

import rcssmin
import rjsmin

from .contracts import CompressionResult, CompressorError, CompressorInterface, Diagnostic

# 在这些字符或关键字之后出现的 `/` 开始一个正则字面量，而不是除号
_REGEX_PRECEDERS = set("(,=:[!&|?{};+-*%<>~^")
_REGEX_KEYWORDS = {"return", "typeof", "case", "do", "else", "in", "instanceof", "new", "delete", "void", "throw", "yield"}


def _position(text: str, index: int) -> Tuple[int, int]:
    """1-based line and column of ``text[index]``."""
    line = text.count("\n", 0, index) + 1
    column = index - (text.rfind("\n", 0, index) + 1) + 1
    return line, column


def _is_word_char(ch: str) -> bool:
    return ch.isalnum() or ch in "_$"


def _opens_regex(prev: Optional[str], word: str) -> bool:
    if prev is None:
        return True
    if _is_word_char(prev):
        return word in _REGEX_KEYWORDS
    return prev in _REGEX_PRECEDERS


def break_lines(
    text: str,
    max_line_length: int,
    terminators: str,
    quotes: str = "\"'",
    regex_literals: bool = False,
) -> Tuple[str, Optional[int]]:
    """
    Re-breaks minified text. Returns the new text and, when a string literal
    is still open at the end, its starting index in the new text.

    With ``regex_literals`` set, a ``/`` in operand position opens a regular
    expression that runs to the next unescaped ``/`` outside a ``[...]``
    class; nothing inside it is treated as a quote or a terminator.
    """
    out: List[str] = []
    line_length = 0
    quote = None
    quote_start = None
    in_regex = False
    in_class = False
    escaped = False
    # 上一个有意义的字符，以及紧挨着它的标识符（用于区分正则与除号）
    prev: Optional[str] = None
    word = ""
    gap = False

    for ch in text:
        out.append(ch)
        if ch == "\n":
            line_length = 0
        else:
            line_length += 1

        if quote is not None or in_regex:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif quote is not None:
                if ch == quote:
                    quote = None
                    prev, word, gap = ch, "", False
            elif in_class:
                if ch == "]":
                    in_class = False
            elif ch == "[":
                in_class = True
            elif ch == "/":
                in_regex = False
                prev, word, gap = ")", "", False
            continue

        if ch.isspace():
            gap = True
            continue

        if ch in quotes:
            quote = ch
            quote_start = len(out) - 1
        elif regex_literals and ch == "/" and _opens_regex(prev, word):
            in_regex = True
            continue
        elif ch in terminators and 0 <= max_line_length < line_length:
            out.append("\n")
            line_length = 0

        if _is_word_char(ch):
            word = word + ch if prev is not None and _is_word_char(prev) and not gap else ch
        else:
            word = ""
        prev = ch
        gap = False

    return "".join(out), quote_start if quote is not None else None


def find_unclosed_comment(text: str, quotes: str = "\"'") -> int:
    """Index of a ``/*`` that is never closed, skipping quoted strings; -1 when every comment closes."""
    index = 0
    length = len(text)
    while index < length:
        ch = text[index]
        if ch in quotes:
            index += 1
            while index < length and text[index] != ch:
                index += 2 if text[index] == "\\" else 1
            index += 1
        elif text.startswith("/*", index):
            end = text.find("*/", index + 2)
            if end < 0:
                return index
            index = end + 2
        else:
            index += 1
    return -1


class JavaScriptCompressor(CompressorInterface):
    """Minifies script text with rjsmin."""

    def __init__(self, keep_bang_comments: bool = False):
        self.keep_bang_comments = keep_bang_comments

    def compress(self, text: str, max_line_length: int = -1) -> CompressionResult:
        try:
            minified = rjsmin.jsmin(text, keep_bang_comments=self.keep_bang_comments)
        except (TypeError, ValueError) as e:
            raise CompressorError(f"rjsmin failed: {e}") from e

        output, open_quote = break_lines(minified, max_line_length, ";", quotes="\"'`", regex_literals=True)
        diagnostics = []
        if open_quote is not None:
            line, column = _position(output, open_quote)
            diagnostics.append(Diagnostic(level="warning", message="unterminated string literal", line=line, column=column))
        return CompressionResult(output=output, diagnostics=diagnostics)


class CssCompressor(CompressorInterface):
    """Minifies style text with rcssmin."""

    def __init__(self, keep_bang_comments: bool = False):
        self.keep_bang_comments = keep_bang_comments

    def compress(self, text: str, max_line_length: int = -1) -> CompressionResult:
        diagnostics = []
        unclosed = find_unclosed_comment(text)
        if unclosed >= 0:
            line, column = _position(text, unclosed)
            diagnostics.append(Diagnostic(level="error", message="unterminated comment", line=line, column=column))

        try:
            minified = rcssmin.cssmin(text, keep_bang_comments=self.keep_bang_comments)
        except (TypeError, ValueError) as e:
            raise CompressorError(f"rcssmin failed: {e}") from e

        output, _ = break_lines(minified, max_line_length, "}")
        return CompressionResult(output=output, diagnostics=diagnostics)
