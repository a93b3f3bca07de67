from contextlib import contextmanager
from typing import List

from .Options import FormatOptions
from .TokenSource import Comment, Token


class Buffer:
    """Append only text sink with scoped indentation.

    Indentation is written lazily when the first text of a line arrives, so
    blank lines never carry trailing whitespace. ``line_breaks(n)`` makes sure
    the current line is ended by ``n`` newlines, never more than
    ``max_blank_lines + 1``. Text that has to move to a new line because of a
    trailing comment is indented one extra level.
    """

    def __init__(self, options: FormatOptions | None = None):
        self.options = options or FormatOptions()
        self.indentation = 0
        self._chunks: List[str] = []
        self._at_line_start = True
        self._trailing_newlines = 0
        # set after a trailing comment, the next text must go on a new line
        self._needs_line_break = False

    def __str__(self):
        return "".join(self._chunks)

    @property
    def text(self):
        return str(self)

    @contextmanager
    def indented(self):
        self.indentation += 1
        try:
            yield self
        finally:
            self.indentation -= 1

    def _push_str(self, text: str):
        level = self.indentation
        if self._needs_line_break:
            self.line_break()
            level += 1
        if self._at_line_start:
            self._chunks.append(self.options.indent_unit * level)
            self._at_line_start = False
        self._chunks.append(text)
        self._trailing_newlines = 0

    def _strip_trailing_whitespace(self):
        while self._chunks and self._chunks[-1].endswith((" ", "\t")) and not self._at_line_start:
            stripped = self._chunks[-1].rstrip(" \t")
            if stripped:
                self._chunks[-1] = stripped
                break
            self._chunks.pop()

    def push_whitespace(self):
        if self._at_line_start or self._needs_line_break:
            return
        if self._chunks and self._chunks[-1].endswith(" "):
            return
        self._chunks.append(" ")

    def line_breaks(self, count: int):
        self._needs_line_break = False
        self._strip_trailing_whitespace()
        if not self._chunks:
            # nothing written yet, a leading newline would only add noise
            return
        missing = min(count, self.options.max_blank_lines + 1) - self._trailing_newlines
        if missing > 0:
            self._chunks.append("\n" * missing)
            self._trailing_newlines += missing
        self._at_line_start = True

    def line_break(self):
        self.line_breaks(1)

    def push_comments(self, comments: List[Comment]):
        # comments always sit on their own lines
        for comment in comments:
            if comment.blank_line_before:
                self.line_breaks(2)
            elif not self._at_line_start:
                self.line_break()
            self._push_str(comment.text)
            self.line_break()

    def push_leading_comments(self, token: Token):
        if not token.leading_comments:
            return
        self.push_comments(token.leading_comments)
        if token.blank_line_after_comments:
            self.line_breaks(2)

    def push_token(self, token: Token, leading_comments: bool = True):
        if leading_comments:
            self.push_leading_comments(token)
        self._push_str(token.text)
        if token.trailing_comment is not None:
            self.push_whitespace()
            self._chunks.append(token.trailing_comment.text)
            self._needs_line_break = True
