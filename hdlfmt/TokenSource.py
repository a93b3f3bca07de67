from __future__ import annotations  # for forward annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterable, List, Optional

from lark import Token as LarkToken
from lark.tree import Meta


logger = logging.getLogger(__name__)


class Kind(Enum):
    # reserved words
    CONFIGURATION = auto()
    END = auto()
    OF = auto()
    IS = auto()
    FOR = auto()
    USE = auto()
    VUNIT = auto()
    ENTITY = auto()
    OPEN = auto()
    GENERIC = auto()
    PORT = auto()
    MAP = auto()
    ALL = auto()
    OTHERS = auto()
    LIBRARY = auto()
    CONTEXT = auto()
    # delimiters
    ARROW = auto()
    LPAR = auto()
    RPAR = auto()
    COMMA = auto()
    SEMI = auto()
    DOT = auto()
    TICK = auto()
    COLON = auto()
    OPERATOR = auto()
    # lexemes
    BIT_STRING = auto()
    NAME = auto()
    NUMBER = auto()
    STRING = auto()
    CHARACTER = auto()

    @classmethod
    def from_terminal(cls, name: str) -> Kind:
        # filtered terminals are spelled with a leading underscore in the grammar
        name = name.lstrip("_")
        if name == "EXTENDED_NAME":
            # \extended identifiers\ print like basic ones
            return cls.NAME
        return cls[name]


@dataclass(frozen=True)
class TokenSpan:
    start_token: int
    end_token: int

    def __iter__(self):
        return iter(range(self.start_token, self.end_token + 1))

    def __len__(self):
        return self.end_token - self.start_token + 1


@dataclass
class Comment:
    text: str
    line: int
    blank_line_before: bool = False


@dataclass
class Token:
    id: int
    kind: Kind
    text: str
    start_pos: int
    end_pos: int
    line: int
    column: int
    leading_comments: List[Comment] = field(default_factory=list)
    trailing_comment: Optional[Comment] = None
    # a blank line separates this token (or its first leading comment) from the previous token
    blank_line_before: bool = False
    # a blank line separates the last leading comment from the token
    blank_line_after_comments: bool = False

    def __str__(self):
        return self.text


class TokenSource:
    """Indexable, trivia free view of the lexed source.

    Whitespace is dropped and comments are attached to the neighbouring
    tokens, so the formatter can copy a token together with its comments by
    id. Lark positions (``meta.start_pos``/``meta.end_pos`` and token
    ``start_pos``) are mapped back to ids for span computation.
    """

    def __init__(self, tokens: List[Token], final_comments: Optional[List[Comment]] = None):
        self.tokens = tokens
        self.final_comments = final_comments or []
        self._by_start = {t.start_pos: t.id for t in tokens}
        self._by_end = {t.end_pos: t.id for t in tokens}

    @classmethod
    def from_lexer(cls, stream: Iterable[LarkToken]) -> TokenSource:
        tokens: List[Token] = []
        pending: List[Comment] = []
        newlines = 0
        blank_before_pending = False

        for lt in stream:
            if lt.type == "WS":
                newlines += lt.value.count("\n")
                continue

            if lt.type == "COMMENT":
                comment = Comment(lt.value.rstrip(), lt.line, blank_line_before=newlines >= 2)
                if tokens and newlines == 0 and not pending and tokens[-1].trailing_comment is None:
                    tokens[-1].trailing_comment = comment
                else:
                    if not pending:
                        blank_before_pending = bool(tokens) and newlines >= 2
                    pending.append(comment)
                newlines = 0
                continue

            if pending:
                blank = blank_before_pending
            else:
                blank = bool(tokens) and newlines >= 2
            tokens.append(
                Token(
                    id=len(tokens),
                    kind=Kind.from_terminal(lt.type),
                    text=lt.value,
                    start_pos=lt.start_pos,
                    end_pos=lt.end_pos,
                    line=lt.line,
                    column=lt.column,
                    leading_comments=pending,
                    blank_line_before=blank,
                    blank_line_after_comments=bool(pending) and newlines >= 2,
                )
            )
            pending = []
            newlines = 0

        logger.debug("lexed %d tokens, %d trailing comments", len(tokens), len(pending))
        return cls(tokens, pending)

    def __len__(self):
        return len(self.tokens)

    def __getitem__(self, token_id: int) -> Token:
        return self.tokens[token_id]

    def get_token(self, token_id: int) -> Token | None:
        if 0 <= token_id < len(self.tokens):
            return self.tokens[token_id]
        return None

    def index_of(self, token: LarkToken) -> int:
        return self._by_start[token.start_pos]

    def span_of(self, meta: Meta) -> TokenSpan:
        return TokenSpan(self._by_start[meta.start_pos], self._by_end[meta.end_pos])
