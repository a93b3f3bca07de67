import logging
from functools import lru_cache
from typing import List

from .Buffer import Buffer
from .ConfigurationFormatter import ConfigurationFormatter
from .errors import TokenOffsetError
from .Options import FormatOptions
from .Parser import ParseResult, VhdlParser
from .TokenSource import Kind, Token, TokenSource, TokenSpan
from .VhdlCst import ConfigurationSpecification, ContextItem, DesignFile, MapAspect, UseClause, _VhdlCstNode


log = logging.getLogger(__name__)


def _needs_space(before: Token | None, prev: Token | None, cur: Token) -> bool:
    # whitespace rule for names, expressions and clauses copied as a token run
    if prev is None:
        return False
    if cur.kind in (Kind.RPAR, Kind.COMMA, Kind.SEMI, Kind.DOT, Kind.TICK):
        return False
    if prev.kind in (Kind.LPAR, Kind.DOT, Kind.TICK):
        return False
    if cur.kind == Kind.LPAR:
        # call or index, f(x) and rtl(0)
        return prev.kind not in (Kind.NAME, Kind.RPAR, Kind.STRING)
    if prev.kind == Kind.OPERATOR and prev.text in ("+", "-"):
        # unary sign
        if before is None or before.kind in (Kind.LPAR, Kind.COMMA, Kind.ARROW, Kind.OPERATOR):
            return False
    return True


class VhdlFormatter(ConfigurationFormatter):
    def __init__(self, tokens: TokenSource):
        self.tokens = tokens
        # ids whose leading comments were already printed by format_body_end_comments
        self._comments_pushed = set()

    def token(self, token_id: int, *kinds: Kind) -> Token:
        token = self.tokens.get_token(token_id)
        if token is None or (kinds and token.kind not in kinds):
            raise TokenOffsetError(token_id, kinds, token)
        return token

    def format_token_id(self, token_id: int, buffer: Buffer, *kinds: Kind):
        buffer.push_token(self.token(token_id, *kinds), token_id not in self._comments_pushed)

    def format_token_span(self, span: TokenSpan, buffer: Buffer):
        before = prev = None
        for token_id in span:
            token = self.token(token_id)
            if _needs_space(before, prev, token):
                buffer.push_whitespace()
            buffer.push_token(token)
            before, prev = prev, token

    def format_name(self, name: _VhdlCstNode, buffer: Buffer):
        self.format_token_span(name.span, buffer)

    def format_ident_list(self, idents: List[_VhdlCstNode], buffer: Buffer):
        for i, ident in enumerate(idents):
            self.format_name(ident, buffer)
            if i < len(idents) - 1:
                # ,
                self.format_token_id(ident.span.end_token + 1, buffer, Kind.COMMA)
                buffer.push_whitespace()

    def line_break_preserve_whitespace(self, token_id: int, buffer: Buffer):
        following = self.tokens.get_token(token_id + 1)
        if following is not None and following.blank_line_before:
            buffer.line_breaks(2)
        else:
            buffer.line_break()

    def format_body_end_comments(self, token_id: int, buffer: Buffer):
        # comments in front of a closing `end` are indented with the body they close
        token = self.token(token_id, Kind.END)
        if token.leading_comments:
            self.line_break_preserve_whitespace(token_id - 1, buffer)
            buffer.push_leading_comments(token)
            self._comments_pushed.add(token_id)

    def format_context_clause(self, items: List[ContextItem], buffer: Buffer):
        for i, item in enumerate(items):
            self.format_token_span(item.span, buffer)
            if i < len(items) - 1:
                self.line_break_preserve_whitespace(item.span.end_token, buffer)

    def format_declarations(self, declarations: List[UseClause], buffer: Buffer):
        if not declarations:
            return
        buffer.line_break()
        for i, item in enumerate(declarations):
            self.format_token_span(item.span, buffer)
            if i < len(declarations) - 1:
                self.line_break_preserve_whitespace(item.span.end_token, buffer)

    def format_map_aspect(self, aspect: MapAspect, buffer: Buffer):
        start = aspect.span.start_token
        # generic or port
        self.format_token_id(start, buffer, Kind.GENERIC, Kind.PORT)
        buffer.push_whitespace()
        # map
        self.format_token_id(start + 1, buffer, Kind.MAP)
        buffer.push_whitespace()
        # (
        self.format_token_id(start + 2, buffer, Kind.LPAR)
        with buffer.indented():
            for i, element in enumerate(aspect.elements):
                buffer.line_break()
                self.format_token_span(element.span, buffer)
                if i < len(aspect.elements) - 1:
                    # ,
                    self.format_token_id(element.span.end_token + 1, buffer, Kind.COMMA)
        buffer.line_break()
        # )
        self.format_token_id(aspect.span.end_token, buffer, Kind.RPAR)

    def format_design_file(self, design_file: DesignFile, buffer: Buffer):
        for i, unit in enumerate(design_file.design_units):
            if i > 0:
                buffer.line_breaks(2)
            self.format_configuration(unit, buffer)
        if self.tokens.final_comments:
            buffer.line_break()
            buffer.push_comments(self.tokens.final_comments)


@lru_cache(maxsize=None)
def default_parser():
    return VhdlParser()


def format_result(result: ParseResult, options: FormatOptions | None = None) -> str:
    buffer = Buffer(options or FormatOptions.from_env())
    formatter = VhdlFormatter(result.tokens)
    if isinstance(result.cst, ConfigurationSpecification):
        formatter.format_configuration_specification(result.cst, buffer)
        if result.tokens.final_comments:
            buffer.line_break()
            buffer.push_comments(result.tokens.final_comments)
    else:
        formatter.format_design_file(result.cst, buffer)
    log.debug("formatted %d tokens", len(result.tokens))
    return buffer.text.rstrip("\n") + "\n"


def _format(text, start, options, parser):
    return format_result((parser or default_parser()).parse(text, start=start), options)


def format_text(text: str, options: FormatOptions | None = None, parser: VhdlParser | None = None) -> str:
    return _format(text, "design_file", options, parser)


def format_configuration_specification_text(
    text: str, options: FormatOptions | None = None, parser: VhdlParser | None = None
) -> str:
    return _format(text, "configuration_specification", options, parser)
