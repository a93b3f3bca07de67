from lark import Token, Transformer, Tree

from .TokenSource import TokenSource
from .VhdlCst import _VhdlCstNode


class Tokens(Transformer):
    # rules that only collect a repetition become plain lists
    context_clause = list
    configuration_declarative_part = list
    block_use_clauses = list
    configuration_items = list
    component_bindings = list
    vunit_bindings = list


class AddTokenSpans:
    """Record the token span of every CST node.

    Lark positions are character offsets; the formatter addresses tokens by
    their index in the TokenSource instead.
    """

    def __init__(self, tokens: TokenSource):
        self.tokens = tokens

    def visit(self, node: _VhdlCstNode):
        node.span = self.tokens.span_of(node.meta)
        for child in node.children:
            if isinstance(child, _VhdlCstNode):
                self.visit(child)
            elif isinstance(child, Tree):
                raise Exception(f"untransformed rule {child.data}! check VhdlCst")
            elif not isinstance(child, Token):
                raise Exception(f"bad CST child {type(child)}! check this code!")
        return node
