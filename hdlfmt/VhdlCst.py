from __future__ import annotations  # for forward annotations

from dataclasses import field, fields
from os import getenv
from re import sub
from typing import List

from lark import Token, ast_utils
from lark.tree import Meta

if getenv("DEBUG"):
    # check datatypes with pydantic, somewhat slower
    from pydantic import ConfigDict
    from pydantic.dataclasses import dataclass

    dataclass = dataclass(config=ConfigDict(arbitrary_types_allowed=True))
else:
    from dataclasses import dataclass


def camel2snake(name):
    return sub(r"([a-z])([A-Z])", r"\1_\2", name).lower()


# Base class for CST nodes to get picked up by lark
# This will be skipped by create_transformer(), because it starts with an underscore
@dataclass
class _VhdlCstNode(ast_utils.Ast, ast_utils.WithMeta):
    meta: Meta = field(repr=False, compare=False)

    # TokenSpan set by VhdlTransformers.AddTokenSpans, must stay out of the dataclass fields
    span = None

    @property
    def children(self):
        children = []
        for field_meta in fields(self):
            if field_meta.name == "meta":
                continue
            field_val = getattr(self, field_meta.name)
            if isinstance(field_val, list):
                children += field_val
            elif field_val is not None:
                children.append(field_val)
        return children

    def iter_subtrees(self):
        yield self
        for c in self.children:
            if isinstance(c, _VhdlCstNode):
                yield from c.iter_subtrees()

    def find_type(self, node_type):
        return (n for n in self.iter_subtrees() if isinstance(n, node_type))

    # return a rich.tree.Tree for pretty printing
    def rich_tree(self, label=None):
        from rich.markup import escape
        from rich.tree import Tree as RichTree

        def field2tree(name, field_val):
            if isinstance(field_val, _VhdlCstNode):
                return field_val.rich_tree(name)
            elif isinstance(field_val, list):
                list_branch = RichTree(f"[blue]{name}[{len(field_val)} items]")
                for ii, list_item in enumerate(field_val):
                    list_branch.children.append(field2tree(f"{name}[{ii}]", list_item))
                return list_branch
            elif isinstance(field_val, Token):
                return RichTree(
                    f"{name} [green]{escape(str(field_val))}[/green] line {field_val.line} char {field_val.column}"
                )
            elif field_val is None:
                return RichTree(f"{name} [green]None[/green]")
            else:
                raise ValueError(f"unknown CST item: {field_val!r}")

        node_name = camel2snake(type(self).__name__)
        span = f" tokens {self.span.start_token}..{self.span.end_token}" if self.span else ""
        branch = RichTree(f"{label} [ {node_name} ]{span}" if label else f"{node_name}{span}")
        for field_meta in fields(self):
            if field_meta.name == "meta":
                continue
            branch.children.append(field2tree(field_meta.name, getattr(self, field_meta.name)))
        return branch


# subclass of _VhdlCstNode that takes a single argument that's a list of subTrees/Tokens
@dataclass
class _VhdlCstListNode(_VhdlCstNode, ast_utils.AsList):
    pass


@dataclass
class Identifier(_VhdlCstNode):
    id: Token

    def __str__(self):
        return str(self.id)


@dataclass
class SelectedName(_VhdlCstListNode):
    # `all` suffixes are not kept, the span still covers them
    parts: List[Identifier]


@dataclass
class Expression(_VhdlCstListNode):
    tokens: List[Token]


@dataclass
class LibraryClause(_VhdlCstListNode):
    logical_names: List[Identifier]


@dataclass
class UseClause(_VhdlCstListNode):
    selected_names: List[SelectedName]


@dataclass
class ContextReference(_VhdlCstListNode):
    selected_names: List[SelectedName]


ContextItem = LibraryClause | UseClause | ContextReference


@dataclass
class AssociationElement(_VhdlCstNode):
    first: Expression
    second: Expression | None

    @property
    def formal(self):
        return self.first if self.second is not None else None

    @property
    def actual(self):
        return self.second if self.second is not None else self.first


@dataclass
class GenericMapAspect(_VhdlCstListNode):
    elements: List[AssociationElement]


@dataclass
class PortMapAspect(_VhdlCstListNode):
    elements: List[AssociationElement]


MapAspect = GenericMapAspect | PortMapAspect


@dataclass
class EntityAspectEntity(_VhdlCstNode):
    entity_name: SelectedName
    architecture: Identifier | None


@dataclass
class EntityAspectConfiguration(_VhdlCstNode):
    keyword: Token
    configuration_name: SelectedName


@dataclass
class EntityAspectOpen(_VhdlCstNode):
    pass


EntityAspect = EntityAspectEntity | EntityAspectConfiguration | EntityAspectOpen


@dataclass
class BindingIndication(_VhdlCstNode):
    entity_aspect: EntityAspect | None
    generic_map: GenericMapAspect | None
    port_map: PortMapAspect | None


@dataclass
class VunitBindingIndication(_VhdlCstListNode):
    vunit_list: List[SelectedName]


@dataclass
class InstantiationLabels(_VhdlCstListNode):
    labels: List[Identifier]


@dataclass
class InstantiationOthers(_VhdlCstNode):
    pass


@dataclass
class InstantiationAll(_VhdlCstNode):
    pass


InstantiationList = InstantiationLabels | InstantiationOthers | InstantiationAll


@dataclass
class ComponentSpecification(_VhdlCstNode):
    instantiation_list: InstantiationList
    colon_token: Token
    component_name: SelectedName


@dataclass
class BlockSpecification(_VhdlCstNode):
    identifier: Identifier
    index: Expression | None


@dataclass
class ComponentConfiguration(_VhdlCstNode):
    spec: ComponentSpecification
    # binding indication and vunit bindings in source order
    bindings: List[BindingIndication | VunitBindingIndication]
    block_config: BlockConfiguration | None
    end_token: Token

    @property
    def bind_inds(self):
        return [b for b in self.bindings if isinstance(b, BindingIndication)]

    @property
    def bind_ind(self):
        bind_inds = self.bind_inds
        return bind_inds[0] if bind_inds else None

    @property
    def vunit_bind_inds(self):
        return [b for b in self.bindings if isinstance(b, VunitBindingIndication)]


@dataclass
class BlockConfiguration(_VhdlCstNode):
    block_spec: BlockSpecification
    use_clauses: List[UseClause]
    items: List[ConfigurationItem]
    end_token: Token


ConfigurationItem = BlockConfiguration | ComponentConfiguration


@dataclass
class ConfigurationDeclaration(_VhdlCstNode):
    context_clause: List[ContextItem]
    configuration_token: Token
    identifier: Identifier
    entity_name: Identifier
    # use clauses and vunit bindings in source order
    declarative_part: List[UseClause | VunitBindingIndication]
    block_config: BlockConfiguration
    end_token: Token
    end_configuration: Token | None
    end_identifier: Identifier | None

    @property
    def decl(self):
        return [d for d in self.declarative_part if not isinstance(d, VunitBindingIndication)]

    @property
    def vunit_bind_inds(self):
        return [d for d in self.declarative_part if isinstance(d, VunitBindingIndication)]


@dataclass
class ConfigurationSpecification(_VhdlCstNode):
    spec: ComponentSpecification
    bind_ind: BindingIndication
    vunit_bind_inds: List[VunitBindingIndication]
    end_token: Token | None


@dataclass
class DesignFile(_VhdlCstListNode):
    design_units: List[ConfigurationDeclaration]
