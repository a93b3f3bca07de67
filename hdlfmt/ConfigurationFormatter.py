from typing import List

from .Buffer import Buffer
from .errors import UnsupportedConstructError
from .TokenSource import Kind
from .VhdlCst import (
    BindingIndication,
    BlockConfiguration,
    ComponentConfiguration,
    ComponentSpecification,
    ConfigurationDeclaration,
    ConfigurationSpecification,
    EntityAspectConfiguration,
    EntityAspectEntity,
    EntityAspectOpen,
    InstantiationAll,
    InstantiationLabels,
    InstantiationOthers,
    VunitBindingIndication,
)


class ConfigurationFormatter:
    """Printers for configuration declarations and everything nested in them.

    Mixed into VhdlFormatter, which provides the token copy helpers
    (format_token_id, format_token_span, format_name, ...).
    """

    def format_configuration(self, configuration: ConfigurationDeclaration, buffer: Buffer):
        self.format_context_clause(configuration.context_clause, buffer)
        if configuration.context_clause:
            self.line_break_preserve_whitespace(configuration.context_clause[-1].span.end_token, buffer)
        # configuration cfg of entity_name is
        start = self.tokens.index_of(configuration.configuration_token)
        self.format_token_id(start, buffer, Kind.CONFIGURATION)
        buffer.push_whitespace()
        self.format_token_id(start + 1, buffer, Kind.NAME)
        buffer.push_whitespace()
        self.format_token_id(start + 2, buffer, Kind.OF)
        buffer.push_whitespace()
        self.format_token_id(start + 3, buffer, Kind.NAME)
        buffer.push_whitespace()
        self.format_token_id(start + 4, buffer, Kind.IS)
        with buffer.indented():
            self.format_declarations(configuration.decl, buffer)
            self.format_vunit_binding_indications(configuration.vunit_bind_inds, buffer)
            self.line_break_preserve_whitespace(configuration.block_config.span.start_token - 1, buffer)
            self.format_block_configuration(configuration.block_config, buffer)
            self.format_body_end_comments(self.tokens.index_of(configuration.end_token), buffer)
        buffer.line_break()
        # end [configuration] [cfg]
        end = self.tokens.index_of(configuration.end_token)
        self.format_token_id(end, buffer, Kind.END)
        for token_id in range(end + 1, configuration.span.end_token):
            buffer.push_whitespace()
            self.format_token_id(token_id, buffer, Kind.CONFIGURATION, Kind.NAME)
        # ;
        self.format_token_id(configuration.span.end_token, buffer, Kind.SEMI)

    def format_vunit_binding_indications(self, vunits: List[VunitBindingIndication], buffer: Buffer):
        for vunit_bind_ind in vunits:
            buffer.line_break()
            self.format_vunit_binding_indication(vunit_bind_ind, buffer)

    def format_block_configuration(self, config: BlockConfiguration, buffer: Buffer):
        if config.use_clauses:
            line = self.tokens[config.use_clauses[0].span.start_token].line
            raise UnsupportedConstructError(
                f"use clauses inside a block configuration (line {line}) cannot be formatted"
            )
        # for
        self.format_token_id(config.span.start_token, buffer, Kind.FOR)
        buffer.push_whitespace()
        self.format_name(config.block_spec, buffer)
        with buffer.indented():
            for item in config.items:
                self.line_break_preserve_whitespace(item.span.start_token - 1, buffer)
                if isinstance(item, BlockConfiguration):
                    self.format_block_configuration(item, buffer)
                elif isinstance(item, ComponentConfiguration):
                    self.format_component_configuration(item, buffer)
                else:
                    raise UnsupportedConstructError(f"unknown configuration item {type(item).__name__}")
            self.format_body_end_comments(self.tokens.index_of(config.end_token), buffer)
        buffer.line_break()
        self.format_end_for(config, buffer)

    def format_component_configuration(self, config: ComponentConfiguration, buffer: Buffer):
        if len(config.bind_inds) > 1:
            raise UnsupportedConstructError(
                f"component configuration at line {config.meta.line} has more than one binding indication"
            )
        self.format_component_specification(config.spec, buffer)
        with buffer.indented():
            if config.bind_ind is not None:
                buffer.line_break()
                self.format_binding_indication(config.bind_ind, buffer)
            self.format_vunit_binding_indications(config.vunit_bind_inds, buffer)
            if config.block_config is not None:
                buffer.line_break()
                self.format_block_configuration(config.block_config, buffer)
            self.format_body_end_comments(self.tokens.index_of(config.end_token), buffer)
        buffer.line_break()
        self.format_end_for(config, buffer)

    def format_end_for(self, config: BlockConfiguration | ComponentConfiguration, buffer: Buffer):
        end = self.tokens.index_of(config.end_token)
        # end
        self.format_token_id(end, buffer, Kind.END)
        buffer.push_whitespace()
        # for
        self.format_token_id(end + 1, buffer, Kind.FOR)
        # ;
        self.format_token_id(config.span.end_token, buffer, Kind.SEMI)

    def format_binding_indication(self, indication: BindingIndication, buffer: Buffer):
        # use
        self.format_token_id(indication.span.start_token, buffer, Kind.USE)
        aspect = indication.entity_aspect
        if aspect is not None:
            buffer.push_whitespace()
            # entity, configuration or open
            self.format_token_id(aspect.span.start_token, buffer, Kind.ENTITY, Kind.CONFIGURATION, Kind.OPEN)
            if isinstance(aspect, EntityAspectEntity):
                buffer.push_whitespace()
                self.format_name(aspect.entity_name, buffer)
                if aspect.architecture is not None:
                    arch = aspect.architecture.span.start_token
                    self.format_token_id(arch - 1, buffer, Kind.LPAR)
                    self.format_token_id(arch, buffer, Kind.NAME)
                    self.format_token_id(arch + 1, buffer, Kind.RPAR)
            elif isinstance(aspect, EntityAspectConfiguration):
                buffer.push_whitespace()
                self.format_name(aspect.configuration_name, buffer)
            elif isinstance(aspect, EntityAspectOpen):
                pass
            else:
                raise UnsupportedConstructError(f"unknown entity aspect {type(aspect).__name__}")
        if indication.generic_map is not None:
            with buffer.indented():
                buffer.line_break()
                self.format_map_aspect(indication.generic_map, buffer)
        if indication.port_map is not None:
            with buffer.indented():
                buffer.line_break()
                self.format_map_aspect(indication.port_map, buffer)
        # ;
        self.format_token_id(indication.span.end_token, buffer, Kind.SEMI)

    def format_configuration_specification(self, configuration: ConfigurationSpecification, buffer: Buffer):
        self.format_component_specification(configuration.spec, buffer)
        with buffer.indented():
            buffer.line_break()
            self.format_binding_indication(configuration.bind_ind, buffer)
            self.format_vunit_binding_indications(configuration.vunit_bind_inds, buffer)
            if configuration.end_token is not None:
                self.format_body_end_comments(self.tokens.index_of(configuration.end_token), buffer)
        if configuration.end_token is not None:
            buffer.line_break()
            self.format_end_for(configuration, buffer)

    def format_component_specification(self, spec: ComponentSpecification, buffer: Buffer):
        # for
        self.format_token_id(spec.span.start_token, buffer, Kind.FOR)
        buffer.push_whitespace()
        instantiation_list = spec.instantiation_list
        if isinstance(instantiation_list, InstantiationLabels):
            self.format_ident_list(instantiation_list.labels, buffer)
        elif isinstance(instantiation_list, InstantiationOthers):
            self.format_token_id(spec.span.start_token + 1, buffer, Kind.OTHERS)
        elif isinstance(instantiation_list, InstantiationAll):
            self.format_token_id(spec.span.start_token + 1, buffer, Kind.ALL)
        else:
            raise UnsupportedConstructError(f"unknown instantiation list {type(instantiation_list).__name__}")
        # :
        self.format_token_id(self.tokens.index_of(spec.colon_token), buffer, Kind.COLON)
        buffer.push_whitespace()
        self.format_name(spec.component_name, buffer)

    def format_vunit_binding_indication(self, vunit_binding_indication: VunitBindingIndication, buffer: Buffer):
        span = vunit_binding_indication.span
        # use
        self.format_token_id(span.start_token, buffer, Kind.USE)
        buffer.push_whitespace()
        # vunit
        self.format_token_id(span.start_token + 1, buffer, Kind.VUNIT)
        buffer.push_whitespace()
        for vunit in vunit_binding_indication.vunit_list:
            self.format_name(vunit, buffer)
            following = self.tokens.get_token(vunit.span.end_token + 1)
            if following is not None and following.kind == Kind.COMMA:
                self.format_token_id(following.id, buffer)
                buffer.push_whitespace()
        # ;
        self.format_token_id(span.end_token, buffer, Kind.SEMI)
