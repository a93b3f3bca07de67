import pytest

from hdlfmt.errors import TokenOffsetError, UnsupportedConstructError
from hdlfmt.Formatter import (
    VhdlFormatter,
    default_parser,
    format_configuration_specification_text,
    format_result,
    format_text,
)
from hdlfmt.Options import FormatOptions
from hdlfmt.TokenSource import Kind, TokenSpan


def fmt(text, **options):
    return format_text(text, FormatOptions(**options))


def check_formatted(text):
    # already formatted sources come back unchanged
    assert fmt(text) == text + "\n"


def check_normalized(text, expected):
    formatted = fmt(text)
    assert formatted == expected + "\n"
    assert fmt(formatted) == formatted


def test_configuration_end_forms():
    check_formatted(
        """\
configuration cfg of entity_name is
    for rtl(0)
    end for;
end;"""
    )
    check_formatted(
        """\
configuration cfg of entity_name is
    for rtl(0)
    end for;
end configuration cfg;"""
    )
    check_formatted(
        """\
configuration cfg of entity_name is
    for rtl(0)
    end for;
end configuration;"""
    )
    check_formatted(
        """\
configuration cfg of entity_name is
    for rtl(0)
    end for;
end cfg;"""
    )


def test_configuration_declarations():
    check_formatted(
        """\
configuration cfg of entity_name is
    use lib.foo.bar;
    use lib2.foo.bar;
    for rtl(0)
    end for;
end configuration cfg;"""
    )
    check_formatted(
        """\
configuration cfg of entity_name is
    use lib.foo.bar;
    use vunit baz.foobar;
    for rtl(0)
    end for;
end configuration cfg;"""
    )


def test_vunit_list():
    check_formatted(
        """\
configuration cfg of entity_name is
    use vunit a, lib.b, c;
    for rtl
    end for;
end configuration cfg;"""
    )


def test_nested_block_configurations():
    check_formatted(
        """\
configuration cfg of entity_name is
    for rtl(0)
        for name(0 to 3)
        end for;
        for other_name
        end for;
    end for;
end configuration cfg;"""
    )
    check_formatted(
        """\
configuration cfg of entity_name is
    for rtl(0)
        for name(0 to 3)
            for name(7 to 8)
            end for;
        end for;
        for other_name
        end for;
    end for;
end configuration cfg;"""
    )


def test_component_configurations():
    check_formatted(
        """\
configuration cfg of entity_name is
    for rtl(0)
        for inst: lib.pkg.comp
            for arch
            end for;
        end for;
    end for;
end configuration cfg;"""
    )
    check_formatted(
        """\
configuration cfg of entity_name is
    for rtl(0)
        for inst: lib.pkg.comp
            use entity work.bar;
            use vunit baz;
            for arch
            end for;
        end for;
    end for;
end configuration cfg;"""
    )
    check_formatted(
        """\
configuration cfg of entity_name is
    for rtl(0)
        for inst: lib.pkg.comp
        end for;
        for inst1, inst2, inst3: lib2.pkg.comp
        end for;
        for all: lib3.pkg.comp
        end for;
        for others: lib4.pkg.comp
        end for;
    end for;
end configuration cfg;"""
    )


def test_entity_aspects():
    check_formatted(
        """\
configuration cfg of entity_name is
    for foo
        for inst: lib.pkg.comp
            use entity lib.use_name;
        end for;
    end for;
end configuration cfg;"""
    )
    check_formatted(
        """\
configuration cfg of entity_name is
    for foo
        for inst: lib.pkg.comp
            use entity lib.foo.name(arch);
        end for;
    end for;
end configuration cfg;"""
    )
    check_formatted(
        """\
configuration cfg of entity_name is
    for foo
        for inst: lib.pkg.comp
            use configuration lib.foo.name;
        end for;
    end for;
end configuration cfg;"""
    )
    check_formatted(
        """\
configuration cfg of entity_name is
    for foo
        for inst: lib.pkg.comp
            use open;
        end for;
    end for;
end configuration cfg;"""
    )


def test_map_aspects():
    check_formatted(
        """\
configuration cfg of top is
    for rtl
        for u0: comp
            use entity work.foo(rtl)
                generic map (
                    WIDTH => 8,
                    OFFSET => -1
                )
                port map (
                    clk => clk,
                    data(7 downto 0) => bus_a(15 downto 8),
                    ready => open
                );
        end for;
    end for;
end configuration cfg;"""
    )


def test_map_aspect_without_entity_aspect():
    check_normalized(
        """\
configuration cfg of top is for rtl for u0 : comp use port map(a, b + 1); end for; end for; end;""",
        """\
configuration cfg of top is
    for rtl
        for u0: comp
            use
                port map (
                    a,
                    b + 1
                );
        end for;
    end for;
end;""",
    )


def test_irregular_whitespace_is_normalized():
    check_normalized(
        """\
configuration   cfg of entity_name is
for rtl(0)
for inst1 ,inst2,  inst3:lib2.pkg.comp
  use   entity  work . bar ( arch ) ;
end   for ;
  end for;
    end configuration cfg ;""",
        """\
configuration cfg of entity_name is
    for rtl(0)
        for inst1, inst2, inst3: lib2.pkg.comp
            use entity work.bar(arch);
        end for;
    end for;
end configuration cfg;""",
    )


def test_single_line_input():
    check_normalized(
        "configuration cfg of e is for rtl for all : c use entity work.c ; end for ; end for ; end ;",
        """\
configuration cfg of e is
    for rtl
        for all: c
            use entity work.c;
        end for;
    end for;
end;""",
    )


def test_case_is_preserved():
    check_normalized(
        "CONFIGURATION Cfg OF Top IS FOR Rtl END FOR; END CONFIGURATION Cfg;",
        """\
CONFIGURATION Cfg OF Top IS
    FOR Rtl
    END FOR;
END CONFIGURATION Cfg;""",
    )


def test_context_clause():
    check_formatted(
        """\
library ieee, work;
use ieee.std_logic_1164.all;

context work.ctx;
configuration cfg of top is
    for rtl
    end for;
end configuration cfg;"""
    )


def test_blank_lines_are_preserved_once():
    check_formatted(
        """\
configuration cfg of top is
    use work.pkg.all;

    for rtl
        for a: comp
        end for;

        for b: comp
        end for;
    end for;
end configuration cfg;"""
    )
    check_normalized(
        """\
configuration cfg of top is
    for rtl
        for a: comp
        end for;



        for b: comp
        end for;
    end for;
end configuration cfg;""",
        """\
configuration cfg of top is
    for rtl
        for a: comp
        end for;

        for b: comp
        end for;
    end for;
end configuration cfg;""",
    )


def test_blank_lines_can_be_disabled():
    formatted = fmt(
        """\
configuration cfg of top is
    for rtl
        for a: comp
        end for;

        for b: comp
        end for;
    end for;
end configuration cfg;""",
        max_blank_lines=0,
    )
    assert "\n\n" not in formatted


def test_comments():
    check_formatted(
        """\
-- configurations for the top level
configuration cfg of top is
    -- root block
    for rtl
        for u0: comp -- the only instance
            use entity work.foo;
        end for;

        -- second instance
        -- bound to the same entity
        for u1: comp
            use entity work.foo;
        end for; -- u1
    end for;
end configuration cfg;
-- end of file"""
    )


def test_comment_moves_following_text_to_new_line():
    check_normalized(
        """\
configuration cfg of top is for rtl -- block
end for; end;""",
        """\
configuration cfg of top is
    for rtl -- block
    end for;
end;""",
    )


def test_multiple_design_units():
    check_normalized(
        """\
configuration a of top is for rtl end for; end configuration a;
configuration b of top is for rtl end for; end configuration b;


configuration c of top is for rtl end for; end configuration c;""",
        """\
configuration a of top is
    for rtl
    end for;
end configuration a;

configuration b of top is
    for rtl
    end for;
end configuration b;

configuration c of top is
    for rtl
    end for;
end configuration c;""",
    )


def test_indent_options():
    text = "configuration cfg of top is for rtl for u0: comp end for; end for; end;"
    assert fmt(text, indent_width=2) == (
        """\
configuration cfg of top is
  for rtl
    for u0: comp
    end for;
  end for;
end;
"""
    )
    assert fmt(text, use_tabs=True) == (
        "configuration cfg of top is\n\tfor rtl\n\t\tfor u0: comp\n\t\tend for;\n\tend for;\nend;\n"
    )


def test_formatting_is_idempotent():
    text = """\
library ieee ;use ieee.std_logic_1164.all;
configuration cfg of top is
  use work.pkg.all; use vunit chk;
for rtl(0) -- root
 for u0 , u1 : work.comp use entity work.foo(rtl) generic map (N=>4) port map(clk=>clk, q=>open);
  use vunit chk2, chk3 ;
 end for;


for gen(1)
for others:comp use configuration work.cfg_comp; end for;
end for;
end for;
end configuration;
"""
    once = fmt(text)
    assert fmt(once) == once


def test_configuration_specification():
    parser = default_parser()
    assert (
        format_configuration_specification_text("for inst : comp use entity work.foo;", FormatOptions(), parser)
        == "for inst: comp\n    use entity work.foo;\n"
    )
    assert (
        format_configuration_specification_text("for inst:comp use entity work.foo; end for;", FormatOptions(), parser)
        == "for inst: comp\n    use entity work.foo;\nend for;\n"
    )
    assert format_configuration_specification_text(
        "for all: lib.comp use configuration work.cfg; use vunit v1, v2; end for;", FormatOptions(), parser
    ) == (
        """\
for all: lib.comp
    use configuration work.cfg;
    use vunit v1, v2;
end for;
"""
    )


def test_use_clause_in_block_is_unsupported():
    with pytest.raises(UnsupportedConstructError, match="line 3"):
        fmt(
            """\
configuration cfg of top is
    for rtl
        use work.pkg.all;
    end for;
end;"""
        )


def test_multiple_binding_indications_are_unsupported():
    with pytest.raises(UnsupportedConstructError, match="more than one binding indication"):
        fmt(
            """\
configuration cfg of top is
    for rtl
        for u0: comp
            use entity work.a;
            use entity work.b;
        end for;
    end for;
end;"""
        )


def test_offset_mismatch_is_detected():
    result = default_parser().parse("configuration cfg of top is for rtl end for; end;")
    block = result.cst.design_units[0].block_config
    # the span now ends on `for` instead of the closing `;`
    block.span = TokenSpan(block.span.start_token, block.span.end_token - 1)
    with pytest.raises(TokenOffsetError) as exc:
        format_result(result, FormatOptions())
    assert exc.value.expected == (Kind.SEMI,)
    assert exc.value.found.kind == Kind.FOR
    assert "expected SEMI" in str(exc.value)


def test_offset_out_of_range_is_detected():
    result = default_parser().parse("configuration cfg of top is for rtl end for; end;")
    formatter = VhdlFormatter(result.tokens)
    with pytest.raises(TokenOffsetError, match="out of range") as exc:
        formatter.token(len(result.tokens), Kind.SEMI)
    assert exc.value.found is None
    assert formatter.token(len(result.tokens) - 1, Kind.SEMI).text == ";"


def test_extended_identifiers():
    check_formatted(
        r"""configuration \my cfg\ of top is
    for \rtl x\
        for \u 0\, u1: work.\comp\
            use entity work.\foo bar\(\a\\b\);
        end for;
    end for;
end configuration \my cfg\;"""
    )


def test_qualified_expressions():
    check_formatted(
        """\
configuration cfg of top is
    for rtl
        for u0: comp
            use entity work.foo
                port map (
                    a => std_logic'('1'),
                    b => t'(others => '0'),
                    c => x'high
                );
        end for;
    end for;
end configuration cfg;"""
    )


def test_blank_line_after_header_comment():
    check_formatted(
        """\
-- file header

library ieee;
configuration cfg of top is
    for rtl
    end for;
end;"""
    )


def test_comments_before_end_stay_in_body():
    check_formatted(
        """\
configuration cfg of top is
    for rtl
        for u0: comp
            use entity work.foo;

            -- unbound for now
        end for;
        -- nothing else here
    end for;
    -- closing
end configuration cfg;"""
    )
    assert (
        format_configuration_specification_text(
            "for inst: comp use entity work.foo;\n-- pending\nend for;", FormatOptions(), default_parser()
        )
        == "for inst: comp\n    use entity work.foo;\n    -- pending\nend for;\n"
    )


def test_continuation_after_trailing_comment():
    check_formatted(
        """\
configuration cfg of top is
    use vunit a, -- first
        b;
    for rtl
        for u0, -- first
            u1: comp
        end for;
    end for;
end;"""
    )
