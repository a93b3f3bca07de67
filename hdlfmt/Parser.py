import logging
from dataclasses import dataclass
from io import TextIOBase
from pathlib import Path
from typing import List

from lark import Lark, logger, ast_utils

from . import VhdlCst
from . import VhdlTransformers
from .TokenSource import TokenSource


log = logging.getLogger(__name__)

vhdl_fileext = ["vhd", "vhdl", "vht"]


def filetype(fpath: Path):
    fileext = fpath.suffix[1:].lower()
    if fileext in vhdl_fileext:
        return "VHDL"
    else:
        return fileext.upper()


def collect_files(include: List[Path], exclude: List[Path]):
    def is_excluded(test: Path):
        for ex in exclude:
            if test.is_relative_to(ex):
                return True
        return False

    files = []
    for inpath in include:
        if inpath.is_file() and not is_excluded(inpath):
            files.append(inpath)
        elif inpath.is_dir() and not is_excluded(inpath):
            for ext in vhdl_fileext:
                for infile in sorted(inpath.rglob("*." + ext)):
                    if infile.is_file() and not is_excluded(infile):
                        files.append(infile)
    return files


@dataclass
class ParseResult:
    text: str
    cst: VhdlCst._VhdlCstNode
    tokens: TokenSource
    path: Path | None = None


class VhdlParser:
    def __init__(self, use_regex=True, debug=False):
        if debug:
            logger.setLevel(logging.DEBUG)

        self.parser = Lark(
            (Path(__file__).parent / "vhdl-configuration.lark").read_text(encoding="latin-1"),
            start=["design_file", "configuration_specification"],
            parser="lalr",
            lexer="basic",
            regex=use_regex,
            debug=debug,
            maybe_placeholders=True,
            propagate_positions=True,
        )
        self.csttransformer = ast_utils.create_transformer(VhdlCst, VhdlTransformers.Tokens())

    def parse_file(self, fpath: TextIOBase | Path | str):
        if isinstance(fpath, str):
            fpath = Path(fpath)

        if isinstance(fpath, Path):
            txt = fpath.read_text("latin-1")
        elif isinstance(fpath, TextIOBase):
            txt = fpath.read()
        else:
            raise ValueError(f"cannot read VHDL from {fpath!r}")
        p = self.parse(txt)
        p.path = fpath
        return p

    def parse(self, txt: str, start: str = "design_file"):
        # the lexer runs a second time keeping whitespace and comments, the
        # token ids of that stream are what the formatter copies from
        tokens = TokenSource.from_lexer(self.parser.lex(txt, dont_ignore=True))

        parse_tree = self.parser.parse(txt, start=start)

        # convert parse tree to custom format
        cst = self.csttransformer.transform(parse_tree)
        VhdlTransformers.AddTokenSpans(tokens).visit(cst)
        log.debug("parsed %s with %d tokens", type(cst).__name__, len(tokens))
        return ParseResult(txt, cst, tokens)
