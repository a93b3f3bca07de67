import logging
import sys
from argparse import ArgumentParser
from pathlib import Path

from colorama import Fore, just_fix_windows_console
from lark.exceptions import UnexpectedInput, VisitError
from rich.console import Console

from . import Parser
from .errors import FormatterError
from .Formatter import format_result
from .Options import FormatOptions


log = logging.getLogger(__name__)


def main(argv=None):
    parser = ArgumentParser(description="Formatter for VHDL configuration declarations")
    parser.add_argument("-i", "--input", action="append", help="VHDL source file or directory")
    parser.add_argument(
        "-e",
        "--exclude",
        action="append",
        default=[],
        help="Files and directories to ignore",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--check",
        action="store_true",
        help="Only report files that would be reformatted",
    )
    mode.add_argument(
        "--in-place",
        action="store_true",
        help="Rewrite files instead of printing the formatted text",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=None,
        help="Spaces per indentation level (default 4, or HDLFMT_INDENT_WIDTH)",
    )
    parser.add_argument(
        "--tabs",
        action="store_true",
        default=None,
        help="Indent with tabs",
    )
    parser.add_argument(
        "--cst",
        action="store_true",
        help="Print CST to console",
    )
    parser.add_argument(
        "--no-regex",
        action="store_false",
        dest="use_regex",
        help="Don't use the regex library",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--debug-lark",
        action="store_true",
        help="Enable debugging in lark",
    )
    args, unparsed = parser.parse_known_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING)
    just_fix_windows_console()

    # Allow file to be passed in without -i
    if not args.input:
        if len(unparsed) > 0:
            args.input = unparsed
        else:
            args.input = ["."]

    args.input = [Path(f) for f in args.input]
    args.exclude = [Path(f) for f in args.exclude]

    options = FormatOptions.from_env(indent_width=args.indent, use_tabs=args.tabs)
    files = Parser.collect_files(args.input, args.exclude)
    log.debug("formatting %d files", len(files))

    vhdl_parser = Parser.VhdlParser(use_regex=args.use_regex, debug=args.debug_lark)
    con = Console(emoji=False)
    status = 0
    for f in files:
        txt = f.read_text("latin-1")
        try:
            result = vhdl_parser.parse(txt)
            if args.cst:
                con.print(result.cst.rich_tree())
            formatted = format_result(result, options)
        except UnexpectedInput as e:
            print(f"{Fore.RED}syntax error: {f}:{e.line}:{e.column}{Fore.RESET}", file=sys.stderr)
            print(e.get_context(txt), file=sys.stderr)
            status = max(status, 1)
            continue
        except (FormatterError, VisitError) as e:
            print(f"{Fore.RED}internal formatter error: {f}: {e}{Fore.RESET}", file=sys.stderr)
            status = 2
            continue
        except RecursionError:
            print(f"{Fore.RED}internal formatter error: {f}: nesting too deep{Fore.RESET}", file=sys.stderr)
            status = 2
            continue

        if args.check:
            if formatted != result.text:
                print(f"{Fore.RED}would reformat: {f}{Fore.RESET}")
                status = max(status, 1)
            else:
                print(f"{Fore.GREEN}already formatted: {f}{Fore.RESET}")
        elif args.in_place:
            if formatted != result.text:
                f.write_text(formatted, "latin-1")
                log.info("reformatted %s", f)
        else:
            sys.stdout.write(formatted)

    return status


if __name__ == "__main__":
    sys.exit(main())
