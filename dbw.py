# dbw.py
# Available subject to the Apache 2.0 License
# https://www.apache.org/licenses/LICENSE-2.0

# Work with a course organization on GitHub from the command line.
#
# Usage: dbw [options] <command> [arguments]
#
# Options only count before the command. Once the command is known, every word after
# it is an argument to that command, even if it starts with a dash.

import argparse
import sys
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv

from dbw_commands import COMMANDS, ParsedInvocation, lookup
from dbw_config import VERSION
from dbw_errors import EXIT_OK, DbwError, UnknownCommandError, UnknownFlagError, UsageError

PROG = "dbw"

OPTIONS = ("-h", "--help", "-v", "--verbose", "--version")


class DbwArgumentParser(argparse.ArgumentParser):
    """argparse, but bad usage raises UsageError instead of exiting, and help goes to stderr."""

    def error(self, message):
        raise UsageError(message)

    def print_help(self, file=None):
        super().print_help(file if file is not None else sys.stderr)


def command_overview() -> str:
    width = max(len(c.usage) for c in COMMANDS.values()) + 2
    lines = ["Command:"]
    lines += ["  %s%s" % (c.usage.ljust(width), c.help) for c in COMMANDS.values()]
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = DbwArgumentParser(prog=PROG,
                               usage="%(prog)s [options] <command> [arguments]",
                               description="Work with a course by connecting to GitHub.",
                               epilog=command_overview(),
                               formatter_class=argparse.RawDescriptionHelpFormatter,
                               allow_abbrev=False)
    parser.add_argument('-v', '--verbose',
                        action="store_true",
                        default=False,
                        help="Print the full API responses and what is being requested")
    parser.add_argument('--version',
                        action="version",
                        version="%(prog)s version " + VERSION,
                        help="Print version")
    return parser


def parse(argv: List[str]) -> ParsedInvocation:
    """
    Splits the command line into options, the command, and the command's arguments. Exits right here
    for --help and --version. Raises UnknownFlagError / UnknownCommandError for anything that doesn't fit.
    """
    start = 0
    while start < len(argv) and argv[start].startswith("-"):
        start += 1

    # first unknown option wins, even over a later --help
    for token in argv[:start]:
        if token not in OPTIONS:
            raise UnknownFlagError(token)

    options = build_parser().parse_args(argv[:start])

    if start == len(argv):
        return ParsedInvocation(verbose=options.verbose)

    command = lookup(argv[start])
    if command is None:
        raise UnknownCommandError(argv[start])

    return ParsedInvocation(command=command, args=tuple(argv[start + 1:]), verbose=options.verbose)


def bad_usage(message: str):
    if message:
        print(message, file=sys.stderr)
    print("For an overview of the command, execute:", file=sys.stderr)
    print(PROG + " --help", file=sys.stderr)


def fail(message: str):
    print("[FAILED] " + message, file=sys.stderr)


def run(argv: Optional[List[str]] = None) -> int:
    """Runs one dbw command and returns the exit code."""
    if argv is None:
        argv = sys.argv[1:]

    try:
        invocation = parse(argv)
        if invocation.command is None:
            raise UsageError("Missing option or command.")
        output = invocation.command.invoke(invocation)
    except UsageError as e:
        bad_usage(str(e))
        return e.exit_code
    except DbwError as e:
        fail(str(e))
        return e.exit_code

    if output:
        print(output)
    return EXIT_OK


def main():
    # settings in ./.env, if there is one
    load_dotenv(find_dotenv(usecwd=True))
    sys.exit(run())


if __name__ == "__main__":
    main()
