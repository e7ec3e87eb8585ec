"""
rdb2rdf command-line entry point.

Usage:
    rdb2rdf direct --database sqlite:///shop.db --output shop.ttl
    rdb2rdf validate shop.ttl --verbose
    rdb2rdf --help
"""

import sys
from typing import List, Optional

from .cli import COMMANDS, create_argument_parser
from .constants import ExitCode


def main(argv: Optional[List[str]] = None) -> int:
    """Parse arguments, run the selected command and return its exit code."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return ExitCode.ERROR

    command = COMMANDS[args.command](config_path=getattr(args, 'config', None))
    return int(command.execute(args))


if __name__ == '__main__':
    sys.exit(main())
