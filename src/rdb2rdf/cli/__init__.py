"""
Command-line interface.
"""

from .commands import COMMANDS, BaseCommand
from .parsers import create_argument_parser

__all__ = ['COMMANDS', 'BaseCommand', 'create_argument_parser']
