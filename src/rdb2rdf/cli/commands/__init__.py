"""
CLI command implementations.

- base.py: BaseCommand, error-to-exit-code handling
- direct.py: DirectCommand, StatsCommand
- r2rml.py: TemplateCommand, GenerateCommand, ValidateMappingCommand, MaterializeCommand
- validate.py: ValidateCommand
"""

from .base import BaseCommand, exit_code_for, handle_errors
from .direct import DirectCommand, StatsCommand
from .r2rml import GenerateCommand, MaterializeCommand, TemplateCommand, ValidateMappingCommand
from .validate import ValidateCommand

COMMANDS = {
    'direct': DirectCommand,
    'stats': StatsCommand,
    'template': TemplateCommand,
    'generate': GenerateCommand,
    'validate-mapping': ValidateMappingCommand,
    'materialize': MaterializeCommand,
    'validate': ValidateCommand,
}

__all__ = [
    'BaseCommand',
    'exit_code_for',
    'handle_errors',
    'DirectCommand',
    'StatsCommand',
    'TemplateCommand',
    'GenerateCommand',
    'ValidateMappingCommand',
    'MaterializeCommand',
    'ValidateCommand',
    'COMMANDS',
]
