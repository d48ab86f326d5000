"""CLI command implementations for the geoply developer tools.

This package contains the commands of the geoply CLI:
- validate-catalog: Load a catalog and report what it holds
- resolve: Print the admissible entries for a set of driver values
"""

from geoply.cli.commands.resolve import resolve_command
from geoply.cli.commands.validate import validate_catalog_command

__all__ = ["resolve_command", "validate_catalog_command"]
