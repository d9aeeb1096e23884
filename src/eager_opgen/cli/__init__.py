"""CLI package for eager-opgen.

Subcommands are registered from separate modules; each one is
self-contained and independently testable.

Usage::

    eager-opgen generate ops.json -o gen_ops.py
    eager-opgen generate ops.json --hidden-op AddV2 --require-shapes
    eager-opgen inspect ops.json ConcatV2
"""

from __future__ import annotations

import click

from eager_opgen._logging import get_logger

logger = get_logger(__name__)


@click.group()
@click.version_option(package_name="eager-opgen")
def main() -> None:
    """eager-opgen: generate graph/eager Python wrappers for operations."""


# Register subcommands from separate modules
from eager_opgen.cli.generate import generate  # noqa: E402
from eager_opgen.cli.inspect import inspect_cmd  # noqa: E402

main.add_command(generate)
main.add_command(inspect_cmd, name="inspect")
