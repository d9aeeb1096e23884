"""``eager-opgen generate``: write a wrapper module for a descriptor file."""

from __future__ import annotations

import dataclasses
from pathlib import Path
from typing import Optional, Tuple

import click

from eager_opgen._exceptions import OpGenError
from eager_opgen._logging import get_logger

logger = get_logger(__name__)


@click.command()
@click.argument("descriptors", type=click.Path(exists=True, dir_okay=False))
@click.option("-o", "--output", type=click.Path(dir_okay=False), default=None,
              help="Write the module here instead of stdout")
@click.option("--hidden-op", "hidden_ops", multiple=True, metavar="NAME",
              help="Prefix this op's wrapper with '_' (repeatable)")
@click.option("--hidden-ops-file", type=click.Path(exists=True, dir_okay=False),
              default=None, help="File of hidden op names (comma/whitespace separated)")
@click.option("--require-shapes", is_flag=True,
              help="Do not emit _ops.RegisterShape stubs")
def generate(descriptors: str, output: Optional[str], hidden_ops: Tuple[str, ...],
             hidden_ops_file: Optional[str], require_shapes: bool) -> None:
    """Generate Python wrappers for every op in DESCRIPTORS."""
    from eager_opgen.codegen.module import ModuleGenerator
    from eager_opgen.config import GeneratorOptions, load_hidden_ops
    from eager_opgen.descriptor.loader import load_descriptors

    try:
        options = GeneratorOptions.from_env()
        if hidden_ops_file:
            options = options.with_hidden_ops(load_hidden_ops(hidden_ops_file))
        options = options.with_hidden_ops(hidden_ops)
        if require_shapes:
            options = dataclasses.replace(options, require_shapes=True)

        ops = load_descriptors(descriptors)
        generator = ModuleGenerator(options)
        source = generator.generate(ops)
    except OpGenError as e:
        raise click.ClickException(str(e)) from e

    for skipped in generator.skipped:
        click.echo(
            f"Skipped {skipped.op_name}: attr '{skipped.attr_name}' has "
            f"unsupported type '{skipped.attr_type}'",
            err=True,
        )

    if output:
        Path(output).write_text(source, encoding="utf-8")
        click.echo(f"Wrote {len(ops)} ops to {output}", err=True)
    else:
        click.echo(source, nl=False)
