"""``eager-opgen inspect``: show how one op's wrapper is put together."""

from __future__ import annotations

import click

from eager_opgen._exceptions import OpGenError, UnsupportedAttrTypeError


def _join(items) -> str:
    items = list(items)
    return ", ".join(items) if items else "(none)"


@click.command()
@click.argument("descriptors", type=click.Path(exists=True, dir_okay=False))
@click.argument("op_name")
@click.option("--hidden", is_flag=True, help="Generate the hidden ('_'-prefixed) variant")
def inspect_cmd(descriptors: str, op_name: str, hidden: bool) -> None:
    """Show the attribute classification and wrapper for OP_NAME."""
    from eager_opgen.codegen.classifier import classify
    from eager_opgen.codegen.module import skip_marker
    from eager_opgen.codegen.synthesizer import WrapperSynthesizer
    from eager_opgen.descriptor.loader import load_descriptors
    from eager_opgen.naming import DEFAULT_NAMING

    try:
        ops = {op.name: op for op in load_descriptors(descriptors)}
        if op_name not in ops:
            raise click.ClickException(f"No op named '{op_name}' in {descriptors}")
        op = ops[op_name]
        function_name = DEFAULT_NAMING.function_name(op.name, hidden)

        click.echo(f"Op:        {op.name}")
        click.echo(f"Function:  {function_name}")
        if DEFAULT_NAMING.is_reserved(function_name):
            click.echo(f"Omitted:   '{function_name}' is a reserved name, no wrapper is generated")
            return
        try:
            c = classify(op)
            wrapper = WrapperSynthesizer(op, function_name).generate()
        except UnsupportedAttrTypeError as e:
            click.echo("")
            click.echo(skip_marker(function_name, e.attr_type), nl=False)
            return
    except OpGenError as e:
        raise click.ClickException(str(e)) from e

    click.echo("Inferred:  " + _join(
        f"{name} (from '{arg}')" for name, arg in c.inferred.items()))
    click.echo("Required:  " + _join(c.attr_params[a] for a in c.required))
    click.echo("Defaulted: " + _join(
        f"{c.attr_params[a]}={c.defaults[a]}" for a in c.defaulted))
    click.echo("")
    click.echo(wrapper.output_tuple_code + wrapper.code, nl=False)
