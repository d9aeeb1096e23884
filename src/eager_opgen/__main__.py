"""Support ``python -m eager_opgen``.

Usage::

    python -m eager_opgen generate ops.json -o gen_ops.py
    python -m eager_opgen inspect ops.json ConcatV2
"""

from __future__ import annotations


def main() -> None:
    from eager_opgen.cli import main as cli_main
    cli_main()


if __name__ == "__main__":
    main()
