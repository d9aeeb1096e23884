#!/usr/bin/env python3
"""Demo: generate wrappers for a handful of math ops.

    pip install -e .  # from the eager-opgen repo root
    python examples/generate_math_ops.py

You'll see:
1. How each op's attributes are classified (inferred vs. parameters)
2. Which ops were skipped, and why
3. The generated module written next to this script

The same module can be produced from the command line with
``eager-opgen generate examples/math_ops.json -o gen_math_ops.py``.
"""

from __future__ import annotations

from pathlib import Path

import eager_opgen

here = Path(__file__).resolve().parent

# ── Step 1: Load the descriptors ─────────────────────────────────────────
ops = eager_opgen.load_descriptors(here / "math_ops.json")
print(f"eager-opgen v{eager_opgen.__version__}: {len(ops)} ops loaded\n")

# ── Step 2: Show the attribute classification ────────────────────────────
for op in ops:
    try:
        c = eager_opgen.classify(op)
    except eager_opgen.UnsupportedAttrTypeError as e:
        print(f"{op.name:<10} cannot be wrapped: {e}")
        continue
    print(f"{op.name:<10} inferred={sorted(c.inferred)} params={list(c.param_names)}")
print()

# ── Step 3: Generate the module ──────────────────────────────────────────
generator = eager_opgen.ModuleGenerator(eager_opgen.GeneratorOptions(hidden_ops=["Const"]))
source = generator.generate(ops)

out = here / "gen_math_ops.py"
out.write_text(source, encoding="utf-8")
print(f"Wrote {out} ({len(source.splitlines())} lines)")
for skipped in generator.skipped:
    print(f"  skipped {skipped.function_name}: '{skipped.attr_type}' attrs are not supported")
