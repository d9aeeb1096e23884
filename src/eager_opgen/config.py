"""Generator configuration.

Two kinds of settings exist:

- **Formatting constants** (:data:`RIGHT_MARGIN`, :data:`INDENT`).  Generated
  modules are byte-for-byte reproducible, so these are fixed and not
  exposed as options.
- **Per-run options** (:class:`GeneratorOptions`): which ops are hidden
  (their wrappers get a leading ``_``) and whether a shape-registration
  stub is appended per op.

Environment Variables
---------------------
``EAGER_OPGEN_HIDDEN_OPS_FILE``
    Path to a hidden-ops file (see :func:`load_hidden_ops`).
``EAGER_OPGEN_REQUIRE_SHAPES``
    Set to ``1`` to omit the per-op ``_ops.RegisterShape`` stubs.
``EAGER_OPGEN_LOG_LEVEL``
    Log level for the ``eager_opgen`` loggers (see :mod:`eager_opgen._logging`).
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Iterable, Optional

from eager_opgen._exceptions import ConfigError
from eager_opgen._logging import get_logger

logger = get_logger(__name__)

# Generated lines are wrapped to this many columns.
RIGHT_MARGIN = 78

# One indentation level in generated code.
INDENT = "  "

_ENV_HIDDEN_OPS_FILE = "EAGER_OPGEN_HIDDEN_OPS_FILE"
_ENV_REQUIRE_SHAPES = "EAGER_OPGEN_REQUIRE_SHAPES"

_OP_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def parse_hidden_ops(text: str) -> FrozenSet[str]:
    """Parse hidden-op names from text.

    Names are separated by commas and/or whitespace; ``#`` starts a comment
    that runs to the end of the line.

    Raises:
        ConfigError: If an entry is not a valid op name.
    """
    names = set()
    for line in text.splitlines():
        line = line.split("#", 1)[0]
        for token in re.split(r"[,\s]+", line):
            if not token:
                continue
            if not _OP_NAME_RE.match(token):
                raise ConfigError(f"Invalid op name in hidden ops list: '{token}'")
            names.add(token)
    return frozenset(names)


def load_hidden_ops(path: str) -> FrozenSet[str]:
    """Read a hidden-ops file.

    Raises:
        ConfigError: If the file cannot be read or contains invalid names.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read hidden ops file '{path}': {exc}") from exc
    names = parse_hidden_ops(text)
    logger.debug("Loaded %d hidden op names from %s", len(names), path)
    return names


@dataclass(frozen=True)
class GeneratorOptions:
    """Options for one generation run.

    Attributes:
        hidden_ops: Op names whose wrappers are prefixed with ``_``.
        require_shapes: If False, a ``_ops.RegisterShape("Op")(None)`` stub
            follows each wrapper.
    """

    hidden_ops: FrozenSet[str] = field(default_factory=frozenset)
    require_shapes: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "hidden_ops", frozenset(self.hidden_ops))

    def with_hidden_ops(self, names: Iterable[str]) -> "GeneratorOptions":
        """Return a copy with *names* added to :attr:`hidden_ops`."""
        return GeneratorOptions(
            hidden_ops=self.hidden_ops | frozenset(names),
            require_shapes=self.require_shapes,
        )

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "GeneratorOptions":
        """Build options from ``EAGER_OPGEN_*`` environment variables."""
        env = os.environ if environ is None else environ
        hidden: FrozenSet[str] = frozenset()
        hidden_file = env.get(_ENV_HIDDEN_OPS_FILE, "").strip()
        if hidden_file:
            hidden = load_hidden_ops(hidden_file)
        require_shapes = env.get(_ENV_REQUIRE_SHAPES, "").strip() == "1"
        return cls(hidden_ops=hidden, require_shapes=require_shapes)
