"""Logging for the wrapper generator.

All loggers live under the ``eager_opgen`` hierarchy and write to stderr,
so diagnostics never end up in a generated module printed to stdout.

Per-op messages go through :class:`OpLogger`, which prefixes the op name
and attaches it to the record as ``record.op``::

    from eager_opgen._logging import get_logger, op_logger

    logger = get_logger(__name__)
    op_logger(logger, "ConcatV2").debug("inferred N from 'values'")
    # [eager-opgen] DEBUG eager_opgen.codegen.classifier: ConcatV2: inferred ...

The level comes from ``EAGER_OPGEN_LOG_LEVEL`` (default WARNING) and can
be changed at runtime with :func:`set_log_level`.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, MutableMapping, Optional, Tuple

_ROOT = "eager_opgen"
_LOG_FORMAT = "[eager-opgen] %(levelname)s %(name)s: %(message)s"
_ENV_LOG_LEVEL = "EAGER_OPGEN_LOG_LEVEL"

_configured = False


def _level_from_name(name: Optional[str]) -> int:
    level = logging.getLevelName((name or "").strip().upper())
    return level if isinstance(level, int) else logging.WARNING


def _configure() -> None:
    global _configured  # noqa: PLW0603
    if _configured:
        return
    root = logging.getLogger(_ROOT)
    root.setLevel(_level_from_name(os.environ.get(_ENV_LOG_LEVEL)))
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        root.addHandler(handler)
    _configured = True


class OpLogger(logging.LoggerAdapter):
    """Logger bound to one op.

    Messages are prefixed with ``"<op>: "`` and every record carries the
    op name in ``record.op``, so a handler or test can filter a batch
    run by op.
    """

    def __init__(self, logger: logging.Logger, op_name: str) -> None:
        super().__init__(logger, {"op": op_name})
        self.op_name = op_name

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**kwargs.get("extra", {}), "op": self.op_name}
        return f"{self.op_name}: {msg}", kwargs


def get_logger(name: str) -> logging.Logger:
    """Return the logger for *name* (usually ``__name__``)."""
    _configure()
    return logging.getLogger(name)


def op_logger(logger: logging.Logger, op_name: str) -> OpLogger:
    """Bind *logger* to *op_name*."""
    return OpLogger(logger, op_name)


def set_log_level(level: Optional[str] = None) -> None:
    """Change the generator's log level.

    Args:
        level: A level name such as ``"DEBUG"``.  None restores the level
            from ``EAGER_OPGEN_LOG_LEVEL``.
    """
    _configure()
    if level is None:
        level = os.environ.get(_ENV_LOG_LEVEL)
    logging.getLogger(_ROOT).setLevel(_level_from_name(level))
