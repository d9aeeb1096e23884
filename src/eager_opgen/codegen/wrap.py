"""Column-limited line wrapping for generated call expressions.

:func:`word_wrap` lays out ``prefix + text`` over as many lines as needed
to stay within the right margin, indenting continuation lines so they
line up under the first character after the prefix::

    _result = _execute.execute("Foo", 1, inputs=_inputs_flat,
                               attrs=_attrs, name=name)

Lines break only at spaces outside quoted literals.  Tensor defaults are
embedded as triple-quoted protobuf text that contains spaces of its own;
such a literal always stays on one line.
"""

from __future__ import annotations

from typing import List

from eager_opgen.config import RIGHT_MARGIN


def split_tokens(text: str) -> List[str]:
    """Split *text* at spaces that are not inside a string literal.

    Recognises ``"..."``, ``'...'``, ``\"\"\"...\"\"\"`` and ``'''...'''``
    with backslash escapes.  Runs of spaces count as one break point.
    """
    tokens: List[str] = []
    current: List[str] = []
    quote = ""
    i = 0
    n = len(text)
    while i < n:
        c = text[i]
        if quote:
            if c == "\\" and i + 1 < n:
                current.append(text[i:i + 2])
                i += 2
            elif text.startswith(quote, i):
                current.append(quote)
                i += len(quote)
                quote = ""
            else:
                current.append(c)
                i += 1
        elif c == " ":
            if current:
                tokens.append("".join(current))
                current = []
            i += 1
        elif c in "\"'":
            quote = c * 3 if text.startswith(c * 3, i) else c
            current.append(quote)
            i += len(quote)
        else:
            current.append(c)
            i += 1
    if current:
        tokens.append("".join(current))
    return tokens


def word_wrap(prefix: str, text: str, width: int = RIGHT_MARGIN) -> str:
    """Wrap ``prefix + text`` to *width* columns with a hanging indent.

    Args:
        prefix: Left-hand side, normally ending in an open delimiter, e.g.
            ``"    _attrs = ("``.  Never broken.
        text: Space-separated remainder, e.g. ``'"T", _attr_T)'``.
        width: Column budget for every line.

    Returns:
        The wrapped text without a trailing newline.  A token that is too
        long for the budget on its own gets a line to itself.
    """
    indent = " " * len(prefix)
    lines: List[str] = []
    line = prefix
    empty = True
    for token in split_tokens(text):
        if empty:
            line += token
            empty = False
        elif len(line) + 1 + len(token) <= width:
            line += " " + token
        else:
            lines.append(line)
            line = indent + token
    lines.append(line)
    return "\n".join(lines)
