"""Locate a module's rule block in an Android.bp build definition.

Blueprint files are not parsed. A rule block is an identifier followed by
`{` and runs to the first `}` at column 0, which is how Android.bp files are
conventionally formatted. Reformatted files that break this convention can be
mis-located.
"""

from __future__ import annotations

import re

_HEADER_RE = re.compile(r"[ \t]*[_a-zA-Z0-9]+\s*\{")
_BLOCK_END = "\n}"


def _name_re(module_name: str) -> re.Pattern[str]:
    return re.compile(rf'^\s*name:\s*"{re.escape(module_name)}"', re.MULTILINE)


def find_module_source(build_doc: str, module_name: str) -> str | None:
    """Return the source text of the first block declaring `name: "<module_name>"`.

    Returns None when no block matches, including for empty or malformed input.
    Runs in time linear in the size of `build_doc`.
    """
    name_re = _name_re(module_name)
    pos = 0
    while True:
        header = _HEADER_RE.search(build_doc, pos)
        if header is None:
            return None
        close = build_doc.find(_BLOCK_END, header.end())
        if close == -1:
            # no later block can be closed either
            return None
        end = close + len(_BLOCK_END)
        if name_re.search(build_doc, header.start(), end):
            return build_doc[header.start() : end]
        pos = end
