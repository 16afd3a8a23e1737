"""Path and prefix normalization.

Prefix fragments and pattern paths are concatenated blindly while a tree
is assembled, so ``"/a/" + "/b"`` is common. Everything that reaches the
registry goes through ``normalize_path`` first.
"""

import re

_SLASH_RUN = re.compile(r"//+")


def normalize_path(text: str) -> str:
    """Collapse every run of two or more ``/`` into a single ``/``.

    Total and idempotent: any string is accepted and normalizing twice
    gives the same result as normalizing once::

        normalize_path("/e/////d///f//{id}")  -> "/e/d/f/{id}"
        normalize_path("a///b")               -> "a/b"
    """
    return _SLASH_RUN.sub("/", text)


def normalize_prefix(text: str) -> str:
    """Give a non-empty prefix fragment a leading ``/``.

    The empty fragment stays empty so an unprefixed node contributes
    nothing to its descendants.
    """
    if text and not text.startswith("/"):
        return "/" + text
    return text


def join_prefixes(*fragments: str) -> str:
    """Concatenate prefix fragments root-first and normalize the result.

    An all-empty chain resolves to ``"/"``.
    """
    joined = normalize_path("".join(normalize_prefix(f) for f in fragments))
    return joined or "/"
