"""Canonical form for legacy resource paths.

Resource paths come from data files written for a case-insensitive
filesystem with backslash separators, mixed with paths typed on the
command line. The canonical form uses backslashes only, ASCII lowercase,
and has no "." segments, so equal resources compare equal as strings.

The transform is a fold over the input one character at a time. Each step
appends a character to a buffer and then inspects what has accumulated, so
the same step function works as an incremental builder.
"""


def normalize_path(path: str) -> str:
    """Return the canonical form of path.

    >>> normalize_path("Sound/SFX/./Test.WAV")
    'sound\\\\sfx\\\\test.wav'
    """
    buf: list[str] = []
    for c in path:
        build_normalized_path(buf, c)
    build_normalized_path(buf, None)
    return "".join(buf)


def build_normalized_path(buf: list[str], c: str | None) -> None:
    """Append c to buf in canonical form and collapse "." segments.

    Pass c=None once after the last character to finish the path.
    """
    if c is not None:
        if c == "/":
            c = "\\"
        elif c.isascii():
            c = c.lower()
        buf.append(c)

    if buf == [".", "\\"] or (c is None and buf == ["."]):
        # Leading ".\" (or a bare ".") means no prefix at all.
        buf.clear()
    elif buf[-3:] == ["\\", ".", "\\"]:
        del buf[-2:]
