"""Call-site capture for log calls.

Works like the ``stacklevel`` argument of the stdlib logging functions:
``stacklevel=1`` names the direct caller of the function that calls
``caller_location``; each wrapper layer in between adds one.
"""

import os
import sys

UNKNOWN_FILE = "<unknown>"


def caller_location(stacklevel: int = 1) -> tuple[str, int]:
    """Return ``(file basename, line number)`` of the frame *stacklevel* up."""
    try:
        frame = sys._getframe(stacklevel + 1)
    except ValueError:
        return UNKNOWN_FILE, 0
    return os.path.basename(frame.f_code.co_filename), frame.f_lineno


def resolve_location(source_file: str | None, source_line: int | None,
                     stacklevel: int) -> tuple[str, int]:
    """Fill in whichever of file/line the caller did not pass explicitly."""
    if source_file is not None and source_line is not None:
        return source_file, source_line
    file, line = caller_location(stacklevel + 1)
    return (source_file if source_file is not None else file,
            source_line if source_line is not None else line)
