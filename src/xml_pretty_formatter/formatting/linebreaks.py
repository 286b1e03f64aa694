"""Line-break sniffing.

Formatted output uses whichever newline convention dominates the source
document, so XML pasted into a CRLF file stays CRLF after formatting.
"""

from typing import Tuple

CRLF = "\r\n"
LF = "\n"


def count_line_breaks(text: str) -> Tuple[int, int]:
    """Count CRLF breaks and bare LF breaks (LF not preceded by CR).

    Returns:
        Tuple of (crlf_count, lf_count)
    """
    crlf_count = text.count(CRLF)
    lf_count = text.count(LF) - crlf_count
    return crlf_count, lf_count


def detect_line_break(text: str) -> str:
    """Return ``"\\r\\n"`` if CRLF strictly outnumbers bare LF, else ``"\\n"``."""
    crlf_count, lf_count = count_line_breaks(text)
    if crlf_count > lf_count:
        return CRLF
    return LF
