"""
Opaque pagination cursors.

A cursor is base64 of ``"{kind}:{next index}"``.  Clients must treat it as
opaque; the format is kept as-is for compatibility with existing frontends.
"""
import base64
import binascii

from mediacache.exceptions import InvalidCursor

ARTICLE_KIND = "Article"


def encode_token(next_index: int, kind: str = ARTICLE_KIND) -> str:
    return base64.b64encode(f"{kind}:{next_index}".encode("ascii")).decode("ascii")


def decode_token(token: str) -> int:
    """Return the start index a cursor points at.  An empty cursor starts at 0."""
    if not token:
        return 0
    try:
        decoded = base64.b64decode(token, validate=True).decode("ascii")
        _, index = decoded.split(":", 1)
        start = int(index)
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        raise InvalidCursor(f"Malformed nextToken {token!r}") from e
    if start < 0:
        raise InvalidCursor(f"Malformed nextToken {token!r}")
    return start
