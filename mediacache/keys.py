"""
Storage keys for image derivatives.

A derivative lives next to its base asset, with the requested width spliced in
ahead of the asset suffix: ``articles/123.jpg`` at 300px is stored as
``articles/123-300.jpg``.
"""
import posixpath
from typing import Iterable, Tuple

from .exceptions import InvalidKeyFormat

DEFAULT_SUFFIXES: Tuple[str, ...] = (".jpg",)


def split_suffix(base_key: str, suffixes: Iterable[str] = DEFAULT_SUFFIXES) -> Tuple[str, str]:
    """Split a base key into (stem, suffix) for the first known suffix it ends with"""
    # longest first so ".jpeg" wins over a hypothetical ".eg"
    for suffix in sorted(suffixes, key=len, reverse=True):
        if base_key.endswith(suffix):
            stem = base_key[: -len(suffix)]
            if not posixpath.basename(stem):
                raise InvalidKeyFormat(f"Key {base_key!r} has no name before {suffix}")
            return stem, suffix
    raise InvalidKeyFormat(
        f"Key {base_key!r} does not end in a known suffix ({', '.join(suffixes)})"
    )


def validate_width(width: int) -> int:
    # bool is an int subclass; True would otherwise derive "-1"
    if isinstance(width, bool) or not isinstance(width, int) or width <= 0:
        raise InvalidKeyFormat(f"Width must be a positive integer, got {width!r}")
    return width


def derive_key(
    base_key: str, width: int, suffixes: Iterable[str] = DEFAULT_SUFFIXES
) -> str:
    """
    Map a base asset key and a requested width to the derivative's storage key.

    Widths are rendered in canonical decimal form, so distinct widths always
    produce distinct keys, and the ``-`` marker guarantees the result never
    equals the base key itself.
    """
    stem, suffix = split_suffix(base_key, suffixes)
    return f"{stem}-{validate_width(width)}{suffix}"
