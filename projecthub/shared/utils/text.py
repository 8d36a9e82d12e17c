"""Text helpers (slug generation)."""

import re
import unicodedata

_NON_SLUG = re.compile(r"[^a-z0-9]+")


def slugify(value: str, separator: str = "-") -> str:
    """Return a lowercase ASCII slug (letters, digits, single separators).

    >>> slugify("Getting Started: Part 1")
    'getting-started-part-1'
    """
    normalized = (
        unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    )
    return _NON_SLUG.sub(separator, normalized.lower()).strip(separator)
