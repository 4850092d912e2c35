"""Near-duplicate removal within a single run."""

from .config import DEDUP_PREFIX_LENGTH
from .models import Item


def dedup_key(text: str, prefix_length: int = DEDUP_PREFIX_LENGTH) -> str:
    """Lower-cased fixed-length prefix of the text (whole text if shorter)."""
    return text.lower()[:prefix_length]


def deduplicate(items: list[Item], prefix_length: int = DEDUP_PREFIX_LENGTH) -> list[Item]:
    """Keep the first item of each dedup key, in arrival order.

    Two headlines returned by overlapping news queries usually differ only
    after the first few dozen characters (source suffix, punctuation), so
    they collapse onto the same key.

    Args:
        items: Items in arrival order
        prefix_length: Number of leading characters forming the key

    Returns:
        Items with later near-duplicates removed
    """
    seen: set[str] = set()
    unique = []
    for item in items:
        key = dedup_key(item.text, prefix_length)
        if key in seen:
            continue
        seen.add(key)
        unique.append(item)
    return unique
