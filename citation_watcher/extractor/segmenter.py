"""
Sentence segmentation for Citation Watcher.

Splits answer text on runs of terminal punctuation (`.`, `!`, `?`). There
is no abbreviation or quotation awareness: "U.S." splits into "U" and "S".
Citations record sentence indexes, so changing the split rule shifts
`position` for every stored citation.
"""

import re
from dataclasses import dataclass

SENTENCE_BOUNDARY = re.compile(r"[.!?]+")


@dataclass(frozen=True)
class Sentence:
    """
    One sentence of an answer.

    Attributes:
        text: Sentence text with surrounding whitespace trimmed
        index: 0-based position among the non-empty sentences of the answer
    """

    text: str
    index: int


def split_sentences(text: str) -> list[Sentence]:
    """
    Split answer text into ordered, trimmed, non-empty sentences.

    Args:
        text: Full answer text

    Returns:
        Sentences in order of appearance; empty list for empty text

    Example:
        >>> [s.text for s in split_sentences("Acme is great! Try it. ")]
        ['Acme is great', 'Try it']
    """
    if not text:
        return []

    fragments = [fragment.strip() for fragment in SENTENCE_BOUNDARY.split(text)]
    return [
        Sentence(text=fragment, index=index)
        for index, fragment in enumerate(f for f in fragments if f)
    ]
