"""Permissive "same show?" comparison between two free-text names.

Used to confirm that the text in front of a trailing number is the show
named by the parent directory, e.g. ``MJS - 01`` inside
``my japanese show``.  False positives are preferred over false
negatives: the matcher only ever gates last-resort rules.
"""
import re
from difflib import SequenceMatcher

# Similarity threshold for near-identical spellings
SIMILARITY_THRESHOLD = 0.85


def normalize_for_match(text: str) -> str:
    """Lowercase, separators to spaces, drop other punctuation."""
    text = re.sub(r'[._\-]', ' ', text.lower())
    text = re.sub(r'[^\w\s]', '', text)
    return re.sub(r'\s+', ' ', text).strip()


def acronym(text: str) -> str:
    """First letter of every whitespace-separated token, lowercased."""
    tokens = re.sub(r'[._]', ' ', text).split()
    return ''.join(token[0] for token in tokens if token[0].isalpha()).lower()


def letters_only(text: str) -> str:
    return re.sub(r'[\W\d_]', '', text).lower()


def _contains(a: str, b: str) -> bool:
    if a in b or b in a:
        return True
    a, b = a.replace(' ', ''), b.replace(' ', '')
    return bool(a and b) and (a in b or b in a)


def _acronym_match(a: str, b: str) -> bool:
    for left, right in ((a, b), (b, a)):
        short = acronym(left)
        if len(short) > 2 and short in letters_only(right):
            return True
    return False


def _token_overlap(a: str, b: str) -> bool:
    tokens_a = {t for t in a.split() if len(t) > 1}
    tokens_b = {t for t in b.split() if len(t) > 1}
    if not tokens_a or not tokens_b:
        return False
    shared = len(tokens_a & tokens_b)
    return shared > 0 and shared >= min(len(tokens_a), len(tokens_b)) / 2


def _similar(a: str, b: str) -> bool:
    ratio = SequenceMatcher(None, a.replace(' ', ''), b.replace(' ', '')).ratio()
    return ratio >= SIMILARITY_THRESHOLD


def titles_match(first: str, second: str) -> bool:
    """
    Decide whether two names plausibly refer to the same show.

    Checks, any of which is enough: containment of the normalized forms
    (also with spaces removed), an acronym of one found in the letters of
    the other, token overlap of at least half the smaller token set, and
    a high similarity ratio.

    Args:
        first: A filename-derived title, e.g. "MS S2"
        second: Usually the parent directory name, e.g. "My Show S2"

    Returns:
        True if the names plausibly match; empty names never match
    """
    a = normalize_for_match(first or '')
    b = normalize_for_match(second or '')
    if not a or not b:
        return False

    return (
        _contains(a, b)
        or _acronym_match(first, second)
        or _token_overlap(a, b)
        or _similar(a, b)
    )
