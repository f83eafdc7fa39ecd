"""Season folder lexicon.

Maps directory names such as ``Season 2``, ``S03``, ``Season One``,
``First Season`` or ``الموسم الأول`` to a season number.  Matching is
always against the *whole* directory name: ``Season 1 Extras`` is not a
season folder.
"""
import re
from collections.abc import Mapping
from types import MappingProxyType


# Cardinal number words, English and Arabic ("Season One", "الموسم واحد")
CARDINAL_WORDS: Mapping[str, int] = MappingProxyType({
    'one': 1,
    'two': 2,
    'three': 3,
    'four': 4,
    'five': 5,
    'six': 6,
    'seven': 7,
    'eight': 8,
    'nine': 9,
    'ten': 10,
    'eleven': 11,
    'twelve': 12,
    'thirteen': 13,
    'fourteen': 14,
    'fifteen': 15,
    'sixteen': 16,
    'seventeen': 17,
    'eighteen': 18,
    'nineteen': 19,
    'twenty': 20,
    'واحد': 1,
    'اثنان': 2,
    'ثلاثة': 3,
    'أربعة': 4,
    'خمسة': 5,
    'ستة': 6,
    'سبعة': 7,
    'ثمانية': 8,
    'تسعة': 9,
    'عشرة': 10,
    'أحد عشر': 11,
    'اثنى عشر': 12,
    'اثنا عشر': 12,
    'ثلاثة عشر': 13,
    'أربعة عشر': 14,
    'خمسة عشر': 15,
    'ستة عشر': 16,
    'سبعة عشر': 17,
    'ثمانية عشر': 18,
    'تسعة عشر': 19,
    'عشرون': 20,
    'عشرين': 20,
})

# Ordinal words, English and Arabic ("First Season", "الموسم الأول").
# Arabic spellings vary (hamza, ta marbuta, alif maqsura), so several
# forms map to the same number.
ORDINAL_WORDS: Mapping[str, int] = MappingProxyType({
    'first': 1,
    'second': 2,
    'third': 3,
    'fourth': 4,
    'fifth': 5,
    'sixth': 6,
    'seventh': 7,
    'eighth': 8,
    'ninth': 9,
    'tenth': 10,
    'eleventh': 11,
    'twelfth': 12,
    'thirteenth': 13,
    'fourteenth': 14,
    'fifteenth': 15,
    'sixteenth': 16,
    'seventeenth': 17,
    'eighteenth': 18,
    'nineteenth': 19,
    'twentieth': 20,
    'الأول': 1,
    'الاول': 1,
    'الاولى': 1,
    'الأولى': 1,
    'الثاني': 2,
    'الثانى': 2,
    'الثانية': 2,
    'الثالث': 3,
    'الثالثة': 3,
    'الرابع': 4,
    'الرابعة': 4,
    'الخامس': 5,
    'الخامسة': 5,
    'السادس': 6,
    'السادسة': 6,
    'السابع': 7,
    'السابعة': 7,
    'الثامن': 8,
    'الثامنة': 8,
    'التاسع': 9,
    'التاسعة': 9,
    'العاشر': 10,
    'العاشرة': 10,
    'الحادي عشر': 11,
    'الحادى عشر': 11,
    'الحادية عشر': 11,
    'الثاني عشر': 12,
    'الثانى عشر': 12,
    'الثانية عشر': 12,
    'الثالث عشر': 13,
    'الثالثة عشر': 13,
    'الرابع عشر': 14,
    'الرابعة عشر': 14,
    'الخامس عشر': 15,
    'الخامسة عشر': 15,
    'السادس عشر': 16,
    'السادسة عشر': 16,
    'السابع عشر': 17,
    'السابعة عشر': 17,
    'الثامن عشر': 18,
    'الثامنة عشر': 18,
    'التاسع عشر': 19,
    'التاسعة عشر': 19,
    'العشرون': 20,
    'العشرين': 20,
})

ARABIC_SEASON = 'الموسم'

_NUMERIC_SEASON = re.compile(
    rf'^(?:season\s*|s|{ARABIC_SEASON}\s*)(\d+)$',
    re.IGNORECASE,
)


def _squash(name: str) -> str:
    return re.sub(r'\s+', ' ', name).strip().lower()


def season_from_dir_name(
    dir_name: str,
    cardinals: Mapping[str, int] = CARDINAL_WORDS,
    ordinals: Mapping[str, int] = ORDINAL_WORDS,
) -> int | None:
    """
    Extract the season number from a directory name.

    Supports numeric ("Season 1", "S01", "الموسم 1"), cardinal word
    ("Season One", "الموسم واحد") and ordinal ("First Season",
    "الموسم الأول") forms.

    Args:
        dir_name: Basename of the directory (callers isolate it first)
        cardinals: Cardinal word table
        ordinals: Ordinal word table

    Returns:
        The season number, or None when the name is not a season folder
    """
    if not dir_name:
        return None
    name = _squash(dir_name)

    match = _NUMERIC_SEASON.match(name)
    if match:
        return int(match.group(1))

    for word, number in cardinals.items():
        word = word.lower()
        if name == f'season {word}' or name == f'{ARABIC_SEASON} {word}':
            return number

    for word, number in ordinals.items():
        word = word.lower()
        if name == f'{word} season' or name == f'{ARABIC_SEASON} {word}':
            return number

    return None


def is_season_dir(
    dir_name: str,
    cardinals: Mapping[str, int] = CARDINAL_WORDS,
    ordinals: Mapping[str, int] = ORDINAL_WORDS,
) -> bool:
    """Return True if *dir_name* is, as a whole, a season folder name."""
    return season_from_dir_name(dir_name, cardinals, ordinals) is not None
