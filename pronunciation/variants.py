"""
Pronunciation variant generation.

Enumerates plausible katakana spellings of a reading and every pitch-drop
position for each spelling, for use as forced TTS pronunciations.

Rules (applied left to right, first match wins):
- オオ        -> オー              (always merged, one branch)
- <o-row>ウ   -> <o-row>ウ | <o-row>ー   (two branches)
- <e-row>イ   -> <e-row>ー         (always merged, one branch)
- ウ (not first) -> ウ | ー        (two branches)

Input is capped at MAX_VARIANT_INPUT_LENGTH kana characters. Every branching
position doubles the output, so the cap is what keeps the result bounded.
"""

from functools import lru_cache
from typing import List, Tuple

from pronunciation.kana import is_kana, to_katakana

PITCH_MARKER = "'"
LONG_VOWEL_MARK = "ー"
MAX_VARIANT_INPUT_LENGTH = 12

# Syllables whose following ウ may be read as a long vowel
O_ROW_SYLLABLES = frozenset("オコソトノホモロゴゾドボポヨ")

# Syllables whose following イ is read as a long vowel
E_ROW_SYLLABLES = frozenset("エケセテネヘメレゲゼデベペ")


Choices = Tuple[Tuple[str, int], ...]


def _branches_at(chars: Tuple[str, ...], index: int) -> Tuple[Choices, bool]:
    """
    Return the spelling choices at a position.

    Each choice is (emitted text, characters consumed). The flag is True when
    the choices alternate per suffix (o-row + ウ) rather than each choice
    taking every suffix in turn (lone ウ).
    """
    current = chars[index]

    if index < len(chars) - 1:
        following = chars[index + 1]

        if current == "オ" and following == "オ":
            return (("オ" + LONG_VOWEL_MARK, 2),), False

        if following == "ウ" and current in O_ROW_SYLLABLES:
            return (
                (current + "ウ", 2),
                (current + LONG_VOWEL_MARK, 2),
            ), True

        if following == "イ" and current in E_ROW_SYLLABLES:
            return ((current + LONG_VOWEL_MARK, 2),), False

    if current == "ウ" and index > 0:
        return (("ウ", 1), (LONG_VOWEL_MARK, 1)), False

    return ((current, 1),), False


def generate_base_variants(katakana: str) -> List[str]:
    """
    Spelling variants of a katakana string, without pitch markers.

    トウキョウ -> トウキョウ, トーキョウ, トウキョー, トーキョー
    """
    chars = tuple(katakana)

    @lru_cache(maxsize=None)
    def suffixes(index: int) -> Tuple[str, ...]:
        if index >= len(chars):
            return ("",)

        choices, per_suffix = _branches_at(chars, index)
        results = []
        if per_suffix:
            # Both choices consume two characters
            for suffix in suffixes(index + 2):
                for emitted, _ in choices:
                    results.append(emitted + suffix)
        else:
            for emitted, consumed in choices:
                for suffix in suffixes(index + consumed):
                    results.append(emitted + suffix)
        return tuple(results)

    return list(suffixes(0))


def pitch_marked_variants(variant: str) -> List[str]:
    """
    The unmarked variant followed by one marked copy per internal boundary.

    A drop after the final character is meaningless, so markers go after
    positions 1..len-1 only.
    """
    marked = [variant]
    for position in range(1, len(variant)):
        marked.append(variant[:position] + PITCH_MARKER + variant[position:])
    return marked


def generate_variants(reading: str) -> List[str]:
    """
    Generate every spelling and pitch-drop variant of a kana reading.

    Args:
        reading: Reading in hiragana or katakana

    Returns:
        Katakana variants in generation order, or an empty list when the
        reading is not pure kana or longer than MAX_VARIANT_INPUT_LENGTH
    """
    if not is_kana(reading):
        return []

    if len(reading) > MAX_VARIANT_INPUT_LENGTH:
        return []

    variants: List[str] = []
    for base in generate_base_variants(to_katakana(reading)):
        variants.extend(pitch_marked_variants(base))
    return variants
