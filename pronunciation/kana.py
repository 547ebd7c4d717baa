"""
Kana normalization.

Bidirectional katakana <-> hiragana transliteration over a fixed chart.
Characters outside the chart (kanji, latin, the long-vowel mark ー) pass
through unchanged.
"""

import re

# Ordered one-to-one: position i in one chart pairs with position i in the other.
KATAKANA_CHART = (
    "ァアィイゥウェエォオカガキギクグケゲコゴサザシジスズセゼソゾタダチヂッツヅテデトド"
    "ナニヌネノハバパヒビピフブプヘベペホボポマミムメモャヤュユョヨラリルレロヮワヰヱヲンヴヵヶヽヾ"
)
HIRAGANA_CHART = (
    "ぁあぃいぅうぇえぉおかがきぎくぐけげこごさざしじすずせぜそぞただちぢっつづてでとど"
    "なにぬねのはばぱひびぴふぶぷへべぺほぼぽまみむめもゃやゅゆょよらりるれろゎわゐゑをんゔゕゖゝゞ"
)

_TO_HIRAGANA = str.maketrans(KATAKANA_CHART, HIRAGANA_CHART)
_TO_KATAKANA = str.maketrans(HIRAGANA_CHART, KATAKANA_CHART)

# Hiragana block + katakana block (includes ー, ・ and the iteration marks)
_KANA_RE = re.compile(r"^[\u3040-\u309F\u30A0-\u30FF]+$")


def to_hiragana(text: str) -> str:
    """Convert every katakana character in the chart to its hiragana pair."""
    if not text:
        return ""
    return text.translate(_TO_HIRAGANA)


def to_katakana(text: str) -> str:
    """Convert every hiragana character in the chart to its katakana pair."""
    if not text:
        return ""
    return text.translate(_TO_KATAKANA)


def is_kana(text: str) -> bool:
    """True when text is non-empty and made only of hiragana/katakana."""
    if not text:
        return False
    return bool(_KANA_RE.match(text))
