"""
Pinyin normalization: numbered tones to diacritic tone marks
"""

import logging
import re

logger = logging.getLogger(__name__)

# Index 0 is unused so tone numbers map directly; tone 5 (neutral) is unmarked
TONE_MARKS = {
    "a": ("", "ā", "á", "ǎ", "à", "a"),
    "o": ("", "ō", "ó", "ǒ", "ò", "o"),
    "e": ("", "ē", "é", "ě", "è", "e"),
    "i": ("", "ī", "í", "ǐ", "ì", "i"),
    "u": ("", "ū", "ú", "ǔ", "ù", "u"),
    "ü": ("", "ǖ", "ǘ", "ǚ", "ǜ", "ü"),
}

TONED_VOWELS = "".join(marks[tone] for marks in TONE_MARKS.values() for tone in range(1, 5))


class PinyinNormalizer:
    """Converts numbered-tone pinyin (e.g. ``hao3``) into toned form (``hǎo``)"""

    def __init__(self):
        # Letters (ü, its ASCII stand-in v and already-toned vowels) plus an optional tone digit
        self.syllable_pattern = re.compile(rf"([a-zü{TONED_VOWELS}]+)([1-5])?")

    def normalize(self, text: str) -> str:
        """
        Normalize pinyin input for answer comparison

        Args:
            text: Raw user input, e.g. "Ni3 hao3"

        Returns:
            Lower-cased text with tone digits replaced by tone marks,
            whitespace collapsed to single spaces
        """
        if not text:
            return ""

        groups = text.lower().split()
        return " ".join(self.syllable_pattern.sub(self._convert_match, group) for group in groups)

    def _convert_match(self, match: re.Match) -> str:
        letters, digit = match.group(1), match.group(2)
        if digit is None:
            return letters
        if any(char in TONED_VOWELS for char in letters):
            # Already carries a mark; a second digit is left as typed
            return f"{letters}{digit}"
        return self.convert_syllable(letters, int(digit))

    def convert_syllable(self, letters: str, tone: int) -> str:
        """Apply a tone mark to a single syllable, returning input unchanged when impossible"""
        index = self._find_tone_vowel(letters)
        if index is None:
            logger.debug(f"No tone-bearing vowel in '{letters}{tone}', leaving unchanged")
            return f"{letters}{tone}"

        vowel = letters[index]
        marks = TONE_MARKS.get("ü" if vowel == "v" else vowel)
        if marks is None:
            return f"{letters}{tone}"

        toned = letters[:index] + marks[tone] + letters[index + 1:]
        return toned.replace("v", "ü")

    def _find_tone_vowel(self, letters: str) -> int | None:
        """Locate the vowel that carries the tone mark"""
        for vowel in ("a", "o", "e"):
            if vowel in letters:
                return letters.index(vowel)

        if "iu" in letters:
            return letters.index("iu") + 1

        for vowel in ("i", "u", "ü", "v"):
            if vowel in letters:
                return letters.index(vowel)

        return None


# Global normalizer instance
_normalizer = None


def get_pinyin_normalizer() -> PinyinNormalizer:
    """Get global pinyin normalizer instance"""
    global _normalizer
    if _normalizer is None:
        _normalizer = PinyinNormalizer()
    return _normalizer


def normalize_pinyin(text: str) -> str:
    """Convenience function to normalize numbered-tone pinyin"""
    return get_pinyin_normalizer().normalize(text)
