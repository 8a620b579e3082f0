"""
Korean Jamo (자모) Decomposition Utilities

Splits Korean syllables into their constituent jamos and extracts the
initial consonants (초성) used by the consonant rule of a bingo round.
"""
from typing import List, Optional

# Hangul Unicode Constants
HANGUL_BASE = 0xAC00  # '가'
HANGUL_END = 0xD7A3   # '힣'

# Jamo Lists
# 초성 (Initial consonants) - 19 characters
CHOSUNG_LIST = [
    'ㄱ', 'ㄲ', 'ㄴ', 'ㄷ', 'ㄸ', 'ㄹ', 'ㅁ', 'ㅂ', 'ㅃ',
    'ㅅ', 'ㅆ', 'ㅇ', 'ㅈ', 'ㅉ', 'ㅊ', 'ㅋ', 'ㅌ', 'ㅍ', 'ㅎ'
]

# 중성 (Medial vowels) - 21 characters
JUNGSUNG_LIST = [
    'ㅏ', 'ㅐ', 'ㅑ', 'ㅒ', 'ㅓ', 'ㅔ', 'ㅕ', 'ㅖ', 'ㅗ', 'ㅘ',
    'ㅙ', 'ㅚ', 'ㅛ', 'ㅜ', 'ㅝ', 'ㅞ', 'ㅟ', 'ㅠ', 'ㅡ', 'ㅢ', 'ㅣ'
]

# 종성 (Final consonants) - 28 characters (0 = no final consonant)
JONGSUNG_LIST = [
    '', 'ㄱ', 'ㄲ', 'ㄳ', 'ㄴ', 'ㄵ', 'ㄶ', 'ㄷ', 'ㄹ', 'ㄺ', 'ㄻ',
    'ㄼ', 'ㄽ', 'ㄾ', 'ㄿ', 'ㅀ', 'ㅁ', 'ㅂ', 'ㅄ', 'ㅅ', 'ㅆ', 'ㅇ',
    'ㅈ', 'ㅊ', 'ㅋ', 'ㅌ', 'ㅍ', 'ㅎ'
]

ALL_CHOSUNG = set(CHOSUNG_LIST)

# 된소리 -> 예사소리 (tense consonant -> plain base)
TENSE_TO_PLAIN = {
    'ㄲ': 'ㄱ',
    'ㄸ': 'ㄷ',
    'ㅃ': 'ㅂ',
    'ㅆ': 'ㅅ',
    'ㅉ': 'ㅈ',
}


def is_hangul_syllable(char: str) -> bool:
    """Check if a character is a complete Hangul syllable."""
    if len(char) != 1:
        return False
    code = ord(char)
    return HANGUL_BASE <= code <= HANGUL_END


def decompose_syllable(syllable: str) -> tuple:
    """
    Decompose a single Hangul syllable into its jamos.

    Args:
        syllable: A single Hangul character (e.g., '한')

    Returns:
        Tuple of (초성, 중성, 종성). 종성 is empty string if no final consonant.

    Raises:
        ValueError: if the character is not a complete Hangul syllable

    Example:
        decompose_syllable('한') -> ('ㅎ', 'ㅏ', 'ㄴ')
        decompose_syllable('가') -> ('ㄱ', 'ㅏ', '')
    """
    if not is_hangul_syllable(syllable):
        raise ValueError(f"Not a Hangul syllable: {syllable!r}")

    code = ord(syllable) - HANGUL_BASE

    jong_idx = code % 28
    jung_idx = ((code - jong_idx) // 28) % 21
    cho_idx = ((code - jong_idx) // 28) // 21

    cho = CHOSUNG_LIST[cho_idx]
    jung = JUNGSUNG_LIST[jung_idx]
    jong = JONGSUNG_LIST[jong_idx]

    return (cho, jung, jong)


def normalize_consonant(jamo: str) -> str:
    """Map a tense consonant (ㄲ ㄸ ㅃ ㅆ ㅉ) to its plain base; others unchanged."""
    return TENSE_TO_PLAIN.get(jamo, jamo)


def get_initial_consonant(syllable: str) -> Optional[str]:
    """
    Get the 초성 of a syllable, or None if it cannot be decomposed.

    Example:
        get_initial_consonant('가') -> 'ㄱ'
        get_initial_consonant('A') -> None
    """
    try:
        cho, _, _ = decompose_syllable(syllable)
    except ValueError:
        return None
    return cho


def extract_chosung(word: str) -> List[str]:
    """
    Extract the 초성 of every Hangul syllable in a word, skipping anything else.

    Example:
        extract_chosung('가수') -> ['ㄱ', 'ㅅ']
        extract_chosung('아이돌2') -> ['ㅇ', 'ㅇ', 'ㄷ']
    """
    consonants = []
    for char in word:
        cho = get_initial_consonant(char)
        if cho is not None:
            consonants.append(cho)
    return consonants


def get_jamo_type(jamo: str) -> str:
    """
    Get the type of a jamo character.

    Returns:
        'cho' for 초성, 'jung' for 중성, 'jong' for 종성, 'unknown' otherwise
    """
    if jamo in ALL_CHOSUNG:
        return 'cho'
    elif jamo in JUNGSUNG_LIST:
        return 'jung'
    elif jamo in JONGSUNG_LIST[1:]:
        return 'jong'
    else:
        return 'unknown'
