"""
Test Korean Jamo Utilities
"""
import sys
from pathlib import Path

import pytest

# Add server directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.korean_utils import (
    decompose_syllable, extract_chosung, get_initial_consonant,
    get_jamo_type, is_hangul_syllable, normalize_consonant
)


def test_syllable_decomposition():
    test_cases = [
        ('한', ('ㅎ', 'ㅏ', 'ㄴ')),
        ('글', ('ㄱ', 'ㅡ', 'ㄹ')),
        ('사', ('ㅅ', 'ㅏ', '')),
        ('과', ('ㄱ', 'ㅘ', '')),
        ('까', ('ㄲ', 'ㅏ', '')),
        ('힣', ('ㅎ', 'ㅣ', 'ㅎ')),
    ]

    for syllable, expected in test_cases:
        result = decompose_syllable(syllable)
        assert result == expected, f"Failed: {syllable} -> {result}, expected {expected}"


def test_decomposition_rejects_non_syllables():
    for char in ['A', 'ㄱ', 'ㅏ', '1', '', '가나']:
        assert not is_hangul_syllable(char), f"Should not be a syllable: {char!r}"
        with pytest.raises(ValueError):
            decompose_syllable(char)


def test_initial_consonant():
    assert get_initial_consonant('가') == 'ㄱ'
    assert get_initial_consonant('쌀') == 'ㅆ'
    assert get_initial_consonant('A') is None
    assert get_initial_consonant('ㄱ') is None, "Compatibility jamo is not a syllable"


def test_extract_chosung():
    assert extract_chosung('가수') == ['ㄱ', 'ㅅ']
    assert extract_chosung('컴퓨터') == ['ㅋ', 'ㅍ', 'ㅌ']
    assert extract_chosung('아이돌2') == ['ㅇ', 'ㅇ', 'ㄷ']
    assert extract_chosung('hello') == []


def test_normalize_consonant():
    pairs = {'ㄲ': 'ㄱ', 'ㄸ': 'ㄷ', 'ㅃ': 'ㅂ', 'ㅆ': 'ㅅ', 'ㅉ': 'ㅈ'}
    for tense, plain in pairs.items():
        assert normalize_consonant(tense) == plain
    for plain in ['ㄱ', 'ㄴ', 'ㅅ', 'ㅎ']:
        assert normalize_consonant(plain) == plain


def test_jamo_type():
    assert get_jamo_type('ㄱ') == 'cho'
    assert get_jamo_type('ㅏ') == 'jung'
    assert get_jamo_type('ㄳ') == 'jong'
    assert get_jamo_type('가') == 'unknown'
