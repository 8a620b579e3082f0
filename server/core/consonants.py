"""
Consonant rule matching for a bingo round.

A round's rule is one 초성 ('ㄱ') or an unordered pair ('ㄱㅅ'). A word
matches when the 초성 of its first syllable equals a rule member, with tense
consonants folded onto their plain base on both sides ('까치' matches 'ㄱ').
"""
from enum import Enum
from typing import List, Optional

from core.korean_utils import (
    extract_chosung, get_initial_consonant, get_jamo_type, normalize_consonant
)
from core.logging_config import get_logger

logger = get_logger(__name__)


class MatchScope(str, Enum):
    # Only the first syllable's 초성 counts. This is the game rule.
    FIRST_SYLLABLE = "first"
    # Any syllable's 초성 counts. Older client behavior, kept for comparison.
    ANY_SYLLABLE = "any"


def parse_rule(rule: str) -> Optional[List[str]]:
    """
    Split a rule string into normalized consonants.

    Returns None when the rule is not one or two 초성 glyphs.

    Example:
        parse_rule('ㄱㅅ') -> ['ㄱ', 'ㅅ']
        parse_rule('ㄲ') -> ['ㄱ']
        parse_rule('가') -> None
    """
    if not rule:
        return None
    glyphs = list(rule.strip())
    if len(glyphs) not in (1, 2):
        return None
    if any(get_jamo_type(g) != 'cho' for g in glyphs):
        return None
    return [normalize_consonant(g) for g in glyphs]


def rule_description(rule: str) -> str:
    """Human readable form of a rule, e.g. "'ㄱ' or 'ㅅ'"."""
    glyphs = list((rule or "").strip())
    return " or ".join(f"'{g}'" for g in glyphs) if glyphs else "''"


class ConsonantMatcher:
    """Stateless 초성 rule matcher; safe to share between sessions."""

    def __init__(self, scope: MatchScope = MatchScope.FIRST_SYLLABLE):
        self.scope = scope

    def matches(self, word: str, rule: str) -> bool:
        if not word or not word.strip():
            return False

        targets = parse_rule(rule)
        if targets is None:
            logger.debug(f"Unusable consonant rule: {rule!r}")
            return False

        text = word.strip()
        if self.scope == MatchScope.ANY_SYLLABLE:
            candidates = extract_chosung(text)
        else:
            first = get_initial_consonant(text[0])
            candidates = [first] if first is not None else []

        return any(normalize_consonant(c) in targets for c in candidates)
