"""
Test consonant rule matching
"""
import sys
from pathlib import Path

# Add server directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.consonants import ConsonantMatcher, MatchScope, parse_rule, rule_description

matcher = ConsonantMatcher()


def test_single_consonant_rule():
    assert matcher.matches('가수', 'ㄱ'), "가 starts with ㄱ"
    assert matcher.matches('  고양이 ', 'ㄱ'), "Surrounding whitespace is ignored"
    assert not matcher.matches('나무', 'ㄱ')


def test_pair_rule_matches_either_member():
    assert matcher.matches('가수', 'ㄱㅅ')
    assert matcher.matches('사과', 'ㄱㅅ')
    assert matcher.matches('사과', 'ㅅㄱ'), "Pairs are unordered"
    assert not matcher.matches('나무', 'ㄱㅅ'), "ㄴ matches neither ㄱ nor ㅅ"


def test_only_first_syllable_counts():
    # 나 is ㄴ; the ㅅ in 수 must not satisfy the rule
    assert not matcher.matches('나수', 'ㅅ')
    assert not matcher.matches('고양이', 'ㅇ')


def test_tense_consonants_normalize():
    assert matcher.matches('까치', 'ㄱ'), "ㄲ folds onto ㄱ"
    assert matcher.matches('가수', 'ㄲ'), "Rule side folds too"
    assert matcher.matches('쌀밥', 'ㄱㅅ')
    assert matcher.matches('떡', 'ㄷㅂ')
    assert matcher.matches('빵', 'ㅂ')
    assert matcher.matches('짜장', 'ㅈ')


def test_rejections_never_raise():
    assert not matcher.matches('', 'ㄱ')
    assert not matcher.matches('   ', 'ㄱ')
    assert not matcher.matches(None, 'ㄱ')
    assert not matcher.matches('apple', 'ㄱ'), "Non-Korean word"
    assert not matcher.matches('ㄱ수', 'ㄱ'), "Bare jamo is not a syllable"
    assert not matcher.matches('가수', ''), "Empty rule"
    assert not matcher.matches('가수', 'ㄱㅅㅇ'), "Rules have one or two consonants"
    assert not matcher.matches('가수', '가'), "Rule must be a consonant"


def test_any_syllable_scope_is_opt_in():
    legacy = ConsonantMatcher(scope=MatchScope.ANY_SYLLABLE)
    assert legacy.matches('나수', 'ㅅ'), "Legacy scope looks at every syllable"
    assert not matcher.matches('나수', 'ㅅ'), "Default scope only looks at the first syllable"
    assert not legacy.matches('나무', 'ㄱㅅ')


def test_parse_rule():
    assert parse_rule('ㄱㅅ') == ['ㄱ', 'ㅅ']
    assert parse_rule(' ㄲ ') == ['ㄱ']
    assert parse_rule('ㄱㅏ') is None
    assert parse_rule('') is None


def test_rule_description():
    assert rule_description('ㄱ') == "'ㄱ'"
    assert rule_description('ㄱㅅ') == "'ㄱ' or 'ㅅ'"
