"""
Word verification for a bingo cell.

`ValidationPipeline.verify` checks the round's consonant rule first and only
then asks the dictionary. The outcome is a `WordVerdict` carrying the word it
was computed for, so a result that arrives after the cell changed can be
recognised and dropped.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from core.consonants import ConsonantMatcher, rule_description
from core.dictionary import DictionaryClient, DictionaryUnavailable, get_dictionary_client
from core.logging_config import get_logger

logger = get_logger(__name__)


class ErrorKind(str, Enum):
    EMPTY_WORD = "EMPTY_WORD"
    DUPLICATE_WORD = "DUPLICATE_WORD"
    CONSONANT_MISMATCH = "CONSONANT_MISMATCH"
    NOT_IN_DICTIONARY = "NOT_IN_DICTIONARY"
    DICTIONARY_UNAVAILABLE = "DICTIONARY_UNAVAILABLE"


DUPLICATE_MESSAGE = "This word is already used on the board"
UNAVAILABLE_MESSAGE = "Dictionary service unavailable, please try again"


@dataclass(frozen=True)
class WordVerdict:
    """Result of verifying `word`; the word is kept so late results can be matched to the cell."""
    word: str
    matches_rule: bool = False
    exists_in_dictionary: bool = False
    is_valid: bool = False
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    definition: Optional[str] = None

    @classmethod
    def empty(cls, word: str = "") -> "WordVerdict":
        return cls(word=word, error_kind=ErrorKind.EMPTY_WORD)

    @classmethod
    def duplicate(cls, word: str) -> "WordVerdict":
        return cls(word=word, error=DUPLICATE_MESSAGE, error_kind=ErrorKind.DUPLICATE_WORD)

    def to_dict(self):
        return {
            "word": self.word,
            "matchesRule": self.matches_rule,
            "existsInDictionary": self.exists_in_dictionary,
            "isValid": self.is_valid,
            "error": self.error,
            "errorKind": self.error_kind.value if self.error_kind else None,
            "definition": self.definition,
        }


class ValidationPipeline:
    def __init__(self, matcher: ConsonantMatcher = None, dictionary: DictionaryClient = None):
        self.matcher = matcher if matcher is not None else ConsonantMatcher()
        self.dictionary = dictionary if dictionary is not None else get_dictionary_client()

    async def verify(self, word: str, rule: str) -> WordVerdict:
        """
        Verify one word against the round rule and the dictionary.

        The consonant check runs first and short-circuits, so words that
        cannot match never reach the network. Dictionary outages come back
        as DICTIONARY_UNAVAILABLE verdicts; this coroutine does not raise.
        """
        text = (word or "").strip()
        if not text:
            return WordVerdict.empty(word)

        if not self.matcher.matches(text, rule):
            logger.debug(f"Consonant mismatch: '{text}' vs rule '{rule}'")
            return WordVerdict(
                word=word,
                error=f"Word must start with {rule_description(rule)}",
                error_kind=ErrorKind.CONSONANT_MISMATCH,
            )

        try:
            result = await self.dictionary.lookup(text)
        except DictionaryUnavailable as e:
            logger.warning(f"Could not confirm '{text}': {e}")
            return WordVerdict(
                word=word,
                matches_rule=True,
                error=UNAVAILABLE_MESSAGE,
                error_kind=ErrorKind.DICTIONARY_UNAVAILABLE,
            )

        if not result.exists:
            return WordVerdict(
                word=word,
                matches_rule=True,
                error=f"'{text}' was not found in the dictionary",
                error_kind=ErrorKind.NOT_IN_DICTIONARY,
            )

        logger.debug(f"Verified '{text}' for rule '{rule}'")
        return WordVerdict(
            word=word,
            matches_rule=True,
            exists_in_dictionary=True,
            is_valid=True,
            definition=result.definition,
        )
