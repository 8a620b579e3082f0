"""
Korean dictionary lookup.

`KrDictClient` asks the 한국어기초사전 (krdict) open API whether a word exists;
`MemoryDictionaryClient` answers from an in-memory word list for development
and tests. Both expose the same coroutine: `lookup(word) -> LookupResult`.
"""
import asyncio
import json
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set, Union

import requests
from bs4 import BeautifulSoup

from core.config import (
    DICTIONARY_DEV_MODE, KOREAN_WORDS_JSON_PATH,
    KRDICT_API_KEY, KRDICT_API_URL, KRDICT_TIMEOUT
)
from core.logging_config import get_logger

logger = get_logger(__name__)


class DictionaryUnavailable(Exception):
    """The dictionary could not be asked. Means "unconfirmed", not "invalid"."""


@dataclass(frozen=True)
class LookupResult:
    exists: bool
    definition: Optional[str] = None


@dataclass(frozen=True)
class DictionaryEntry:
    word: str
    pos: Optional[str] = None
    definition: Optional[str] = None


@dataclass(frozen=True)
class DictionaryResponse:
    total: int
    items: List[DictionaryEntry] = field(default_factory=list)
    error: Optional[str] = None


def _text_of(tag) -> Optional[str]:
    if tag is None:
        return None
    text = tag.get_text().strip()
    return text or None


def parse_dictionary_xml(xml_text: Union[str, bytes]) -> DictionaryResponse:
    """
    Parse a krdict search response.

    <channel>
        <total>2</total>
        <item>
            <word>가수</word>
            <pos>명사</pos>
            <sense><definition>노래 부르는 것을 직업으로 하는 사람.</definition></sense>
        </item>
        ...
    </channel>

    A body without a readable <total> counts as zero results. Service errors
    (<error><error_code/><message/></error>) are reported in `error`.
    """
    soup = BeautifulSoup(xml_text or "", "html.parser")

    error_tag = soup.find("error")
    if error_tag is not None:
        code = _text_of(error_tag.find("error_code"))
        message = _text_of(error_tag.find("message")) or _text_of(error_tag)
        return DictionaryResponse(total=0, error=f"{code}: {message}" if code else message or "unknown error")

    try:
        total = int(_text_of(soup.find("total")) or 0)
    except ValueError:
        total = 0

    if total <= 0:
        return DictionaryResponse(total=0)

    items = []
    for item in soup.find_all("item"):
        word = _text_of(item.find("word"))
        if not word:
            continue
        items.append(DictionaryEntry(
            word=word,
            pos=_text_of(item.find("pos")),
            definition=_text_of(item.find("definition")),
        ))

    return DictionaryResponse(total=total, items=items)


def to_lookup_result(word: str, response: DictionaryResponse) -> LookupResult:
    if response.error:
        raise DictionaryUnavailable(f"API Error: {response.error}")

    if response.total <= 0:
        return LookupResult(exists=False)

    if response.items:
        first = response.items[0]
        definition = first.definition or f"{first.pos or 'Korean'} word: {first.word}"
        return LookupResult(exists=True, definition=definition)

    return LookupResult(exists=True, definition=f"Korean word: {word}")


class DictionaryClient:
    """Base class for lookup backends."""

    async def lookup(self, word: str) -> LookupResult:
        raise NotImplementedError


class KrDictClient(DictionaryClient):
    def __init__(self, api_url: str = KRDICT_API_URL, api_key: str = KRDICT_API_KEY,
                 timeout: float = KRDICT_TIMEOUT, session: requests.Session = None):
        self.api_url = api_url
        self.api_key = api_key
        self.timeout = timeout
        self._session = session if session is not None else requests.Session()

    async def lookup(self, word: str) -> LookupResult:
        # requests blocks, so the HTTP call runs on a worker thread
        body = await asyncio.to_thread(self._fetch, word)
        response = parse_dictionary_xml(body)
        logger.debug(f"krdict '{word}': total={response.total}, items={len(response.items)}")
        return to_lookup_result(word, response)

    def _fetch(self, word: str) -> bytes:
        params = {
            "key": self.api_key,
            "type_search": "search",
            "part": "word",
            "q": word,
            "sort": "dict",
        }
        try:
            response = self._session.get(self.api_url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning(f"Dictionary request failed for '{word}': {e}")
            raise DictionaryUnavailable(f"Dictionary request failed: {e}") from e
        return response.content


# Words accepted in development mode when no word file is present
DEFAULT_WORDS = {
    '가게', '가족', '감사', '강아지', '개구리', '거울', '게임', '겨울', '고양이', '공부',
    '나무', '날씨', '냉장고', '노래', '누나', '눈물', '다리', '대학교', '도서관', '동생',
    '라디오', '마음', '만화', '머리', '모래', '물고기', '미래', '바다', '밥상', '별빛',
    '사과', '새벽', '소나무', '시간', '아침', '엄마', '여름', '오늘', '우리', '음악',
    '자동차', '전화', '집안', '책상', '친구', '컴퓨터', '타자기', '학교', '하늘', '할머니',
    # ㄱㅅ practice board
    '가수', '가슴', '가사', '가설', '공사', '가속', '가시', '가식', '가상', '가스',
    '개선', '계산', '경사', '개설', '계속', '고속', '고생', '고소', '국수', '국산',
    '군사', '검사', '건설', '금속', '기사',
}

KOREAN_WORDS = None


def load_korean_words() -> Set[str]:
    global KOREAN_WORDS
    if KOREAN_WORDS is None:
        if KOREAN_WORDS_JSON_PATH.exists():
            with open(KOREAN_WORDS_JSON_PATH, 'r', encoding='utf-8') as f:
                KOREAN_WORDS = set(json.load(f))
            logger.info(f"Loaded {len(KOREAN_WORDS)} words from {KOREAN_WORDS_JSON_PATH}")
        else:
            KOREAN_WORDS = set(DEFAULT_WORDS)
    return KOREAN_WORDS


class MemoryDictionaryClient(DictionaryClient):
    def __init__(self, words: Optional[Iterable[str]] = None):
        self._words: Set[str] = {w.strip() for w in words} if words is not None else load_korean_words()

    async def lookup(self, word: str) -> LookupResult:
        text = word.strip()
        if text in self._words:
            return LookupResult(exists=True, definition=f"Mock definition for '{text}'")
        return LookupResult(exists=False)


def get_dictionary_client() -> DictionaryClient:
    if DICTIONARY_DEV_MODE:
        logger.info("Dictionary dev mode: using in-memory word list")
        return MemoryDictionaryClient()
    if not KRDICT_API_KEY:
        logger.warning("KRDICT_API_KEY is not set, falling back to in-memory word list")
        return MemoryDictionaryClient()
    return KrDictClient()
