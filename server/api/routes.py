from typing import List

from fastapi import APIRouter, HTTPException, Query
from core.dictionary import DictionaryUnavailable
from core.session import session_manager
from core.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("/dictionary/{word}")
async def lookup_word(word: str):
    """사전에 단어가 있는지 확인합니다."""
    try:
        result = await session_manager.pipeline.dictionary.lookup(word)
    except DictionaryUnavailable as e:
        logger.warning(f"Dictionary lookup failed for '{word}': {e}")
        raise HTTPException(status_code=503, detail="Dictionary service unavailable")
    return {"word": word, "exists": result.exists, "definition": result.definition}


@router.get("/validate")
async def validate_word(word: str = Query(...), rule: str = Query(...)):
    """초성 규칙과 사전을 모두 통과하는지 검증합니다."""
    verdict = await session_manager.pipeline.verify(word, rule)
    return verdict.to_dict()


@router.get("/boards/{room_code}/{player_id}")
async def get_board(room_code: str, player_id: str, marked: List[str] = Query(default=[])):
    """보드 상태와, 불린 단어(marked) 기준으로 완성된 빙고 줄을 반환합니다."""
    session = session_manager.get_session(room_code, player_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Board not found")
    return {
        "status": "success",
        "session": session.to_dict(),
        "completion": session.completion(),
        "words": session.board.words(),
        "lines": session.completed_lines(marked),
    }
