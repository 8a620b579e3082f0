import sys
from pathlib import Path
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

# Add server directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.dictionary import DictionaryClient, DictionaryUnavailable, MemoryDictionaryClient
from core.session import SessionManager
from core.validation import ValidationPipeline
from main import app


class DownDictionary(DictionaryClient):
    async def lookup(self, word):
        raise DictionaryUnavailable("timeout")


@pytest.fixture
def manager():
    manager = SessionManager(pipeline=ValidationPipeline(dictionary=MemoryDictionaryClient(["가수"])))
    with patch("api.routes.session_manager", manager):
        yield manager


@pytest.fixture
def client():
    return TestClient(app)


def test_dictionary_lookup(manager, client):
    res = client.get("/dictionary/가수")
    assert res.status_code == 200
    assert res.json() == {"word": "가수", "exists": True, "definition": "Mock definition for '가수'"}

    res = client.get("/dictionary/가수랏")
    assert res.json()["exists"] is False


def test_dictionary_unavailable(client):
    manager = SessionManager(pipeline=ValidationPipeline(dictionary=DownDictionary()))
    with patch("api.routes.session_manager", manager):
        res = client.get("/dictionary/가수")
    assert res.status_code == 503


def test_validate(manager, client):
    res = client.get("/validate", params={"word": "가수", "rule": "ㄱ"})
    body = res.json()
    assert body["isValid"] is True
    assert body["errorKind"] is None

    res = client.get("/validate", params={"word": "나무", "rule": "ㄱㅅ"})
    body = res.json()
    assert body["isValid"] is False
    assert body["errorKind"] == "CONSONANT_MISMATCH"
    assert body["error"] == "Word must start with 'ㄱ' or 'ㅅ'"


def test_board_snapshot(manager, client):
    assert client.get("/boards/ROOM/p1").status_code == 404

    session = manager.get_or_create_session("ROOM", "p1", "ㄱ")
    session.board = session.board.set_word(0, 0, "가수")
    res = client.get("/boards/ROOM/p1")
    assert res.status_code == 200
    body = res.json()
    assert body["session"]["board"]["cells"][0][0]["word"] == "가수"
    assert body["completion"]["filledCount"] == 1


def test_board_lines_for_called_words(manager, client):
    session = manager.get_or_create_session("ROOM", "p1", "ㄱ")
    grid = [[f"가{chr(0xAC00 + r * 5 + c)}" for c in range(5)] for r in range(5)]
    session.load_words(grid)

    column = [row[2] for row in grid]
    res = client.get("/boards/ROOM/p1", params={"marked": column})
    body = res.json()
    assert body["words"] == grid
    assert body["lines"] == [{"type": "column", "index": 2, "cells": [[r, 2] for r in range(5)]}]

    assert client.get("/boards/ROOM/p1").json()["lines"] == []
