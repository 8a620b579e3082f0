import os
from pathlib import Path
from dotenv import load_dotenv
from core.logging_config import get_logger

logger = get_logger(__name__)

load_dotenv()

# Paths
BASE_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = BASE_DIR / "data"
KOREAN_WORDS_JSON_PATH = DATA_DIR / "korean_words.json"

# Server
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 8000))

# Korean dictionary (krdict) API
KRDICT_API_URL = os.getenv("KRDICT_API_URL", "https://krdict.korean.go.kr/api/search")
KRDICT_API_KEY = os.getenv("KRDICT_API_KEY", "")
KRDICT_TIMEOUT = float(os.getenv("KRDICT_TIMEOUT", 10))
# 개발 모드에서는 API 대신 메모리 단어 목록을 사용
DICTIONARY_DEV_MODE = os.getenv("DICTIONARY_DEV_MODE", "false").lower() in ("1", "true", "yes")

# Board
BOARD_SIZE = 5
DEBOUNCE_DELAY_MS = int(os.getenv("DEBOUNCE_DELAY_MS", 500))
BOARD_CREATION_TIME = int(os.getenv("BOARD_CREATION_TIME", 180))  # seconds
