import asyncio
import inspect
from typing import Awaitable, Callable, Dict, List, Optional, Tuple

from core.board import Board, cell_key, normalize_word
from core.config import BOARD_CREATION_TIME
from core.debounce import DebounceScheduler
from core.fallback import TimerExpiryFallback
from core.logging_config import get_logger
from core.validation import ErrorKind, ValidationPipeline, WordVerdict

logger = get_logger(__name__)


async def _maybe_await(result):
    if inspect.isawaitable(result):
        await result


class RoundClock:
    """Countdown for the board-creation phase; calls `on_expire` once when it reaches zero."""

    def __init__(self, duration: float, on_expire: Callable[[], Awaitable[None]],
                 on_tick: Optional[Callable[[float], Awaitable[None]]] = None, tick: float = 1.0):
        self.duration = duration
        self.time_remaining = duration
        self.tick = tick
        self.on_expire = on_expire
        self.on_tick = on_tick
        self.expired = False
        self._task: Optional[asyncio.Task] = None

    def start(self):
        self.cancel()
        self.time_remaining = self.duration
        self.expired = False
        self._task = asyncio.create_task(self._run())
        return self._task

    def cancel(self):
        # the clock's own task must not cancel itself from inside on_expire
        if self._task and not self._task.done() and self._task is not asyncio.current_task():
            self._task.cancel()

    async def _run(self):
        try:
            while self.time_remaining > 0:
                await asyncio.sleep(min(self.tick, self.time_remaining))
                self.time_remaining = max(0, self.time_remaining - self.tick)
                if self.on_tick:
                    await _maybe_await(self.on_tick(self.time_remaining))

            self.expired = True
            logger.info("Board creation time is up")
            await _maybe_await(self.on_expire())
        except asyncio.CancelledError:
            logger.debug("Round clock cancelled")


class BoardSession:
    """
    One player's board during the board-creation phase.

    Edits are applied optimistically and verified after the debounce delay.
    Verdicts are always applied to `self.board` as it is when they arrive,
    never to a snapshot captured before the lookup.
    """

    def __init__(self, player_id: str, rule: str, pipeline: ValidationPipeline = None,
                 scheduler: DebounceScheduler = None,
                 on_change: Optional[Callable[["BoardSession"], Awaitable[None]]] = None):
        self.player_id = player_id
        self.rule = rule
        self.pipeline = pipeline if pipeline is not None else ValidationPipeline()
        self.scheduler = scheduler if scheduler is not None else DebounceScheduler()
        self.fallback = TimerExpiryFallback(self.scheduler)
        self.on_change = on_change
        self.board = Board.empty()
        self.is_frozen = False
        self.clock: Optional[RoundClock] = None

        logger.debug(f"Board session created for {player_id} with rule '{rule}'")

    def edit(self, row: int, col: int, text: str) -> Board:
        if self.is_frozen:
            logger.debug(f"Ignoring edit from {self.player_id} after time up")
            return self.board
        old_word = self.board.cell(row, col).word
        self.board = self.board.set_word(row, col, text)
        self._schedule(row, col, text)
        if normalize_word(old_word) != normalize_word(text):
            self._recheck_duplicates(old_word, row, col)
        return self.board

    def _schedule(self, row: int, col: int, word: str):
        self.scheduler.schedule(
            cell_key(row, col), word,
            lambda text: self._verify_cell(row, col, text),
        )

    def _recheck_duplicates(self, word: str, row: int, col: int):
        """Verify again the cells that were rejected as duplicates of a word that just left (row, col)."""
        target = normalize_word(word)
        if not target:
            return
        for r, c, cell in self.board.iter_cells():
            if (r, c) == (row, col) or cell.error_kind != ErrorKind.DUPLICATE_WORD:
                continue
            if normalize_word(cell.word) == target:
                logger.debug(f"'{cell.word}' at {cell.id} may no longer be a duplicate, verifying again")
                self._schedule(r, c, cell.word)

    def load_words(self, grid) -> Board:
        """Replace the board with a preset grid of confirmed words (development boards)."""
        if self.is_frozen:
            return self.board
        board = Board.from_words(grid)
        if board.size != self.board.size:
            raise ValueError(f"Preset board must be {self.board.size}x{self.board.size}")
        self.scheduler.cancel_all()
        self.board = board
        logger.info(f"Preset board loaded for {self.player_id}")
        return self.board

    def completed_lines(self, marked_words) -> List[dict]:
        return [line.to_dict() for line in self.board.completed_lines(marked_words)]

    def focus(self, row: int, col: int) -> Board:
        if not self.is_frozen:
            self.board = self.board.set_focus(row, col)
        return self.board

    def blur(self, row: int, col: int) -> Board:
        if not self.is_frozen:
            self.board = self.board.clear_focus(row, col)
        return self.board

    async def _verify_cell(self, row: int, col: int, word: str):
        if not word.strip():
            self.board = self.board.apply_verdict(row, col, WordVerdict.empty(word))
            await self._notify()
            return

        # uniqueness first, so duplicates never cost a lookup
        if self.board.is_duplicate(word, row, col):
            logger.debug(f"Duplicate word '{word}' at {cell_key(row, col)}")
            self.board = self.board.apply_verdict(row, col, WordVerdict.duplicate(word))
            await self._notify()
            return

        self.board = self.board.mark_validating(row, col, word)
        await self._notify()

        verdict = await self.pipeline.verify(word, self.rule)
        if self.is_frozen:
            return

        # another cell may have taken the same word while the lookup ran
        if self.board.is_duplicate(word, row, col):
            verdict = WordVerdict.duplicate(word)
        self.board = self.board.apply_verdict(row, col, verdict)
        await self._notify()

    def expire(self) -> Board:
        """Apply the time-up fallback and freeze the board. Safe to call more than once."""
        if self.is_frozen:
            return self.board
        board = self.fallback.on_deadline(self.board)
        # cancelled lookups will never report back
        self.board = board.settle_validating()
        self.is_frozen = True
        if self.clock:
            self.clock.cancel()
        logger.info(
            f"Board for {self.player_id} frozen: "
            f"{self.board.valid_count}/25 valid, duplicates={self.board.has_duplicates}"
        )
        return self.board

    async def _on_deadline(self):
        self.expire()
        await self._notify()

    def start_clock(self, seconds: float = BOARD_CREATION_TIME, on_tick=None, tick: float = 1.0) -> RoundClock:
        if self.clock:
            self.clock.cancel()
        self.clock = RoundClock(seconds, self._on_deadline, on_tick=on_tick, tick=tick)
        self.clock.start()
        return self.clock

    async def _notify(self):
        if not self.on_change:
            return
        try:
            await _maybe_await(self.on_change(self))
        except Exception as e:
            logger.warning(f"Board change listener failed for {self.player_id}: {e}")

    def completion(self) -> Dict:
        return self.board.completion()

    def close(self):
        self.scheduler.cancel_all()
        if self.clock:
            self.clock.cancel()
        logger.debug(f"Board session closed for {self.player_id}")

    def to_dict(self):
        return {
            "playerId": self.player_id,
            "rule": self.rule,
            "isFrozen": self.is_frozen,
            "timeRemaining": self.clock.time_remaining if self.clock else None,
            "board": self.board.to_dict(),
        }


class SessionManager:
    def __init__(self, pipeline: ValidationPipeline = None):
        self._pipeline = pipeline
        self.sessions: Dict[Tuple[str, str], BoardSession] = {}

    @property
    def pipeline(self) -> ValidationPipeline:
        # built lazily so importing this module does not pick a dictionary backend
        if self._pipeline is None:
            self._pipeline = ValidationPipeline()
        return self._pipeline

    def get_session(self, room_code: str, player_id: str) -> Optional[BoardSession]:
        return self.sessions.get((room_code, player_id))

    def get_or_create_session(self, room_code: str, player_id: str, rule: str, **kwargs) -> BoardSession:
        key = (room_code, player_id)
        session = self.sessions.get(key)
        if session is None:
            session = BoardSession(player_id, rule, pipeline=self.pipeline, **kwargs)
            self.sessions[key] = session
            logger.info(f"Room {room_code}: board session started for {player_id}")
        elif session.rule != rule:
            logger.warning(f"Room {room_code}: {player_id} rejoined with rule '{rule}', keeping '{session.rule}'")
        return session

    def room_sessions(self, room_code: str) -> List[BoardSession]:
        return [s for (room, _), s in self.sessions.items() if room == room_code]

    def remove_session(self, room_code: str, player_id: str):
        session = self.sessions.pop((room_code, player_id), None)
        if session:
            session.close()
            logger.info(f"Room {room_code}: board session removed for {player_id}")


session_manager = SessionManager()
