from dataclasses import replace

from core.board import Board
from core.debounce import DebounceScheduler
from core.logging_config import get_logger

logger = get_logger(__name__)


def revert_unconfirmed(board: Board) -> Board:
    """
    Roll cells that are still being edited back to their last confirmed word.

    Only focused or validating cells holding a `previous_word` change; the
    stash is consumed so a second pass leaves the board as it is.
    """
    def revert(cell):
        if (cell.is_focused or cell.is_validating) and cell.previous_word is not None:
            logger.debug(f"Time up: reverting cell {cell.id} from '{cell.word}' to '{cell.previous_word}'")
            return replace(
                cell,
                word=cell.previous_word,
                is_valid=True,
                is_focused=False,
                is_validating=False,
                validation_error=None,
                error_kind=None,
                previous_word=None,
            )
        return cell

    reverted = Board(tuple(tuple(revert(cell) for cell in row) for row in board.cells))
    return board if reverted == board else reverted


class TimerExpiryFallback:
    def __init__(self, scheduler: DebounceScheduler):
        self.scheduler = scheduler

    def on_deadline(self, board: Board) -> Board:
        # no verification may start or land after the deadline
        self.scheduler.cancel_all()
        return revert_unconfirmed(board)
