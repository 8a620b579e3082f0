"""
Bingo board state.

A `Board` is an immutable 5x5 snapshot. Every operation returns a new
board (or the same one when nothing changes), so a reader never sees a
half-applied update. Cells are addressed by (row, col); `Cell.id` is the
stable "row-col" key used by the debounce timers.
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from core.config import BOARD_SIZE
from core.logging_config import get_logger
from core.validation import ErrorKind, WordVerdict

logger = get_logger(__name__)


def normalize_word(word: Optional[str]) -> str:
    return (word or "").strip().lower()


def cell_key(row: int, col: int) -> str:
    return f"{row}-{col}"


class CellStyle(str, Enum):
    FOCUSED = "focused"
    VALIDATING = "validating"
    VALID = "valid"
    INVALID = "invalid"
    DEFAULT = "default"


@dataclass(frozen=True)
class Cell:
    id: str
    word: str = ""
    is_valid: bool = False
    is_focused: bool = False
    is_validating: bool = False
    validation_error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    definition: Optional[str] = None
    previous_word: Optional[str] = None

    @property
    def is_filled(self) -> bool:
        return self.word != ""

    def to_dict(self):
        return {
            "id": self.id,
            "word": self.word,
            "isValid": self.is_valid,
            "isFocused": self.is_focused,
            "isValidating": self.is_validating,
            "validationError": self.validation_error,
            "errorKind": self.error_kind.value if self.error_kind else None,
            "definition": self.definition,
            "previousWord": self.previous_word,
            "style": Board.cell_style(self).value,
        }


@dataclass(frozen=True)
class BingoLine:
    type: str  # 'row' | 'column' | 'diagonal'
    index: int
    cells: Tuple[Tuple[int, int], ...]

    def to_dict(self):
        return {"type": self.type, "index": self.index, "cells": [list(c) for c in self.cells]}


@dataclass(frozen=True)
class Board:
    cells: Tuple[Tuple[Cell, ...], ...]

    @classmethod
    def empty(cls, size: int = BOARD_SIZE) -> "Board":
        return cls(tuple(
            tuple(Cell(id=cell_key(row, col)) for col in range(size))
            for row in range(size)
        ))

    @classmethod
    def from_words(cls, grid: Sequence[Sequence[str]]) -> "Board":
        """Build a board of already-confirmed words (frozen in-game or preset boards)."""
        size = len(grid)
        if any(len(row) != size for row in grid):
            raise ValueError("Board grid must be square")
        return cls(tuple(
            tuple(
                Cell(id=cell_key(r, c), word=(word or "").strip(), is_valid=bool((word or "").strip()))
                for c, word in enumerate(row)
            )
            for r, row in enumerate(grid)
        ))

    @property
    def size(self) -> int:
        return len(self.cells)

    def cell(self, row: int, col: int) -> Cell:
        if not (0 <= row < self.size and 0 <= col < self.size):
            raise IndexError(f"Cell ({row}, {col}) is outside the {self.size}x{self.size} board")
        return self.cells[row][col]

    def iter_cells(self) -> Iterable[Tuple[int, int, Cell]]:
        for r, row in enumerate(self.cells):
            for c, cell in enumerate(row):
                yield r, c, cell

    def _with_cell(self, row: int, col: int, cell: Cell) -> "Board":
        rows = list(self.cells)
        new_row = list(rows[row])
        new_row[col] = cell
        rows[row] = tuple(new_row)
        return Board(tuple(rows))

    def _map_cells(self, fn) -> "Board":
        return Board(tuple(tuple(fn(cell) for cell in row) for row in self.cells))

    # --- edits -----------------------------------------------------------

    def set_word(self, row: int, col: int, text: str) -> "Board":
        """Store `text` right away and drop the stale verdict; keep the last valid word for fallback."""
        current = self.cell(row, col)
        previous_word = current.word if current.is_valid and current.word != "" else current.previous_word
        return self._with_cell(row, col, replace(
            current,
            word=text,
            is_valid=False,
            is_validating=False,
            validation_error=None,
            error_kind=None,
            definition=None,
            previous_word=previous_word,
        ))

    def set_focus(self, row: int, col: int) -> "Board":
        self.cell(row, col)
        return Board(tuple(
            tuple(
                replace(cell, is_focused=(r == row and c == col)) if cell.is_focused != (r == row and c == col) else cell
                for c, cell in enumerate(cells)
            )
            for r, cells in enumerate(self.cells)
        ))

    def clear_focus(self, row: int, col: int) -> "Board":
        current = self.cell(row, col)
        if not current.is_focused:
            return self
        return self._with_cell(row, col, replace(current, is_focused=False))

    def mark_validating(self, row: int, col: int, word: str) -> "Board":
        current = self.cell(row, col)
        if current.word != word:
            return self
        return self._with_cell(row, col, replace(current, is_validating=True, validation_error=None, error_kind=None))

    def apply_verdict(self, row: int, col: int, verdict: WordVerdict) -> "Board":
        current = self.cell(row, col)
        if current.word != verdict.word:
            logger.debug(
                f"Discarding stale verdict for cell {current.id}: "
                f"verified '{verdict.word}', cell now holds '{current.word}'"
            )
            return self
        # a confirmed word supersedes the fallback; the next set_word stashes it
        previous_word = None if verdict.is_valid else current.previous_word
        return self._with_cell(row, col, replace(
            current,
            is_valid=verdict.is_valid,
            is_validating=False,
            validation_error=verdict.error,
            error_kind=verdict.error_kind,
            definition=verdict.definition,
            previous_word=previous_word,
        ))

    def settle_validating(self) -> "Board":
        """Clear leftover validating flags once no verification can complete any more."""
        if not any(cell.is_validating for _, _, cell in self.iter_cells()):
            return self
        return self._map_cells(lambda cell: replace(cell, is_validating=False) if cell.is_validating else cell)

    # --- queries ---------------------------------------------------------

    def is_duplicate(self, word: str, excluding_row: int, excluding_col: int) -> bool:
        target = normalize_word(word)
        if not target:
            return False
        for r, c, cell in self.iter_cells():
            if r == excluding_row and c == excluding_col:
                continue
            if normalize_word(cell.word) == target:
                return True
        return False

    @property
    def filled_count(self) -> int:
        return sum(1 for _, _, cell in self.iter_cells() if cell.is_filled)

    @property
    def valid_count(self) -> int:
        return sum(1 for _, _, cell in self.iter_cells() if cell.is_filled and cell.is_valid)

    @property
    def has_duplicates(self) -> bool:
        words = [normalize_word(cell.word) for _, _, cell in self.iter_cells()]
        words = [w for w in words if w]
        return len(words) != len(set(words))

    @property
    def is_complete(self) -> bool:
        return self.valid_count == self.size * self.size and not self.has_duplicates

    @property
    def focused_cell(self) -> Optional[Cell]:
        for _, _, cell in self.iter_cells():
            if cell.is_focused:
                return cell
        return None

    @staticmethod
    def cell_style(cell: Cell) -> CellStyle:
        if cell.is_focused:
            return CellStyle.FOCUSED
        if cell.is_validating:
            return CellStyle.VALIDATING
        if cell.word and cell.is_valid:
            return CellStyle.VALID
        if cell.word and not cell.is_valid:
            return CellStyle.INVALID
        return CellStyle.DEFAULT

    def words(self) -> List[List[str]]:
        return [[cell.word for cell in row] for row in self.cells]

    def completed_lines(self, marked_words: Iterable[str]) -> List[BingoLine]:
        """
        Rows, columns and diagonals whose every word has been called.

        Matching is case-insensitive and ignores surrounding whitespace.
        """
        marked = {normalize_word(w) for w in marked_words if normalize_word(w)}
        n = self.size

        def is_marked(r, c):
            word = normalize_word(self.cells[r][c].word)
            return bool(word) and word in marked

        lines = []
        for r in range(n):
            if all(is_marked(r, c) for c in range(n)):
                lines.append(BingoLine("row", r, tuple((r, c) for c in range(n))))
        for c in range(n):
            if all(is_marked(r, c) for r in range(n)):
                lines.append(BingoLine("column", c, tuple((r, c) for r in range(n))))
        if all(is_marked(i, i) for i in range(n)):
            lines.append(BingoLine("diagonal", 0, tuple((i, i) for i in range(n))))
        if all(is_marked(i, n - 1 - i) for i in range(n)):
            lines.append(BingoLine("diagonal", 1, tuple((i, n - 1 - i) for i in range(n))))
        return lines

    def completion(self) -> Dict:
        return {
            "isComplete": self.is_complete,
            "validCount": self.valid_count,
            "filledCount": self.filled_count,
            "hasDuplicates": self.has_duplicates,
        }

    def to_dict(self):
        return {
            "cells": [[cell.to_dict() for cell in row] for row in self.cells],
            **self.completion(),
        }
