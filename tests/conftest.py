import sys
from pathlib import Path
from typing import Callable, Iterable

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


class KeepOrder:
    """Shuffle stand-in that leaves candidate order untouched."""

    def __init__(self) -> None:
        self.calls = 0

    def shuffle(self, items) -> None:
        self.calls += 1


@pytest.fixture
def keep_order() -> KeepOrder:
    return KeepOrder()


@pytest.fixture
def write_words(tmp_path: Path) -> Callable[..., Path]:
    """Write a word list into ``tmp_path`` and return its path."""

    def _write(words: Iterable[str], name: str = "words.txt") -> Path:
        path = tmp_path / name
        path.write_text("\n".join(words) + "\n", encoding="utf-8")
        return path

    return _write
