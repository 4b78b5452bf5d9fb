"""SentenceStore — read-only, in-memory collection of rulings.

Queries are linear scans; the collection is small and never mutated
after construction.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from cendoj_mcp.errors import RecordLoadError
from cendoj_mcp.store.models import Sentence

DEFAULT_SENTENCES: tuple[Sentence, ...] = (
    Sentence(
        id=1,
        sala="Sala de lo Social",
        juez="Juan García",
        cendoj_id="28079150012015000001",
        resolucion="Sentencia 1/2015",
    ),
    Sentence(
        id=2,
        sala="Sala de lo Contencioso",
        juez="María López",
        cendoj_id="28079150022015000002",
        resolucion="Sentencia 2/2015",
    ),
    Sentence(
        id=3,
        sala="Sala de lo Penal",
        juez="Carlos Martín",
        cendoj_id="28079150032015000003",
        resolucion="Sentencia 3/2015",
    ),
)

UNKNOWN_VALUE = "unknown"


class SentenceStore:
    """Query operations over a fixed list of :class:`Sentence` records."""

    def __init__(self, sentences: Iterable[Sentence] = DEFAULT_SENTENCES) -> None:
        self._sentences = tuple(sentences)
        self._by_id = {s.id: s for s in self._sentences}

    @classmethod
    def from_file(cls, path: Path) -> SentenceStore:
        """Load records from a YAML or JSON file.

        The file holds either a list of records or a mapping with a
        ``sentences`` list.

        Raises:
            RecordLoadError: On read, parse, or validation failures.
        """
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise RecordLoadError(f"Cannot read {path}: {exc}") from exc

        try:
            data: Any = yaml.safe_load(raw)
        except yaml.YAMLError as exc:
            raise RecordLoadError(f"Parse error in {path}: {exc}") from exc

        if isinstance(data, dict):
            data = data.get("sentences")
        if not isinstance(data, list):
            raise RecordLoadError(f"{path} must contain a list of sentences")

        try:
            sentences = [Sentence.model_validate(item) for item in data]
        except ValidationError as exc:
            raise RecordLoadError(str(exc)) from exc
        return cls(sentences)

    @staticmethod
    def fields() -> tuple[str, ...]:
        return tuple(Sentence.model_fields)

    def __len__(self) -> int:
        return len(self._sentences)

    def all(self) -> list[Sentence]:
        return list(self._sentences)

    def get(self, sentence_id: int) -> Sentence | None:
        return self._by_id.get(sentence_id)

    def filter_by(self, field: str, value: Any) -> list[Sentence]:
        """Records whose *field* equals *value*, compared as text."""
        self._check_field(field)
        wanted = str(value)
        return [s for s in self._sentences if str(getattr(s, field)) == wanted]

    def search(self, field: str, text: str) -> list[Sentence]:
        """Records whose *field* contains *text*, case-insensitively."""
        self._check_field(field)
        needle = text.casefold()
        return [s for s in self._sentences if needle in str(getattr(s, field)).casefold()]

    def count_by(self, field: str) -> dict[str, int]:
        """Histogram of *field* values; empty or missing values count as ``unknown``."""
        counts: dict[str, int] = {}
        for sentence in self._sentences:
            value = getattr(sentence, field, None)
            key = str(value) if value not in (None, "") else UNKNOWN_VALUE
            counts[key] = counts.get(key, 0) + 1
        return counts

    def _check_field(self, field: str) -> None:
        if field not in Sentence.model_fields:
            msg = f"Unknown field: {field}"
            raise ValueError(msg)
