"""Generation-keyed memoization of rendered views."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging

from quiz_runner.core.views import QuestionView, QuizView, SectionView

logger = logging.getLogger(__name__)

View = QuizView | SectionView | QuestionView


class ViewKind(str, Enum):
    QUIZ = "quiz"
    SECTION = "section"
    QUESTION = "question"


@dataclass(frozen=True, slots=True)
class CachedView:
    generation: int
    view: View


class ViewCache:
    """Holds at most one rendered view per entity.

    An entry is only returned while its generation equals the generation the
    caller asks for. Entries are never evicted; a later ``put`` replaces them.
    """

    def __init__(self) -> None:
        self._entries: dict[tuple[ViewKind, int | None], CachedView] = {}
        self._hits = 0
        self._misses = 0

    def get(self, kind: ViewKind, entity_id: int | None, generation: int) -> View | None:
        cached = self._entries.get((kind, entity_id))
        if cached is None or cached.generation != generation:
            self._misses += 1
            logger.debug("View cache miss for %s %s at generation %d", kind.value, entity_id, generation)
            return None
        self._hits += 1
        return cached.view

    def put(self, kind: ViewKind, entity_id: int | None, generation: int, view: View) -> View:
        self._entries[(kind, entity_id)] = CachedView(generation=generation, view=view)
        return view

    def get_hit_count(self) -> int:
        return self._hits

    def get_miss_count(self) -> int:
        return self._misses
