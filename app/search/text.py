"""
Text search strategy: indexed full-text when the store has a text index, substring match otherwise.
"""

import logging
from dataclasses import dataclass

from app.search.filters import FullTextClause, SubstringTextClause, TextClause
from app.search.metrics import SEARCH_DEGRADED

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextPlan:
    """Chosen text clause (None when no query) and whether relevance ordering is possible."""

    clause: TextClause | None = None

    @property
    def supports_relevance(self) -> bool:
        return isinstance(self.clause, FullTextClause)

    @property
    def strategy(self) -> str:
        if isinstance(self.clause, FullTextClause):
            return "fulltext"
        if isinstance(self.clause, SubstringTextClause):
            return "substring"
        return "none"


def choose_text_clause(query: str | None, text_index_available: bool) -> TextPlan:
    query = (query or "").strip()
    if not query:
        return TextPlan()
    if text_index_available:
        return TextPlan(FullTextClause(query))
    logger.info("Text index unavailable, falling back to substring match for q=%r", query)
    SEARCH_DEGRADED.labels(reason="text_index_unavailable").inc()
    return TextPlan(SubstringTextClause(query))
