from .clauses import Clause, Field, MatchKind, build_candidate_filter, build_fallback_filter
from .engine import SearchEngine, SearchResult
from .scorer import score

__all__ = [
    "Clause",
    "Field",
    "MatchKind",
    "build_candidate_filter",
    "build_fallback_filter",
    "SearchEngine",
    "SearchResult",
    "score",
]
