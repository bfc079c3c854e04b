"""
Candidate filter for catalog search.

A filter is an ordered list of Clause descriptors, OR-ed together by the
store. Each clause is a (field, kind, value) triple that renders to a
case-insensitive regular expression over the escaped literal value, so
query text is never interpreted as a pattern language.
"""
import re
from dataclasses import dataclass
from enum import Enum

STOP_WORDS = frozenset(
    ["the", "and", "or", "in", "on", "at", "to", "for", "of", "with", "by", "an", "a"]
)
MIN_TOKEN_LENGTH = 3
# Share of significant tokens a multi-word query needs before token clauses are added
SIGNIFICANT_TOKEN_RATIO = 0.6


class Field(Enum):
    TITLE = "title"
    ALT_TITLE = "alternativeTitles"


class MatchKind(Enum):
    EXACT = "exact"
    PREFIX = "prefix"
    CONTAINS = "contains"
    WORD = "word"


_PATTERNS = {
    MatchKind.EXACT: "^{value}$",
    MatchKind.PREFIX: "^{value}",
    MatchKind.CONTAINS: "{value}",
    MatchKind.WORD: "{boundary}{value}{boundary}",
}

# Word boundary escape per database dialect; PostgreSQL reads \b as backspace
WORD_BOUNDARIES = {"postgresql": r"\y"}
DEFAULT_WORD_BOUNDARY = r"\b"


@dataclass(frozen=True)
class Clause:
    field: Field
    kind: MatchKind
    value: str
    priority: int = 0

    @property
    def pattern(self) -> str:
        """Regex source with an inline case-insensitive flag"""
        return self.pattern_for(None)

    def pattern_for(self, dialect_name) -> str:
        """Regex source as the given database dialect's REGEXP operator reads it"""
        boundary = WORD_BOUNDARIES.get(dialect_name, DEFAULT_WORD_BOUNDARY)
        return "(?i)" + _PATTERNS[self.kind].format(value=re.escape(self.value), boundary=boundary)

    def compile(self) -> re.Pattern:
        return re.compile(self.pattern)

    def matches(self, text) -> bool:
        if text is None:
            return False
        return self.compile().search(text) is not None


def tokenize(query):
    return query.split()


def is_significant(token) -> bool:
    return len(token) >= MIN_TOKEN_LENGTH and token.lower() not in STOP_WORDS


def significant_tokens(query):
    return [t for t in tokenize(query) if is_significant(t)]


def token_clauses_enabled(query) -> bool:
    """Multi-word queries made mostly of significant tokens get per-token clauses"""
    tokens = tokenize(query)
    if len(tokens) < 2:
        return False
    return len(significant_tokens(query)) / len(tokens) >= SIGNIFICANT_TOKEN_RATIO


def build_candidate_filter(query):
    """
    Clauses for the prioritized candidate filter, in priority order:
    exact, prefix and substring on the title then on alternative titles,
    followed by word-bounded token clauses when the query qualifies.
    """
    clauses = [
        Clause(Field.TITLE, MatchKind.EXACT, query, 0),
        Clause(Field.ALT_TITLE, MatchKind.EXACT, query, 1),
        Clause(Field.TITLE, MatchKind.PREFIX, query, 2),
        Clause(Field.ALT_TITLE, MatchKind.PREFIX, query, 3),
        Clause(Field.TITLE, MatchKind.CONTAINS, query, 4),
        Clause(Field.ALT_TITLE, MatchKind.CONTAINS, query, 5),
    ]

    if token_clauses_enabled(query):
        for token in significant_tokens(query):
            clauses.append(Clause(Field.TITLE, MatchKind.WORD, token, 6))
            clauses.append(Clause(Field.ALT_TITLE, MatchKind.WORD, token, 6))

    return clauses


def normalize_whitespace(query):
    return " ".join(query.split())


def build_fallback_filter(query):
    """Minimal un-anchored filter used when the prioritized one finds nothing"""
    normalized = normalize_whitespace(query)
    return [
        Clause(Field.TITLE, MatchKind.CONTAINS, normalized, 0),
        Clause(Field.ALT_TITLE, MatchKind.CONTAINS, normalized, 1),
    ]
