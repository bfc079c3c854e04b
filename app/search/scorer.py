"""
Relevance scoring for search candidates.

The weights are a tuned heuristic clients depend on for ordering; keep them
as they are rather than replacing them with a corpus-statistics model.
"""
import re
from datetime import timedelta

from search.clauses import significant_tokens
from utils import ensure_utc, now_utc

TITLE_EXACT = 1000
ALT_EXACT = 800
TITLE_PREFIX = 500
ALT_PREFIX = 400
TITLE_CONTAINS = 300
ALT_CONTAINS = 200
TOKEN_TITLE_START = 150
TOKEN_TITLE_WORD = 75
TOKEN_ALT_WORD = 40
SHORT_TITLE_BONUS = 20
SHORT_TITLE_SLACK = 10
RECENT_BONUS = 10
RECENT_DAYS = 7


def contains_word(text, token) -> bool:
    """True when token occurs in text delimited by regex word boundaries"""
    return re.search(r"\b" + re.escape(token) + r"\b", text) is not None


def is_recent(last_updated, now, days=RECENT_DAYS) -> bool:
    last_updated = ensure_utc(last_updated)
    if last_updated is None:
        return False
    return now - last_updated <= timedelta(days=days)


def score(record, query, now=None, recent_days=RECENT_DAYS) -> int:
    """
    Additive relevance score of a title record for a query.

    ``record`` needs ``title``, ``alt_titles`` and ``last_updated``
    attributes. Comparisons are case-insensitive.
    """
    now = ensure_utc(now) if now is not None else now_utc()
    q = query.lower()
    title = (record.title or "").lower()
    alts = [a.lower() for a in (record.alt_titles or [])]

    points = 0

    if title == q:
        points += TITLE_EXACT
    if any(alt == q for alt in alts):
        points += ALT_EXACT
    if title.startswith(q):
        points += TITLE_PREFIX
    if any(alt.startswith(q) for alt in alts):
        points += ALT_PREFIX
    if q in title:
        points += TITLE_CONTAINS
    if any(q in alt for alt in alts):
        points += ALT_CONTAINS

    for token in significant_tokens(q):
        if title.startswith(token):
            points += TOKEN_TITLE_START
        if contains_word(title, token):
            points += TOKEN_TITLE_WORD
        if any(contains_word(alt, token) for alt in alts):
            points += TOKEN_ALT_WORD

    if len(title) <= len(q) + SHORT_TITLE_SLACK:
        points += SHORT_TITLE_BONUS

    if is_recent(record.last_updated, now, recent_days):
        points += RECENT_BONUS

    return points


def sort_key(scored):
    """Score desc, then lastUpdated desc, then id asc"""
    points, record = scored
    last_updated = ensure_utc(record.last_updated)
    timestamp = last_updated.timestamp() if last_updated else float("-inf")
    return (-points, -timestamp, record.id)
