"""
Full-text search over todo text.

On PostgreSQL the database first narrows candidates with case-insensitive
substring matches (SQLite LIKE only folds ASCII case, so there every
scoped todo is ranked). Matching and relevance are computed on whole tokens:

- every query term matches a token exactly
- the last term also matches as a prefix (type-ahead: "mil" finds "milk")
- rank by distinct terms matched, then total token hits
- ties keep the incoming newest-first order
"""
import re
from typing import Iterable, List, Tuple

from django.db import connections
from django.db.models import Q, QuerySet

from .models import Todo

TOKEN_PATTERN = re.compile(r"\w+")


def tokenize(text: str) -> List[str]:
    return [token.lower() for token in TOKEN_PATTERN.findall(text or "")]


def query_terms(query: str) -> List[str]:
    """Distinct lowercase terms of a query, in the order typed."""
    return list(dict.fromkeys(tokenize(query)))


def score_text(text: str, terms: List[str]) -> Tuple[int, int]:
    """(distinct terms matched, total token hits) of `text` for `terms`."""
    tokens = tokenize(text)
    last = len(terms) - 1
    matched = 0
    hits = 0

    for index, term in enumerate(terms):
        count = sum(
            1 for token in tokens
            if token == term or (index == last and token.startswith(term))
        )
        if count:
            matched += 1
            hits += count

    return matched, hits


def rank(todos: Iterable[Todo], terms: List[str]) -> List[Todo]:
    """Drop non-matching todos and order the rest by relevance."""
    scored = []
    for todo in todos:
        score = score_text(todo.text, terms)
        if score[0]:
            scored.append((score, todo))

    # sort() is stable, so equal scores keep the incoming order
    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [todo for _, todo in scored]


def search_todos(queryset: QuerySet, query: str) -> List[Todo]:
    """
    Search `queryset` (already scoped and narrowed by the caller) for `query`.

    Returns todos in relevance order; a query with no word characters
    matches nothing.
    """
    terms = query_terms(query)
    if not terms:
        return []

    candidates = queryset.order_by('-created_at')
    if connections[queryset.db].vendor == 'postgresql':
        condition = Q()
        for term in terms:
            condition |= Q(text__icontains=term)
        candidates = candidates.filter(condition)

    return rank(candidates, terms)
