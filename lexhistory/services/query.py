"""Search query parsing.

A query is free text with optional language operators mixed in anywhere:

    "source:en hello"          -> [source=en], "hello"
    "target:VI"                -> [target=vi], ""
    "source:en target:zh tea"  -> [source=en, target=zh], "tea"

Keywords are case-insensitive, codes are lowercased. Operators repeat
freely and are never deduplicated; two different ``source:`` values simply
can't both hold, which is the caller's problem. Nothing here can fail:
text that only looks like an operator (``source:`` with no code) stays in
the free text.
"""

import re

from lexhistory.core import ParsedQuery, SearchOperator, SearchOperatorType

SEARCH_OPERATOR_PATTERN = re.compile(r"\b(source|target):([\w-]+)", re.IGNORECASE)

_EXTRA_WHITESPACE = re.compile(r"\s{2,}")


def parse_query(query: str) -> ParsedQuery:
    """Split a query into operators and residual text."""
    operators = [
        SearchOperator(
            type=SearchOperatorType(match.group(1).lower()),
            value=match.group(2).lower(),
        )
        for match in SEARCH_OPERATOR_PATTERN.finditer(query)
    ]

    remaining = SEARCH_OPERATOR_PATTERN.sub(" ", query)
    remaining = _EXTRA_WHITESPACE.sub(" ", remaining).strip()

    return ParsedQuery(operators=operators, text=remaining)
