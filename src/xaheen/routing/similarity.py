"""String similarity scoring for command matching.

Scores are normalized to ``[0, 1]`` and deliberately asymmetric: the first
argument is what the user typed, the second a registered command key.
"""

from __future__ import annotations

import re

_TOKEN_SPLIT = re.compile(r"[:\-_\s]+")

PREFIX_BASE = 0.9
PREFIX_SPAN = 0.1
SUBSTRING_BASE = 0.7
SUBSTRING_SPAN = 0.2


def levenshtein(s: str, t: str) -> int:
    """Compute the Levenshtein distance between two strings."""
    if len(s) < len(t):
        return levenshtein(t, s)
    if len(t) == 0:
        return len(s)

    prev_row = list(range(len(t) + 1))
    for i, c_s in enumerate(s):
        curr_row = [i + 1]
        for j, c_t in enumerate(t):
            cost = 0 if c_s == c_t else 1
            curr_row.append(min(
                curr_row[j] + 1,       # insert
                prev_row[j + 1] + 1,   # delete
                prev_row[j] + cost,    # replace
            ))
        prev_row = curr_row

    return prev_row[-1]


def tokenize(value: str) -> list[str]:
    """Split a command string on ``:``, ``-``, ``_`` and whitespace."""
    return [tok for tok in _TOKEN_SPLIT.split(value) if tok]


def levenshtein_similarity(s: str, t: str) -> float:
    """Edit distance normalized by the longer string (two empties -> 1.0)."""
    longest = max(len(s), len(t))
    if longest == 0:
        return 1.0
    return 1.0 - levenshtein(s, t) / longest


def token_overlap(s: str, t: str) -> float:
    """Fraction of tokens shared between *s* and *t*, order-insensitive.

    A token of *s* matches a token of *t* when they are equal or one is a
    prefix of the other. Normalized by the larger token count.
    """
    s_tokens = tokenize(s)
    t_tokens = tokenize(t)
    denominator = max(len(s_tokens), len(t_tokens))
    if denominator == 0:
        return 0.0

    matches = 0
    for s_tok in s_tokens:
        if any(
            s_tok == t_tok or t_tok.startswith(s_tok) or s_tok.startswith(t_tok)
            for t_tok in t_tokens
        ):
            matches += 1
    return matches / denominator


def similarity(input_value: str, target: str) -> float:
    """Score how closely *input_value* matches *target*.

    Rules, first hit wins:
      exact          -> 1.0
      prefix         -> 0.9 + share * 0.1
      substring      -> 0.7 + share * 0.2
      otherwise      -> max(levenshtein similarity, token overlap)

    where *share* is ``len(input) / len(target)``. Comparison is
    case-insensitive and ignores surrounding whitespace. An empty input is
    never considered a prefix or substring.
    """
    s = input_value.strip().lower()
    t = target.strip().lower()

    if s == t:
        return 1.0
    if s:
        share = len(s) / len(t) if t else 0.0
        if t.startswith(s):
            return PREFIX_BASE + share * PREFIX_SPAN
        if s in t:
            return SUBSTRING_BASE + share * SUBSTRING_SPAN

    return max(levenshtein_similarity(s, t), token_overlap(s, t))
