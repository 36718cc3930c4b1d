"""Similarity between a search term and a game title."""

import math

from rapidfuzz.distance import Levenshtein


def calc_similarity(candidate: str, query: str) -> float:
    """Calculate how similar a game name is to the search term.

    The score is the Levenshtein distance in relation to the length of the
    longer string, so it only says something useful when the search term
    is close to the full game name. It ignores token order, substrings and
    meaning; it is not a ranking.

    Args:
        candidate: The text to compare, usually the game name
        query: The search term

    Returns:
        Similarity between 0 and 1, rounded to 2 decimals
    """
    longer = candidate.lower()
    shorter = query.lower()
    if len(longer) < len(shorter):
        longer, shorter = shorter, longer

    longer_length = len(longer)
    if longer_length == 0:
        return 1.0

    distance = Levenshtein.distance(longer, shorter)
    percentage = (longer_length - distance) / longer_length * 100
    # Round half up, round() would round half to even
    return math.floor(percentage + 0.5) / 100
