"""Wording for reports and error messages"""
from typing import Iterable


IRREGULAR_PLURALS = {
    'is': 'are',
    'was': 'were',
    'this': 'these',
}


def enumeration(items: Iterable[object], link: str = 'and') -> str:
    "['a', 'b', 'c'] -> 'a, b and c'"
    words = [str(item) for item in items]
    if not words:
        raise ValueError("enumeration of nothing")
    *head, last = words
    if head:
        return f"{', '.join(head)} {link} {last}"
    return last


def plural(word: str, n: int) -> str:
    "plural('house', 2) -> 'houses'"
    if n == 1:
        return word
    elif word in IRREGULAR_PLURALS:
        return IRREGULAR_PLURALS[word]
    elif word.endswith('y') and word[-2:-1] not in ('a', 'e', 'o', 'u'):
        return f'{word[:-1]}ies'
    return f'{word}s'


def n_of(n: int, word: str, plural_for_0: bool = False) -> str:
    "n_of(3, 'step') -> '3 steps'"
    if n:
        return f"{n} {plural(word, n)}"
    return f"no {plural(word, 2 if plural_for_0 else 1)}"
