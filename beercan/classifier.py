"""
Message classifier - question detection and reply phrase generation.

Both helpers are pure: no state, no I/O. The phrase builder takes an
optional random generator so tests can seed it.

Phrase shape:
    [address] [name,] <start> <action> <vaccination> [covid][terminator]?

    e.g. "Дружище Парвиз, ты ещё не сделал прививку от ковида, наконец?"
"""

import random
from typing import Optional, Sequence

PHRASE_ADDRESSES = (
    "Уважаемый",
    "Многоуважаемый",
    "Эй,",
    "Слушай,",
    "Послушай,",
    "Извини,",
    "Прошу прощения за беспокойство,",
    "Дружище",
    "Коллега",
)

PHRASE_NAMES = (
    "Ахмед",
    "Али Баба",
    "Парвиз",
)

PHRASE_STARTS = (
    "а ты уже",
    "ты ещё не",
    "скажи, ты",
    "подскажи, ты",
    "неужели ты",
)

PHRASE_ACTIONS = (
    "сделал",
    "выполнил",
    "совершил",
    "произвёл",
)

PHRASE_VACCINATIONS = (
    "прививку",
    "вакцинацию",
    "укол",
)

PHRASE_COVID = (
    "от коронавируса",
    "от ковида",
    "от covid-19",
    "от понятно какой болезни",
)

PHRASE_TERMINATORS = (
    ", наконец",
    ", в конце концов",
    ", наконец-то",
    ", в конечном итоге",
    ", и, если нет, то по какой причине",
    ", и, если нет, то когда планируешь",
)


def is_question(text: str) -> bool:
    """
    Check whether a message reads as a question.

    Walks the text backwards skipping punctuation, emoji and whitespace.
    A '?' found before the first letter or digit makes it a question.

    Args:
        text: Message text.

    Returns:
        True if the text ends with a question mark (modulo trailing noise).

    Example:
        >>> is_question("Сделал прививку?!)")
        True
        >>> is_question("Сделал прививку")
        False
    """
    for char in reversed(text):
        if char == "?":
            return True
        if char.isalnum():
            break
    return False


def build_phrase(rng: Optional[random.Random] = None) -> str:
    """
    Build a randomized "did you get vaccinated" question.

    Args:
        rng: Random generator. Defaults to a fresh unseeded generator.

    Returns:
        Phrase ending with '?'.
    """
    rng = rng or random.Random()
    parts = []

    address = _random_variant_opt(rng, PHRASE_ADDRESSES)
    if address:
        parts.append(f"{address} ")
    name = _random_variant_opt(rng, PHRASE_NAMES)
    if name:
        parts.append(f"{name}, ")

    parts.append(_random_variant(rng, PHRASE_STARTS))
    parts.append(" ")
    parts.append(_random_variant(rng, PHRASE_ACTIONS))
    parts.append(" ")
    parts.append(_random_variant(rng, PHRASE_VACCINATIONS))

    covid = _random_variant_opt(rng, PHRASE_COVID)
    if covid:
        parts.append(f" {covid}")
    terminator = _random_variant_opt(rng, PHRASE_TERMINATORS)
    if terminator:
        parts.append(terminator)

    parts.append("?")
    return "".join(parts)


def _random_variant_opt(rng: random.Random, variants: Sequence[str]) -> Optional[str]:
    """Pick a variant or nothing; "nothing" is as likely as any single variant."""
    index = rng.randint(0, len(variants))
    if index == 0:
        return None
    return variants[index - 1]


def _random_variant(rng: random.Random, variants: Sequence[str]) -> str:
    return variants[rng.randrange(len(variants))]
