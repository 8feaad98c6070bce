"""Case-insensitive phrase matching shared by answer rules and page heuristics.

A phrase table maps a canonical fragment to an effect (an answer string, a
flag, anything). Matching is plain substring containment of the fragment in
the lower-cased text, first entry in table order wins.
"""
from __future__ import annotations

from typing import Iterable, Mapping, TypeVar

T = TypeVar("T")

# Page phrases; answer phrases live with the resolver in applier.answers
CONTINUE_PHRASES: tuple[str, ...] = ("continue", "next", "proceed")
SUBMIT_PHRASES: tuple[str, ...] = ("submit application", "submit")
COVER_LETTER_SKIP_PHRASES: tuple[str, ...] = (
    "don't include a cover letter",
    "don't attach",
    "no cover letter",
    "without cover",
)
COMPLETION_PHRASES: tuple[str, ...] = (
    "application submitted",
    "you've applied",
    "successfully applied",
    "thank you for applying",
)
# Looser set accepted while waiting after a submit click
POST_SUBMIT_PHRASES: tuple[str, ...] = COMPLETION_PHRASES + (
    "application has been sent",
    "keep it up",
    "you might also like",
)


def normalize(text: str | None) -> str:
    return (text or "").strip().lower()


def match_phrase(text: str | None, table: Mapping[str, T]) -> tuple[str, T] | None:
    """First (phrase, effect) whose phrase occurs in ``text``."""
    low = normalize(text)
    if not low:
        return None
    for phrase, effect in table.items():
        if phrase.lower() in low:
            return phrase, effect
    return None


def contains_any(text: str | None, phrases: Iterable[str]) -> bool:
    low = normalize(text)
    return bool(low) and any(p.lower() in low for p in phrases)


def reconcile_option(value: str, options: list[str]) -> str | None:
    """Pick the option that contains ``value`` or is contained by it.

    Falls back to the first option when nothing overlaps; None only when
    there are no options at all.
    """
    if not options:
        return None
    v = value.lower()
    for opt in options:
        o = opt.lower()
        if o and (v in o or o in v):
            return opt
    return options[0]


def is_yes_no(options: list[str]) -> bool:
    return len(options) == 2 and set(options) == {"Yes", "No"}
