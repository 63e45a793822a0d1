"""
Filter predicates and their composition.

Every filter is a plain callable taking an Entry and returning a bool.
A FilterChain ANDs its filters together and can negate the combined
result as a whole.
"""

import re
from typing import Callable, Iterable, List, Sequence, Union

from .entry import Entry
from .expressions import date_matcher, size_matcher


Predicate = Callable[[Entry], bool]


def negate(predicate: Predicate) -> Predicate:
    """Wrap a predicate so that it returns the opposite result."""
    def negated(entry: Entry) -> bool:
        return not predicate(entry)
    return negated


def compose(predicates: Iterable[Predicate]) -> Predicate:
    """
    AND a sequence of predicates into one.

    The predicates are snapshotted, so later changes to the source
    sequence do not affect the composed predicate. An empty sequence
    composes to a predicate that accepts everything.
    """
    snapshot = tuple(predicates)

    def is_match(entry: Entry) -> bool:
        return all(predicate(entry) for predicate in snapshot)
    return is_match


class FilterChain:
    """
    Ordered collection of filters with a single chain-level negation flag.

    Negation applies to the composed result only, never to individual
    filters: a negated chain of [a, b] matches when not (a and b).
    """

    def __init__(self, filters: Iterable[Predicate] = (), negated: bool = False):
        self._filters: List[Predicate] = list(filters)
        self.negated = negated

    def __len__(self) -> int:
        return len(self._filters)

    @property
    def filters(self) -> tuple:
        return tuple(self._filters)

    def add_filter(self, predicate: Predicate) -> 'FilterChain':
        if not callable(predicate):
            raise TypeError(f"Filter must be callable, got {type(predicate).__name__}")
        self._filters.append(predicate)
        return self

    def negate(self) -> 'FilterChain':
        self.negated = True
        return self

    def compose(self) -> Predicate:
        """Build the effective predicate for one search run."""
        is_match = compose(self._filters)
        if self.negated:
            return negate(is_match)
        return is_match


def clean_extension(extension: str) -> str:
    if extension.startswith('.'):
        return extension[1:]
    return extension


def extension_filter(extensions: Sequence[str]) -> Predicate:
    """Match entries whose extension is one of the given extensions (leading dot optional)."""
    wanted = frozenset(clean_extension(ext) for ext in extensions)

    def has_extension(entry: Entry) -> bool:
        return entry.extension() in wanted
    return has_extension


def glob_filter(patterns: Union[str, Sequence[str]]) -> Predicate:
    """Match entries whose name matches the glob, or any of several globs."""
    if isinstance(patterns, str):
        pattern = patterns

        def matches_glob(entry: Entry) -> bool:
            return entry.matches_glob(pattern)
        return matches_glob

    globs = tuple(patterns)

    def matches_any_glob(entry: Entry) -> bool:
        return any(entry.matches_glob(glob) for glob in globs)
    return matches_any_glob


def pattern_filter(pattern: str) -> Predicate:
    """Match entries whose full path contains a match for the regular expression."""
    regex = re.compile(pattern)

    def matches_pattern(entry: Entry) -> bool:
        return regex.search(entry.path) is not None
    return matches_pattern


def discard_filter(pattern: str) -> Predicate:
    """Reject entries whose full path matches the regular expression."""
    return negate(pattern_filter(pattern))


def size_filter(expression: Union[str, int]) -> Predicate:
    matches_size = size_matcher(expression)

    def has_size(entry: Entry) -> bool:
        return matches_size(entry.size())
    return has_size


def empty_filter() -> Predicate:
    return size_filter(0)


def socket_filter() -> Predicate:
    def is_socket(entry: Entry) -> bool:
        return entry.is_socket()
    return is_socket


def visible_filter() -> Predicate:
    """Reject hidden entries."""
    def is_visible(entry: Entry) -> bool:
        return not entry.is_hidden()
    return is_visible


def modified_filter(expression: str) -> Predicate:
    matches_date = date_matcher(expression)

    def was_modified(entry: Entry) -> bool:
        return matches_date(entry.last_modified())
    return was_modified


def accessed_filter(expression: str) -> Predicate:
    matches_date = date_matcher(expression)

    def was_accessed(entry: Entry) -> bool:
        return matches_date(entry.last_accessed())
    return was_accessed


def changed_filter(expression: str) -> Predicate:
    matches_date = date_matcher(expression)

    def was_changed(entry: Entry) -> bool:
        return matches_date(entry.last_changed())
    return was_changed
