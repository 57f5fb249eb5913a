"""
Routine pattern module

Loads the desired-routine list and resolves raw MKL symbol names against it.

A pattern holds exactly one wildcard standing in for the precision marker:

    cblas_*gemm     -> cblas_sgemm (32-bit), cblas_dgemm (64-bit)
    LAPACKE_#potrf  -> LAPACKE_Spotrf (32-bit), LAPACKE_Dpotrf (64-bit)

Matching is exact reconstruction: the wildcard is replaced by each legal
marker and the result compared to the raw name.
"""

import sys
from dataclasses import dataclass
from typing import Iterable, Optional

from .errors import PatternError

# wildcard -> (32-bit marker, 64-bit marker)
WILDCARDS = {
    '*': ('s', 'd'),
    '#': ('S', 'D'),
}

COMMENT_PREFIXES = ('//', ';')


@dataclass(frozen=True)
class RoutinePattern:
    """A routine name template with a single precision wildcard"""
    text: str
    position: int
    single_marker: str
    double_marker: str

    @classmethod
    def parse(cls, text: str) -> 'RoutinePattern':
        """Validate a pattern string and locate its wildcard"""
        positions = [i for i, ch in enumerate(text) if ch in WILDCARDS]
        if not positions:
            raise PatternError(f'pattern {text!r} has no wildcard (use * for s/d, # for S/D)')
        if len(positions) > 1:
            raise PatternError(f'pattern {text!r} has more than one wildcard')
        pos = positions[0]
        single, double = WILDCARDS[text[pos]]
        return cls(text=text, position=pos, single_marker=single, double_marker=double)

    @property
    def prefix(self) -> str:
        return self.text[:self.position]

    @property
    def suffix(self) -> str:
        return self.text[self.position + 1:]

    def expand(self, marker: str) -> str:
        """Substitute the wildcard with a concrete marker"""
        return self.prefix + marker + self.suffix

    @property
    def dispatch_name(self) -> str:
        """Name with the wildcard removed"""
        return self.prefix + self.suffix

    def match(self, raw_name: str) -> Optional['PatternMatch']:
        if raw_name == self.expand(self.single_marker):
            return PatternMatch(self, True, self.dispatch_name)
        if raw_name == self.expand(self.double_marker):
            return PatternMatch(self, False, self.dispatch_name)
        return None

    def __str__(self):
        return self.text


@dataclass(frozen=True)
class PatternMatch:
    """Result of resolving a raw name against a pattern"""
    pattern: RoutinePattern
    is_single: bool
    dispatch_name: str

    @property
    def is32(self) -> bool:
        return self.is_single

    @property
    def is64(self) -> bool:
        return not self.is_single


class PatternList:
    """Ordered, immutable list of routine patterns

    Order matters: when a raw name fits more than one pattern the earliest
    pattern wins. Repeated patterns are kept once, at their first position.
    """

    def __init__(self, patterns: Iterable[RoutinePattern]):
        unique = {}
        for p in patterns:
            unique.setdefault(p.text, p)
        self._patterns = tuple(unique.values())

    @classmethod
    def from_strings(cls, texts: Iterable[str]) -> 'PatternList':
        return cls(RoutinePattern.parse(t) for t in texts)

    def match(self, raw_name: str) -> Optional[PatternMatch]:
        """Return the first pattern match for raw_name, or None"""
        for pattern in self._patterns:
            m = pattern.match(raw_name)
            if m is not None:
                return m
        return None

    @property
    def texts(self) -> list[str]:
        """Pattern strings in input order (for generated header comments)"""
        return [p.text for p in self._patterns]

    def __iter__(self):
        return iter(self._patterns)

    def __len__(self):
        return len(self._patterns)


def parse_pattern_lines(lines: Iterable[str]) -> PatternList:
    """Build a PatternList from the lines of a pattern file

    Blank lines and // or ; comments are ignored.
    """
    patterns = []
    for lineno, line in enumerate(lines, start=1):
        text = line.strip()
        if not text or text.startswith(COMMENT_PREFIXES):
            continue
        try:
            patterns.append(RoutinePattern.parse(text))
        except PatternError as e:
            raise PatternError(f'line {lineno}: {e}') from None
    return PatternList(patterns)


def load_patterns(path: str) -> PatternList:
    """Load the desired-routine list from a file, or stdin when path is '-'"""
    if path == '-':
        return parse_pattern_lines(sys.stdin.read().splitlines())
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return parse_pattern_lines(f.read().splitlines())
    except OSError as e:
        raise PatternError(f'cannot read pattern list {path}: {e.strerror}') from e
