"""Keyword relevance ranking over a plain-text corpus.

Two selection modes share one scoring rule: a unit's score is the number of
distinct question keywords it contains as a case-insensitive substring.

- ``line`` mode keeps matching lines in corpus order and truncates the
  joined result with ``...`` when it runs past the budget.
- ``sentence`` mode orders matching sentences by score (ties keep corpus
  order) and stops before the first sentence that would overflow the budget.

When nothing matches, each mode falls back to a prefix of the raw corpus. The
two fallbacks are reported separately on ``RankResult.fallback``.
"""

import re
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ..config import RankingConfig

logger = logging.getLogger(__name__)

SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")
TRUNCATION_MARKER = "..."


class RankMode(str, Enum):
    LINE = "line"
    SENTENCE = "sentence"


class Fallback(str, Enum):
    """Which documented fallback produced a result."""
    CORPUS_PREFIX = "corpus_prefix"          # line mode, nothing scored
    EMPTY_SELECTION = "empty_selection"      # sentence mode, promoted to corpus prefix


@dataclass(frozen=True)
class Fragment:
    """A scored line or sentence."""
    text: str
    score: int
    position: int


@dataclass
class RankResult:
    text: str
    mode: RankMode
    fragments: List[Fragment] = field(default_factory=list)
    fallback: Optional[Fallback] = None

    @property
    def used_fallback(self) -> bool:
        return self.fallback is not None


def extract_keywords(question: str, threshold: int = 2) -> List[str]:
    """Lower-case, whitespace-split tokens longer than ``threshold``.

    Duplicates are dropped; first-seen order is kept.
    """
    keywords = []
    for token in question.lower().split():
        if len(token) > threshold and token not in keywords:
            keywords.append(token)
    return keywords


def score_unit(unit: str, keywords: List[str]) -> int:
    lowered = unit.lower()
    return sum(1 for keyword in keywords if keyword in lowered)


def join_sentences(fragments: List[Fragment]) -> str:
    return "".join(f.text + ". " for f in fragments)


def split_units(corpus: str, mode: RankMode, min_length: int) -> List[str]:
    """Split into stripped lines or sentences longer than ``min_length``."""
    if mode == RankMode.LINE:
        pieces = corpus.split("\n")
    else:
        pieces = SENTENCE_SPLIT_RE.split(corpus)

    units = []
    for piece in pieces:
        piece = piece.strip()
        if len(piece) > min_length:
            units.append(piece)
    return units


class RelevanceRanker:
    """Select the corpus passages most relevant to a question."""

    def __init__(self, config: Optional[RankingConfig] = None):
        self.config = config or RankingConfig()

    def score(self, question: str, corpus: str, mode: RankMode) -> List[Fragment]:
        """Score every candidate unit and keep those with a positive score.

        Returned fragments are in corpus order.
        """
        keywords = extract_keywords(question, self.config.keyword_length_threshold)
        if not keywords:
            return []

        min_length = (
            self.config.line_min_length if mode == RankMode.LINE
            else self.config.sentence_min_length
        )

        fragments = []
        for position, unit in enumerate(split_units(corpus, mode, min_length)):
            unit_score = score_unit(unit, keywords)
            if unit_score > 0:
                fragments.append(Fragment(text=unit, score=unit_score, position=position))
        return fragments

    def select_lines(self, fragments: List[Fragment], max_length: int) -> str:
        text = "\n".join(f.text for f in fragments)
        if len(text) > max_length:
            text = text[:max_length] + TRUNCATION_MARKER
        return text

    def fit_sentences(self, fragments: List[Fragment], max_length: int) -> List[Fragment]:
        """Highest-scoring sentences first, whole sentences only.

        Stops at the first sentence whose ``". "``-terminated text would push
        the total past ``max_length``.
        """
        ordered = sorted(fragments, key=lambda f: f.score, reverse=True)

        chosen = []
        total = 0
        for fragment in ordered:
            size = len(fragment.text) + 2
            if total + size > max_length:
                break
            chosen.append(fragment)
            total += size
        return chosen

    def rank(
        self,
        question: str,
        corpus: str,
        max_length: Optional[int] = None,
        mode: RankMode = RankMode.LINE
    ) -> RankResult:
        """Rank corpus passages against a question.

        Args:
            question: User question
            corpus: Full corpus text
            max_length: Output budget in characters (defaults to config)
            mode: Line or sentence selection

        Returns:
            RankResult with the selected text and the fragments it drew on
        """
        if max_length is None:
            max_length = self.config.max_context_chars

        if not corpus:
            return RankResult(text="", mode=mode)

        fragments = self.score(question, corpus, mode)
        logger.info(f"Ranked {len(fragments)} matching {mode.value}s for question: {question[:100]}")

        if mode == RankMode.LINE:
            if not fragments:
                return RankResult(
                    text=corpus[:max_length],
                    mode=mode,
                    fallback=Fallback.CORPUS_PREFIX
                )
            return RankResult(text=self.select_lines(fragments, max_length), mode=mode, fragments=fragments)

        chosen = self.fit_sentences(fragments, max_length)
        selected = join_sentences(chosen)
        if not selected:
            return RankResult(
                text=corpus[:max_length],
                mode=mode,
                fallback=Fallback.EMPTY_SELECTION
            )

        return RankResult(text=selected, mode=mode, fragments=chosen)


def rank(
    question: str,
    corpus: str,
    max_length: int,
    mode: RankMode = RankMode.LINE,
    config: Optional[RankingConfig] = None
) -> str:
    """Convenience wrapper returning only the selected text."""
    return RelevanceRanker(config).rank(question, corpus, max_length, mode).text
