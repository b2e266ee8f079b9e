"""Lexicon-based sentiment scoring for headlines and snippets."""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from afinn import Afinn

from cryptonews.models import Sentiment

BULLISH_THRESHOLD = 2
BEARISH_THRESHOLD = -2

_TOKEN_RE = re.compile(r"[a-z0-9']+(?:-[a-z0-9']+)*")

# Market vocabulary laid over AFINN-165; these weights take precedence.
MARKET_TERMS: Mapping[str, int] = MappingProxyType({
    "ath": 2,
    "breakout": 2,
    "bullish": 2,
    "inflows": 2,
    "moon": 2,
    "rallies": 2,
    "rally": 2,
    "rebound": 2,
    "surge": 2,
    "surges": 2,
    "uptrend": 2,
    "bearish": -2,
    "capitulation": -3,
    "crash": -3,
    "crashes": -3,
    "dump": -2,
    "dumps": -2,
    "exploit": -2,
    "exploited": -3,
    "hack": -3,
    "hacked": -3,
    "liquidated": -2,
    "liquidation": -2,
    "liquidations": -2,
    "outflows": -2,
    "plunge": -3,
    "plunges": -3,
    "rug": -3,
    "selloff": -2,
    "sell-off": -2,
    "slump": -2,
    "slumps": -2,
})


@dataclass(frozen=True)
class SentimentResult:
    score: int
    comparative: float
    positive: tuple[str, ...]
    negative: tuple[str, ...]


class SentimentScorer:
    """Sums AFINN-165 weights, overlaid with extra words, over a text.

    Instances never change after construction, so a single scorer can be
    shared by every concurrent aggregation.
    """

    def __init__(self, extras: Mapping[str, int] | None = None):
        overlay = dict(MARKET_TERMS)
        if extras:
            overlay.update({word.lower(): int(weight) for word, weight in extras.items()})
        self._extras: Mapping[str, int] = MappingProxyType(overlay)
        self._afinn = Afinn(language="en")

    def score(self, text: str) -> SentimentResult:
        if not text:
            return SentimentResult(score=0, comparative=0.0, positive=(), negative=())

        tokens = tokenize(text)
        hits: list[tuple[str, int]] = [
            (word, int(self._afinn.score(word)))
            for word in self._afinn.find_all(text)
            if word not in self._extras
        ]
        hits.extend(
            (token, self._extras[token]) for token in tokens if token in self._extras
        )

        total = sum(weight for _, weight in hits)
        return SentimentResult(
            score=total,
            comparative=total / len(tokens) if tokens else 0.0,
            positive=tuple(word for word, weight in hits if weight > 0),
            negative=tuple(word for word, weight in hits if weight < 0),
        )


def tokenize(text: str) -> list[str]:
    """Lowercase word tokens; punctuation and whitespace separate tokens."""
    return _TOKEN_RE.findall(text.lower()) if text else []


def classify(score: int) -> Sentiment:
    """Map a raw score to a label using fixed cutoffs."""
    label: Sentiment = "neutral"
    if score >= BULLISH_THRESHOLD:
        label = "bullish"
    if score <= BEARISH_THRESHOLD:
        label = "bearish"
    return label


default_scorer = SentimentScorer()
