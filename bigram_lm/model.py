"""
Bigram Language Model Implementation

This module contains the BigramModel class. A model walks each sentence in
one direction: a forward model predicts every token from its left neighbour,
a backward model predicts every token from its right neighbour.
"""

import math
import pickle
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from .smoothing import SmoothingMethod, get_smoother, Smoother
from .corpus import (
    START_TOKEN, END_TOKEN, UNK_TOKEN,
    bigram, build_vocabulary
)


class Direction(Enum):
    """Order in which a model traverses a sentence."""
    FORWARD = "forward"    # left to right, from <S> to </S>
    BACKWARD = "backward"  # right to left, from </S> to <S>


@dataclass(frozen=True)
class TokenProbabilities:
    """
    Per-token probabilities of one sentence, in the order they were computed.

    For a BACKWARD sequence index j holds the probability of sentence
    position ``len - 1 - j``. Use ``aligned()`` or ``at_position()`` to read
    values in sentence order.
    """
    direction: Direction
    values: Tuple[float, ...]

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[float]:
        return iter(self.values)

    def __getitem__(self, index: int) -> float:
        return self.values[index]

    def at_position(self, position: int) -> float:
        """Probability of the token at left-to-right sentence position."""
        if self.direction == Direction.BACKWARD:
            return self.values[len(self.values) - 1 - position]
        return self.values[position]

    def aligned(self) -> List[float]:
        """All values in left-to-right sentence order."""
        if self.direction == Direction.BACKWARD:
            return list(reversed(self.values))
        return list(self.values)


def _log(prob: float) -> float:
    return math.log(prob) if prob > 0 else float('-inf')


def _unknown_first_occurrences(sentences: List[List[str]]) -> List[List[str]]:
    """Replace the first occurrence of each word, in corpus order, by <UNK>."""
    seen = set()
    mapped = []
    for sent in sentences:
        tokens = []
        for token in sent:
            if token in seen:
                tokens.append(token)
            else:
                seen.add(token)
                tokens.append(UNK_TOKEN)
        mapped.append(tokens)
    return mapped


class BigramModel:
    """
    Bigram Language Model

    Attributes:
        direction: Traversal direction of the model
        smoothing_method: The smoothing method to use
        min_count: Words seen fewer times are treated as <UNK>
        unk_first_occurrence: The first occurrence of every training word
            is counted as <UNK>, so unseen words get probability mass
        word_counts: Counter of in-vocabulary training words
        bigram_counts: Counter of (context, token) pairs in traversal order
        context_counts: Counter of tokens used as a context
        unigram_counts: Counter of prediction targets
    """

    def __init__(self, direction: Direction = Direction.FORWARD,
                 smoothing: SmoothingMethod = SmoothingMethod.UNIGRAM_INTERPOLATION,
                 smoothing_params: Optional[Dict] = None,
                 min_count: int = 1,
                 unk_first_occurrence: bool = True):
        if min_count < 1:
            raise ValueError("min_count must be at least 1")

        self.direction = direction
        self.smoothing_method = smoothing
        self.smoothing_params = smoothing_params or {}
        self.min_count = min_count
        self.unk_first_occurrence = unk_first_occurrence

        self.vocab: set = set()
        self.word_counts: Counter = Counter()

        self.bigram_counts: Counter = Counter()
        self.context_counts: Counter = Counter()
        self.unigram_counts: Counter = Counter()
        self.total_targets = 0

        self.smoother: Optional[Smoother] = None

        self.is_trained = False
        self.training_stats: Dict = {}

    @property
    def opening_token(self) -> str:
        """Context of the first prediction."""
        return START_TOKEN if self.direction == Direction.FORWARD else END_TOKEN

    @property
    def closing_token(self) -> str:
        """Boundary predicted after the last token."""
        return END_TOKEN if self.direction == Direction.FORWARD else START_TOKEN

    def _map_token(self, token: str) -> str:
        if token in self.word_counts or token in (START_TOKEN, END_TOKEN):
            return token
        return UNK_TOKEN

    def _traverse(self, sentence: List[str]) -> List[str]:
        """Vocabulary-mapped tokens in this model's traversal order."""
        tokens = [self._map_token(t) for t in sentence]
        if self.direction == Direction.BACKWARD:
            tokens.reverse()
        return tokens

    def _count_bigrams(self, sentences: List[List[str]],
                       progress_callback=None) -> None:
        total = len(sentences)

        for idx, sent in enumerate(sentences):
            prev = self.opening_token
            for token in self._traverse(sent) + [self.closing_token]:
                self.bigram_counts[(prev, token)] += 1
                self.context_counts[prev] += 1
                self.unigram_counts[token] += 1
                prev = token

            if progress_callback and (idx + 1) % 100 == 0:
                progress_callback(idx + 1, total)

        if progress_callback:
            progress_callback(total, total)

        self.total_targets = sum(self.unigram_counts.values())

    def train(self, sentences: List[List[str]], progress_callback=None) -> Dict:
        """
        Train the bigram model on sentences.

        Args:
            sentences: List of tokenized sentences
            progress_callback: Optional callback(current, total) for progress

        Returns:
            Dictionary of training statistics
        """
        if self.unk_first_occurrence:
            sentences = _unknown_first_occurrences(sentences)

        self.word_counts = build_vocabulary(sentences, min_count=self.min_count)
        self.word_counts.pop(UNK_TOKEN, None)
        self.vocab = set(self.word_counts) | {UNK_TOKEN, self.closing_token}

        self._count_bigrams(sentences, progress_callback)

        self.smoother = get_smoother(
            self.smoothing_method,
            len(self.vocab),
            **self.smoothing_params
        )

        self.is_trained = True

        self.training_stats = {
            'direction': self.direction.value,
            'smoothing': self.smoothing_method.value,
            'vocab_size': len(self.vocab),
            'num_sentences': len(sentences),
            'unique_bigrams': len(self.bigram_counts),
            'total_bigrams': sum(self.bigram_counts.values())
        }

        return self.training_stats

    def unigram_probability(self, token: str) -> float:
        """Relative frequency of ``token`` as a prediction target."""
        if not self.total_targets:
            return 0.0
        return self.unigram_counts.get(token, 0) / self.total_targets

    def _probability(self, token: str, context: str) -> float:
        count = self.bigram_counts.get((context, token), 0)
        context_count = self.context_counts.get(context, 0)
        return self.smoother.smooth(
            count, context_count,
            unigram_probability=self.unigram_probability(token)
        )

    def _check_trained(self) -> None:
        if not self.is_trained:
            raise RuntimeError("Model must be trained before computing probabilities")

    def probability(self, token: str, context: str) -> float:
        """
        Calculate P(token | context) using the trained model.

        ``context`` is the left neighbour for a forward model and the right
        neighbour for a backward model.
        """
        self._check_trained()
        return self._probability(self._map_token(token), self._map_token(context))

    def token_probabilities(self, sentence: List[str]) -> TokenProbabilities:
        """
        Probability of every token of the sentence given its neighbour.

        Values come in traversal order and exclude the closing boundary.
        """
        self._check_trained()

        values = []
        prev = self.opening_token
        for token in self._traverse(sentence):
            values.append(self._probability(token, prev))
            prev = token

        return TokenProbabilities(self.direction, tuple(values))

    def sentence_log_probability(self, sentence: List[str],
                                 include_boundary: bool = True) -> float:
        """
        Natural-log probability of a sentence.

        Args:
            sentence: List of tokens
            include_boundary: Also score the prediction of the closing
                boundary token after the last word
        """
        total = sum(_log(p) for p in self.token_probabilities(sentence))

        if include_boundary:
            tokens = self._traverse(sentence)
            last = tokens[-1] if tokens else self.opening_token
            total += _log(self._probability(self.closing_token, last))

        return total

    def perplexity(self, sentences: List[List[str]],
                   include_boundary: bool = True) -> float:
        """
        Calculate word perplexity on a set of sentences.

        Perplexity = exp(-1/N * sum(ln P(w_i|context)))

        With ``include_boundary`` each sentence contributes one extra
        prediction for its closing boundary.
        """
        total_log_prob = 0.0
        total_words = 0

        for sent in sentences:
            total_log_prob += self.sentence_log_probability(sent, include_boundary)
            total_words += len(sent) + (1 if include_boundary else 0)

        avg_log_prob = total_log_prob / total_words if total_words > 0 else 0
        return math.exp(-avg_log_prob)

    def get_top_bigrams(self, top_k: int = 100) -> List[Tuple[str, int]]:
        """Most frequent bigrams as (key, count), context first."""
        return [(bigram(context, token), count)
                for (context, token), count in self.bigram_counts.most_common(top_k)]

    def save(self, path: str) -> None:
        """Save the model to a file."""
        path = Path(path)

        with open(path, 'wb') as f:
            pickle.dump(self.to_dict(), f)

    @classmethod
    def load(cls, path: str) -> 'BigramModel':
        """Load a model from a file."""
        path = Path(path)

        with open(path, 'rb') as f:
            data = pickle.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict) -> 'BigramModel':
        model = cls(
            direction=Direction(data['direction']),
            smoothing=SmoothingMethod(data['smoothing_method']),
            smoothing_params=data['smoothing_params'],
            min_count=data['min_count'],
            unk_first_occurrence=data['unk_first_occurrence']
        )

        model.word_counts = Counter(data['word_counts'])
        model.vocab = set(model.word_counts) | {UNK_TOKEN, model.closing_token}
        model.bigram_counts = Counter(data['bigram_counts'])
        model.context_counts = Counter(data['context_counts'])
        model.unigram_counts = Counter(data['unigram_counts'])
        model.total_targets = sum(model.unigram_counts.values())
        model.training_stats = data['training_stats']
        model.is_trained = data['is_trained']

        if model.is_trained:
            model.smoother = get_smoother(
                model.smoothing_method,
                len(model.vocab),
                **model.smoothing_params
            )

        return model

    def to_dict(self) -> Dict:
        return {
            'direction': self.direction.value,
            'smoothing_method': self.smoothing_method.value,
            'smoothing_params': self.smoothing_params,
            'min_count': self.min_count,
            'unk_first_occurrence': self.unk_first_occurrence,
            'word_counts': dict(self.word_counts),
            'bigram_counts': dict(self.bigram_counts),
            'context_counts': dict(self.context_counts),
            'unigram_counts': dict(self.unigram_counts),
            'training_stats': self.training_stats,
            'is_trained': self.is_trained
        }
