"""
Bidirectional Bigram Language Model

Combines a forward and a backward bigram model with fixed-weight linear
interpolation and evaluates the result with word perplexity.
"""

import math
import pickle
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from rich.console import Console

from .model import BigramModel, Direction
from .smoothing import SmoothingMethod
from .corpus import word_count


console = Console()


@dataclass(frozen=True)
class InterpolationWeights:
    """
    Weights of the forward and backward predictions.

    They are expected to sum to one but are used exactly as given.
    """
    forward: float = 0.5
    backward: float = 0.5


class BidirectionalBigramModel:
    """
    Bidirectional Bigram Language Model

    Every token is scored by both sub-models and the two predictions for
    the same sentence position are mixed linearly. The model must be
    trained before scoring; this is not checked here.

    Attributes:
        weights: Interpolation weights of the two sub-models
        forward_model: Model predicting each token from its left neighbour
        backward_model: Model predicting each token from its right neighbour
    """

    def __init__(self, weights: Optional[InterpolationWeights] = None,
                 smoothing: SmoothingMethod = SmoothingMethod.UNIGRAM_INTERPOLATION,
                 smoothing_params: Optional[Dict] = None,
                 min_count: int = 1,
                 unk_first_occurrence: bool = True,
                 forward_model=None,
                 backward_model=None):
        self.weights = weights or InterpolationWeights()

        if forward_model is None:
            forward_model = BigramModel(Direction.FORWARD, smoothing, smoothing_params,
                                        min_count, unk_first_occurrence)
        if backward_model is None:
            backward_model = BigramModel(Direction.BACKWARD, smoothing, smoothing_params,
                                         min_count, unk_first_occurrence)

        self.forward_model = forward_model
        self.backward_model = backward_model
        self.training_stats: Dict = {}

    def train(self, sentences: List[List[str]]) -> Dict:
        """
        Train both sub-models on the same list of tokenized sentences.

        Returns:
            Dictionary of training statistics
        """
        forward_stats = self.forward_model.train(sentences)
        backward_stats = self.backward_model.train(sentences)

        self.training_stats = {
            'num_sentences': len(sentences),
            'num_words': word_count(sentences),
            'forward_weight': self.weights.forward,
            'backward_weight': self.weights.backward
        }
        for prefix, stats in (('forward', forward_stats), ('backward', backward_stats)):
            for key, value in (stats or {}).items():
                if key not in ('direction', 'num_sentences'):
                    self.training_stats[f'{prefix}_{key}'] = value

        return self.training_stats

    def interpolated_probability(self, forward_prob: float, backward_prob: float) -> float:
        """Linearly combine weighted forward and backward probabilities."""
        return self.weights.forward * forward_prob + self.weights.backward * backward_prob

    def sentence_token_probabilities(self, sentence: List[str]) -> List[float]:
        """Interpolated probability of every token, in sentence order."""
        forward = self.forward_model.token_probabilities(sentence).aligned()
        backward = self.backward_model.token_probabilities(sentence).aligned()

        return [self.interpolated_probability(p, q) for p, q in zip(forward, backward)]

    def sentence_log_probability(self, sentence: List[str]) -> float:
        """
        Natural-log probability of a sentence.

        Only the observed tokens are scored; the end of the sentence is not
        predicted. A zero probability gives ``-inf``.
        """
        total = 0.0
        for prob in self.sentence_token_probabilities(sentence):
            total += math.log(prob) if prob > 0 else float('-inf')
        return total

    def corpus_perplexity(self, sentences: List[List[str]], report: bool = True) -> float:
        """
        Word perplexity over sentences, not counting end-of-sentence.

        Perplexity = exp(-sum(ln P(sentence)) / N), N = number of tokens.
        The corpus must contain at least one token.
        """
        total_log_prob = 0.0
        total_words = 0

        for sent in sentences:
            total_words += len(sent)
            total_log_prob += self.sentence_log_probability(sent)

        perplexity = math.exp(-total_log_prob / total_words)

        if report:
            console.print(f"Word Perplexity = {perplexity}", highlight=False)

        return perplexity

    @staticmethod
    def word_count(sentences: List[List[str]]) -> int:
        """Total number of tokens, as used for the perplexity denominator."""
        return word_count(sentences)

    def save(self, path: str) -> None:
        """Save the model to a file."""
        path = Path(path)

        data = {
            'weights': (self.weights.forward, self.weights.backward),
            'forward_model': self.forward_model.to_dict(),
            'backward_model': self.backward_model.to_dict(),
            'training_stats': self.training_stats
        }

        with open(path, 'wb') as f:
            pickle.dump(data, f)

    @classmethod
    def load(cls, path: str) -> 'BidirectionalBigramModel':
        """Load a model from a file."""
        path = Path(path)

        with open(path, 'rb') as f:
            data = pickle.load(f)

        forward, backward = data['weights']
        model = cls(
            weights=InterpolationWeights(forward, backward),
            forward_model=BigramModel.from_dict(data['forward_model']),
            backward_model=BigramModel.from_dict(data['backward_model'])
        )
        model.training_stats = data['training_stats']

        return model
