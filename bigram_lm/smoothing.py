"""
Smoothing Methods for Bigram Language Models

This module implements the smoothing techniques a bigram model can use to
assign non-zero probability to bigrams never seen in training.
"""

from enum import Enum


class SmoothingMethod(Enum):
    """Available smoothing methods."""
    NONE = "none"
    UNIGRAM_INTERPOLATION = "unigram_interpolation"  # Fixed-weight mix with unigrams
    LAPLACE = "laplace"                              # Add-one smoothing
    ADD_K = "add_k"                                  # Add-k smoothing


class Smoother:
    """Base class for smoothing implementations."""

    def __init__(self, vocab_size: int):
        self.vocab_size = vocab_size

    def smooth(self, count: int, context_count: int,
               unigram_probability: float = 0.0) -> float:
        """Return smoothed probability."""
        raise NotImplementedError


class NoSmoothing(Smoother):
    """No smoothing - raw maximum likelihood estimation."""

    def smooth(self, count: int, context_count: int,
               unigram_probability: float = 0.0) -> float:
        if context_count == 0:
            return 0.0
        return count / context_count


class UnigramInterpolationSmoothing(Smoother):
    """
    Fixed-weight interpolation with the unigram distribution

    P(w|prev) = λ_u * P(w) + λ_b * count(prev, w) / count(prev)

    An unseen context contributes nothing from the bigram term, so the
    estimate falls back to the (weighted) unigram probability.
    """

    def __init__(self, vocab_size: int, unigram_weight: float = 0.1,
                 bigram_weight: float = 0.9):
        super().__init__(vocab_size)
        self.unigram_weight = unigram_weight
        self.bigram_weight = bigram_weight

    def smooth(self, count: int, context_count: int,
               unigram_probability: float = 0.0) -> float:
        bigram_probability = count / context_count if context_count else 0.0
        return (self.unigram_weight * unigram_probability
                + self.bigram_weight * bigram_probability)


class LaplaceSmoothing(Smoother):
    """
    Laplace (Add-One) Smoothing

    P(w|prev) = (count(prev, w) + 1) / (count(prev) + V)
    """

    def smooth(self, count: int, context_count: int,
               unigram_probability: float = 0.0) -> float:
        return (count + 1) / (context_count + self.vocab_size)


class AddKSmoothing(Smoother):
    """
    Add-K Smoothing (Generalized Laplace)

    P(w|prev) = (count(prev, w) + k) / (count(prev) + k*V)
    """

    def __init__(self, vocab_size: int, k: float = 0.5):
        super().__init__(vocab_size)
        self.k = k

    def smooth(self, count: int, context_count: int,
               unigram_probability: float = 0.0) -> float:
        return (count + self.k) / (context_count + self.k * self.vocab_size)


def parse_smoothing(name: str) -> SmoothingMethod:
    """Map a command-line name to a SmoothingMethod."""
    try:
        return SmoothingMethod(name.lower())
    except ValueError:
        raise ValueError(f"Unknown smoothing method: {name}") from None


def get_smoother(method: SmoothingMethod, vocab_size: int, **kwargs) -> Smoother:
    """Factory function to create the appropriate smoother."""
    if method == SmoothingMethod.NONE:
        return NoSmoothing(vocab_size)
    elif method == SmoothingMethod.UNIGRAM_INTERPOLATION:
        return UnigramInterpolationSmoothing(
            vocab_size,
            unigram_weight=kwargs.get('unigram_weight', 0.1),
            bigram_weight=kwargs.get('bigram_weight', 0.9)
        )
    elif method == SmoothingMethod.LAPLACE:
        return LaplaceSmoothing(vocab_size)
    elif method == SmoothingMethod.ADD_K:
        return AddKSmoothing(vocab_size, k=kwargs.get('k', 0.5))
    else:
        raise ValueError(f"Unknown smoothing method: {method}")
