"""
Bidirectional Bigram Language Model Package

Forward and backward bigram models combined by fixed-weight linear
interpolation, evaluated with word perplexity.
"""

from .model import BigramModel, Direction, TokenProbabilities
from .interpolation import BidirectionalBigramModel, InterpolationWeights
from .smoothing import SmoothingMethod
from .corpus import (
    bigram, bigram_token1, bigram_token2,
    load_brown_corpus, load_pos_tagged_files, split_corpus
)

__version__ = "0.1.0"
__all__ = [
    "BigramModel", "Direction", "TokenProbabilities",
    "BidirectionalBigramModel", "InterpolationWeights", "SmoothingMethod",
    "bigram", "bigram_token1", "bigram_token2",
    "load_brown_corpus", "load_pos_tagged_files", "split_corpus"
]
