"""
Corpus Loading and Preprocessing

This module handles loading tokenized sentences (Brown corpus or LDC
POS-tagged files), the sentence boundary tokens, bigram keys and the
train/test split used by the bidirectional bigram model.
"""

import math
import string
from collections import Counter
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

import nltk
from nltk.corpus import brown


# Special tokens
START_TOKEN = "<S>"
END_TOKEN = "</S>"
UNK_TOKEN = "<UNK>"

# Must not occur inside a token, otherwise bigram keys cannot be split back
BIGRAM_SEPARATOR = "\n"

# LDC tagged file markers
SEPARATOR_LINE = "======"
HEADER_PREFIX = "*x*"
SENTENCE_END_TAG = "."


def bigram(prev_token: str, token: str) -> str:
    """Return the bigram key: both tokens joined by a newline."""
    return prev_token + BIGRAM_SEPARATOR + token


def bigram_token1(key: str) -> str:
    """Return the first token of a bigram key (text before the newline)."""
    return key[:key.index(BIGRAM_SEPARATOR)]


def bigram_token2(key: str) -> str:
    """Return the second token of a bigram key (text after the newline)."""
    return key[key.index(BIGRAM_SEPARATOR) + 1:]


def ensure_nltk_data():
    """Download required NLTK data if not present."""
    try:
        nltk.data.find('corpora/brown')
    except LookupError:
        print("Downloading Brown corpus...")
        nltk.download('brown', quiet=True)


def preprocess_text(text: str, lowercase: bool = True,
                    remove_punctuation: bool = False) -> List[str]:
    """
    Preprocess raw text into a list of tokens.

    Args:
        text: Raw input text
        lowercase: Whether to lowercase the text
        remove_punctuation: Whether to remove punctuation

    Returns:
        List of preprocessed tokens
    """
    if lowercase:
        text = text.lower()

    if remove_punctuation:
        text = text.translate(str.maketrans('', '', string.punctuation))

    return text.split()


def load_brown_corpus(categories: Optional[List[str]] = None,
                      lowercase: bool = True,
                      min_sentence_length: int = 1) -> Tuple[List[List[str]], dict]:
    """
    Load the Brown corpus and return preprocessed sentences.

    Args:
        categories: Optional list of Brown corpus categories to load.
                   If None, loads all categories.
        lowercase: Whether to lowercase the text
        min_sentence_length: Minimum number of words in a sentence

    Returns:
        Tuple of (list of sentences as token lists, corpus statistics dict)
    """
    ensure_nltk_data()

    if categories:
        sents = brown.sents(categories=categories)
    else:
        sents = brown.sents()

    processed_sentences = []
    total_tokens = 0

    for sent in sents:
        tokens = [w.lower() if lowercase else w for w in sent]

        if len(tokens) >= min_sentence_length:
            processed_sentences.append(tokens)
            total_tokens += len(tokens)

    stats = {
        'num_sentences': len(processed_sentences),
        'total_tokens': total_tokens,
        'categories': categories or brown.categories()
    }

    return processed_sentences, stats


def get_brown_categories() -> List[str]:
    """Return list of available Brown corpus categories."""
    ensure_nltk_data()
    return brown.categories()


def _tagged_files(paths: Iterable[Union[str, Path]]) -> List[Path]:
    files = []
    for path in paths:
        path = Path(path)
        if path.is_dir():
            files.extend(sorted(p for p in path.rglob('*') if p.is_file()))
        else:
            files.append(path)
    return files


def parse_pos_tagged_lines(lines: Iterable[str]) -> List[List[str]]:
    """
    Convert lines of an LDC POS-tagged file into token lists.

    Tokens look like ``word/TAG``; ``[`` and ``]`` chunk brackets are
    ignored. A sentence ends at a ``======`` separator line or right after
    a token tagged ``.``.
    """
    sentences = []
    current: List[str] = []

    for line in lines:
        line = line.strip()
        if not line or line.startswith(HEADER_PREFIX):
            continue

        if line.startswith(SEPARATOR_LINE):
            if current:
                sentences.append(current)
                current = []
            continue

        for item in line.split():
            if item in ('[', ']'):
                continue

            # Words may themselves contain "/", the tag follows the last one
            word, slash, tag = item.rpartition('/')
            if not slash:
                word, tag = item, ''

            current.append(word)
            if tag == SENTENCE_END_TAG:
                sentences.append(current)
                current = []

    if current:
        sentences.append(current)

    return sentences


def load_pos_tagged_files(paths: Iterable[Union[str, Path]]) -> Tuple[List[List[str]], dict]:
    """
    Load sentences from LDC POS-tagged files or directories of them.

    Args:
        paths: Files or directories (walked recursively)

    Returns:
        Tuple of (list of sentences as token lists, corpus statistics dict)
    """
    files = _tagged_files(paths)
    sentences = []

    for file_path in files:
        with open(file_path, 'r', encoding='utf-8', errors='replace') as f:
            sentences.extend(parse_pos_tagged_lines(f))

    stats = {
        'num_sentences': len(sentences),
        'total_tokens': word_count(sentences),
        'num_files': len(files)
    }

    return sentences, stats


def build_vocabulary(sentences: List[List[str]],
                     min_count: int = 1) -> Counter:
    """
    Count words and keep those occurring at least ``min_count`` times.

    Returns:
        Counter of kept words (special tokens are not included)
    """
    word_counts = Counter()
    for sent in sentences:
        word_counts.update(sent)

    return Counter({w: c for w, c in word_counts.items() if c >= min_count})


def word_count(sentences: List[List[str]]) -> int:
    """Total number of tokens over all sentences."""
    return sum(len(sent) for sent in sentences)


def split_corpus(sentences: List[List[str]],
                 test_fraction: float) -> Tuple[List[List[str]], List[List[str]]]:
    """
    Split sentences into a training prefix and a test suffix.

    The number of test sentences is ``len(sentences) * test_fraction``
    rounded half up.

    Returns:
        Tuple of (train_sentences, test_sentences)
    """
    if not 0 <= test_fraction <= 1:
        raise ValueError(f"test_fraction must be between 0 and 1, got {test_fraction}")

    num_sentences = len(sentences)
    num_test = int(math.floor(num_sentences * test_fraction + 0.5))
    split = num_sentences - num_test

    return sentences[:split], sentences[split:]
