#!/usr/bin/env python3
"""
Bidirectional Bigram Model Training Script

Train forward and backward bigram models on POS-tagged files (or the Brown
corpus), interpolate them and report word perplexity.

Usage:
    python train.py data/wsj --test-fraction 0.1
    python train.py data/atis.pos -t 0.1 --lambda-forward 0.7 --lambda-backward 0.3
    python train.py --brown --categories news -t 0.1
"""

import argparse
import sys

from bigram_lm import InterpolationWeights
from bigram_lm.training import train_model_cli
from bigram_lm.corpus import get_brown_categories


def fraction_type(value: str) -> float:
    fraction = float(value)
    if not 0 <= fraction < 1:
        raise argparse.ArgumentTypeError("test fraction must be in [0, 1)")
    return fraction


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Train a bidirectional bigram language model",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s data/wsj --test-fraction 0.1
  %(prog)s data/atis.pos -t 0.1 --smoothing laplace
  %(prog)s --brown --categories news fiction -t 0.2

Uses the last TEST_FRACTION of the sentences for testing and the
first part for training.

Available smoothing methods:
  unigram_interpolation - Mix with unigram probabilities (default)
  laplace               - Add-one smoothing
  add_k                 - Add-k smoothing (k=0.5)
  none                  - No smoothing (MLE)
        """
    )

    parser.add_argument(
        'paths',
        nargs='*',
        help='Files or directories of LDC POS-tagged data'
    )

    parser.add_argument(
        '-t', '--test-fraction',
        type=fraction_type,
        default=0.1,
        help='Fraction of the sentences used for testing (default: 0.1)'
    )

    parser.add_argument(
        '--lambda-forward',
        type=float,
        default=0.5,
        help='Interpolation weight of the forward model (default: 0.5)'
    )

    parser.add_argument(
        '--lambda-backward',
        type=float,
        default=0.5,
        help='Interpolation weight of the backward model (default: 0.5)'
    )

    parser.add_argument(
        '-s', '--smoothing',
        type=str,
        default='unigram_interpolation',
        choices=['unigram_interpolation', 'laplace', 'add_k', 'none'],
        help='Smoothing method (default: unigram_interpolation)'
    )

    parser.add_argument(
        '--min-count',
        type=int,
        default=1,
        help='Minimum word count for vocabulary (default: 1)'
    )

    parser.add_argument(
        '--no-unk-first-occurrence',
        dest='unk_first_occurrence',
        action='store_false',
        help='Do not count the first occurrence of each word as <UNK>'
    )

    parser.add_argument(
        '--brown',
        action='store_true',
        help='Use the Brown corpus instead of input files'
    )

    parser.add_argument(
        '-c', '--categories',
        type=str,
        nargs='+',
        default=None,
        help='Brown corpus categories to use (default: all)'
    )

    parser.add_argument(
        '--save',
        type=str,
        default=None,
        help='Path to save the trained model'
    )

    parser.add_argument(
        '--list-categories',
        action='store_true',
        help='List available Brown corpus categories and exit'
    )

    args = parser.parse_args(argv)

    # List categories and exit
    if args.list_categories:
        print("Available Brown corpus categories:")
        for cat in get_brown_categories():
            print(f"  - {cat}")
        return 0

    if not args.paths and not args.brown:
        parser.error("give at least one input path, or --brown")

    train_model_cli(
        paths=args.paths,
        test_fraction=args.test_fraction,
        weights=InterpolationWeights(args.lambda_forward, args.lambda_backward),
        smoothing=args.smoothing,
        min_count=args.min_count,
        unk_first_occurrence=args.unk_first_occurrence,
        use_brown=args.brown,
        categories=args.categories,
        save_path=args.save
    )

    return 0


if __name__ == '__main__':
    sys.exit(main())
