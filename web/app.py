"""
Bidirectional Bigram Model Web API

A Flask application for training the bidirectional model in the background
and scoring sentences with it.
"""

import threading
from pathlib import Path
from typing import Optional, Dict, List

from flask import Flask, jsonify, request

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from bigram_lm import BidirectionalBigramModel, InterpolationWeights
from bigram_lm.corpus import load_brown_corpus, preprocess_text, split_corpus
from bigram_lm.smoothing import parse_smoothing


app = Flask(__name__)

# Global state
model: Optional[BidirectionalBigramModel] = None
training_status: Dict = {
    'is_training': False,
    'stage': 'idle',
    'message': '',
    'error': None,
    'stats': None
}
training_lock = threading.Lock()


def _update_status(**kwargs):
    with training_lock:
        training_status.update(kwargs)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _json_body() -> Dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _is_string_list(value) -> bool:
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


def _parse_sentences(raw: List[str]) -> List[List[str]]:
    return [preprocess_text(sent) for sent in raw if sent.strip()]


def train_model_async(sentences: Optional[List[List[str]]],
                      categories: Optional[List[str]],
                      test_fraction: float,
                      weights: InterpolationWeights,
                      smoothing: str,
                      min_count: int):
    """Train a fresh model in a background thread and swap it in when done."""
    global model

    try:
        if sentences is None:
            _update_status(stage='loading', message='Loading Brown corpus...')
            sentences, _ = load_brown_corpus(categories=categories)

        train_sentences, test_sentences = split_corpus(sentences, test_fraction)

        _update_status(stage='training',
                       message=f'Training on {len(train_sentences):,} sentences...')

        new_model = BidirectionalBigramModel(
            weights=weights,
            smoothing=parse_smoothing(smoothing),
            min_count=min_count
        )
        stats = dict(new_model.train(train_sentences))

        if any(test_sentences):
            stats['test_sentences'] = len(test_sentences)
            stats['test_perplexity'] = new_model.corpus_perplexity(test_sentences, report=False)

        with training_lock:
            model = new_model
            training_status.update(
                is_training=False,
                stage='complete',
                message='Training complete!',
                stats=stats
            )

    except Exception as e:
        _update_status(
            is_training=False,
            stage='error',
            error=str(e),
            message=f'Error: {str(e)}'
        )


def _current_model() -> Optional[BidirectionalBigramModel]:
    with training_lock:
        return model


@app.route('/api/train', methods=['POST'])
def api_train():
    """Start model training."""
    data = _json_body()

    raw_sentences = data.get('sentences')
    if raw_sentences is not None and not _is_string_list(raw_sentences):
        return jsonify({'error': 'sentences must be a list of strings'}), 400

    weight_values = (data.get('lambda_forward', 0.5), data.get('lambda_backward', 0.5))
    if not all(_is_number(w) for w in weight_values):
        return jsonify({'error': 'interpolation weights must be numbers'}), 400

    test_fraction = data.get('test_fraction', 0.0)
    if not _is_number(test_fraction):
        return jsonify({'error': 'test_fraction must be a number'}), 400

    sentences = _parse_sentences(raw_sentences) if raw_sentences else None
    weights = InterpolationWeights(*weight_values)

    with training_lock:
        if training_status['is_training']:
            return jsonify({'error': 'Training already in progress'}), 400
        training_status.update(is_training=True, stage='starting',
                               message='', error=None, stats=None)

    thread = threading.Thread(
        target=train_model_async,
        args=(sentences, data.get('categories'), test_fraction,
              weights, data.get('smoothing', 'unigram_interpolation'),
              data.get('min_count', 1))
    )
    thread.daemon = True
    thread.start()

    return jsonify({'message': 'Training started'})


@app.route('/api/status')
def api_status():
    """Get training status."""
    with training_lock:
        return jsonify(training_status)


@app.route('/api/model/info')
def api_model_info():
    """Get model information."""
    current = _current_model()
    if current is None:
        return jsonify({'error': 'No model trained'}), 400

    return jsonify({
        'lambda_forward': current.weights.forward,
        'lambda_backward': current.weights.backward,
        'stats': current.training_stats
    })


@app.route('/api/score', methods=['POST'])
def api_score():
    """Score one sentence token by token."""
    current = _current_model()
    if current is None:
        return jsonify({'error': 'No model trained'}), 400

    data = _json_body()
    sentence = data.get('sentence', '')
    tokens = preprocess_text(sentence) if isinstance(sentence, str) else []
    if not tokens:
        return jsonify({'error': 'No sentence provided'}), 400

    forward = current.forward_model.token_probabilities(tokens).aligned()
    backward = current.backward_model.token_probabilities(tokens).aligned()
    interpolated = current.sentence_token_probabilities(tokens)

    return jsonify({
        'tokens': [
            {
                'token': token,
                'forward': p,
                'backward': q,
                'interpolated': r
            }
            for token, p, q, r in zip(tokens, forward, backward, interpolated)
        ],
        'log_probability': current.sentence_log_probability(tokens)
    })


@app.route('/api/perplexity', methods=['POST'])
def api_perplexity():
    """Calculate perplexity for given sentences."""
    current = _current_model()
    if current is None:
        return jsonify({'error': 'No model trained'}), 400

    data = _json_body()
    raw_sentences = data.get('sentences', [])
    if not _is_string_list(raw_sentences):
        return jsonify({'error': 'sentences must be a list of strings'}), 400

    parsed = _parse_sentences(raw_sentences)

    if not parsed:
        return jsonify({'error': 'No sentences provided'}), 400

    perplexity = current.corpus_perplexity(parsed, report=False)

    return jsonify({
        'perplexity': perplexity,
        'num_sentences': len(parsed)
    })


if __name__ == '__main__':
    import argparse

    parser = argparse.ArgumentParser(description='Bidirectional Bigram Model Web API')
    parser.add_argument('--host', default='127.0.0.1', help='Host to bind to')
    parser.add_argument('--port', type=int, default=5000, help='Port to bind to')
    parser.add_argument('--debug', action='store_true', help='Enable debug mode')

    args = parser.parse_args()

    print(f"\n🌐 Starting Bidirectional Bigram Model API")
    print(f"   Listening on http://{args.host}:{args.port}\n")

    app.run(host=args.host, port=args.port, debug=args.debug, threaded=True)
