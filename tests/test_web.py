import math

import pytest

import web.app as web_app
from bigram_lm import InterpolationWeights


class ImmediateThread:
    """Runs the target on start() so training finishes inside the request."""

    def __init__(self, target, args=()):
        self.target = target
        self.args = args
        self.daemon = False

    def start(self):
        self.target(*self.args)


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(web_app, "model", None)
    monkeypatch.setattr(web_app, "training_status", {
        'is_training': False,
        'stage': 'idle',
        'message': '',
        'error': None,
        'stats': None
    })
    monkeypatch.setattr(web_app.threading, "Thread", ImmediateThread)
    web_app.app.config["TESTING"] = True
    return web_app.app.test_client()


def train(client, **payload):
    payload.setdefault("sentences", ["a b", "a b", "a b", "a b"])
    response = client.post("/api/train", json=payload)
    assert response.status_code == 200
    return client.get("/api/status").get_json()


def test_endpoints_need_a_model(client):
    assert client.get("/api/model/info").status_code == 400
    assert client.post("/api/score", json={"sentence": "a b"}).status_code == 400
    assert client.post("/api/perplexity", json={"sentences": ["a b"]}).status_code == 400


def test_train_with_posted_sentences(client):
    status = train(client, lambda_forward=0.7, lambda_backward=0.3)

    assert status["stage"] == "complete"
    assert status["is_training"] is False
    assert status["stats"]["num_sentences"] == 4

    info = client.get("/api/model/info").get_json()
    assert info["lambda_forward"] == 0.7
    assert info["lambda_backward"] == 0.3


def test_train_with_held_out_sentences(client):
    status = train(client, test_fraction=0.25)
    assert status["stats"]["num_sentences"] == 3
    assert status["stats"]["test_sentences"] == 1
    # Three "a b" for training, the first counted as <UNK> <UNK>
    expected = 0.1 * 2 / 9 + 0.9 * (2 / 3 + 1) / 2
    assert status["stats"]["test_perplexity"] == pytest.approx(1 / expected)


def test_training_error_is_reported(client):
    status = train(client, smoothing="kneser_ney")
    assert status["stage"] == "error"
    assert "Unknown smoothing method" in status["error"]
    assert client.get("/api/model/info").status_code == 400


def test_score(client):
    train(client)
    data = client.post("/api/score", json={"sentence": "A B"}).get_json()

    # Four "a b", the first counted as <UNK> <UNK>: P(a | <S>) = 0.1 * 3/12 + 0.9 * 3/4
    # and P(b | a) = 0.1 * 3/12 + 0.9, mirrored by the backward model
    first, second = data["tokens"]
    assert (first["token"], second["token"]) == ("a", "b")
    assert first["forward"] == pytest.approx(0.7)
    assert first["backward"] == pytest.approx(0.925)
    assert second["forward"] == pytest.approx(0.925)
    assert second["backward"] == pytest.approx(0.7)
    assert first["interpolated"] == pytest.approx(0.8125)
    assert second["interpolated"] == pytest.approx(0.8125)
    assert data["log_probability"] == pytest.approx(2 * math.log(0.8125))


def test_score_needs_a_sentence(client):
    train(client)
    assert client.post("/api/score", json={"sentence": "  "}).status_code == 400


def test_perplexity(client):
    train(client)
    response = client.post("/api/perplexity", json={"sentences": ["a b", ""]})
    data = response.get_json()

    assert data["num_sentences"] == 1
    assert data["perplexity"] == pytest.approx(1 / 0.8125)
    assert client.post("/api/perplexity", json={"sentences": []}).status_code == 400
    assert client.post("/api/perplexity", json={"sentences": [["a", "b"]]}).status_code == 400


def test_train_model_async_swaps_in_model(client):
    web_app.train_model_async(
        [["x", "y"]], None, 0.0, InterpolationWeights(), "laplace", 1
    )
    assert web_app.model is not None
    assert web_app.model.forward_model.smoothing_method.value == "laplace"


@pytest.mark.parametrize(
    "payload",
    [
        {"sentences": [["a", "b"], ["a", "c"]]},
        {"sentences": "a b"},
        {"sentences": ["a b"], "lambda_forward": "0.5"},
        {"sentences": ["a b"], "test_fraction": None},
    ],
)
def test_bad_train_request_does_not_block_training(client, payload):
    response = client.post("/api/train", json=payload)
    assert response.status_code == 400
    assert client.get("/api/status").get_json()["is_training"] is False

    status = train(client)
    assert status["stage"] == "complete"


def test_non_object_body_is_rejected(client):
    train(client)
    assert client.post("/api/score", json=["a", "b"]).status_code == 400
    assert client.post("/api/perplexity", json=["a b"]).status_code == 400
