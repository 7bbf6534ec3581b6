import math

import pytest

import train
from bigram_lm import BidirectionalBigramModel, InterpolationWeights
from bigram_lm.training import evaluate_model_cli, load_corpus, train_model_cli


@pytest.fixture
def tagged_file(tmp_path):
    path = tmp_path / "corpus.pos"
    path.write_text("======\n" + "The/DT dog/NN barks/VBZ ./.\n" * 10)
    return path


class TestTrainModelCli:
    def test_train_and_test_perplexity(self, tagged_file, capsys):
        model, results = train_model_cli(paths=[str(tagged_file)], test_fraction=0.3)
        out = capsys.readouterr().out

        assert "# Train Sentences = 7 (# words = 28)" in out
        assert "# Test Sentences = 3 (# words = 12)" in out
        assert out.count("Word Perplexity = ") == 2
        assert math.isfinite(results["train_perplexity"])
        assert math.isfinite(results["test_perplexity"])
        assert model.training_stats["num_sentences"] == 7

    def test_unseen_test_word_keeps_perplexity_finite(self, tmp_path):
        path = tmp_path / "unseen.pos"
        path.write_text(
            "The/DT dog/NN barks/VBZ ./.\n" * 9 + "The/DT cat/NN barks/VBZ ./.\n"
        )
        _, results = train_model_cli(paths=[str(path)], test_fraction=0.1)
        assert math.isfinite(results["test_perplexity"])
        assert results["test_perplexity"] > results["train_perplexity"]

    def test_zero_fraction_skips_test_evaluation(self, tagged_file, capsys):
        _, results = train_model_cli(paths=[str(tagged_file)], test_fraction=0.0)
        out = capsys.readouterr().out

        assert results["test_perplexity"] is None
        assert out.count("Word Perplexity = ") == 1
        assert "No test tokens" in out

    def test_weights_are_used(self, tagged_file):
        weights = InterpolationWeights(0.8, 0.2)
        model, _ = train_model_cli(paths=[str(tagged_file)], weights=weights)
        assert model.weights == weights

    def test_save(self, tagged_file, tmp_path):
        path = tmp_path / "model.pkl"
        train_model_cli(paths=[str(tagged_file)], save_path=str(path))
        assert BidirectionalBigramModel.load(str(path)).training_stats["num_sentences"] == 9

    def test_no_input_paths(self):
        with pytest.raises(ValueError):
            load_corpus(paths=[])


def test_evaluate_empty_subset_returns_none(capsys):
    model = BidirectionalBigramModel()
    model.train([["a"]])
    assert evaluate_model_cli(model, [[]], "test") is None


class TestCommandLine:
    def test_main(self, tagged_file, tmp_path, capsys):
        path = tmp_path / "model.pkl"
        code = train.main([
            str(tagged_file), "-t", "0.3",
            "--lambda-forward", "0.6", "--lambda-backward", "0.4",
            "--save", str(path)
        ])
        assert code == 0
        assert BidirectionalBigramModel.load(str(path)).weights == InterpolationWeights(0.6, 0.4)

    def test_requires_input(self):
        with pytest.raises(SystemExit):
            train.main(["-t", "0.1"])

    @pytest.mark.parametrize("fraction", ["1", "1.5", "-0.2"])
    def test_rejects_bad_fraction(self, tagged_file, fraction):
        with pytest.raises(SystemExit):
            train.main([str(tagged_file), "--test-fraction", fraction])
