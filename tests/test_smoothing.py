import pytest

from bigram_lm.smoothing import (
    AddKSmoothing,
    LaplaceSmoothing,
    NoSmoothing,
    SmoothingMethod,
    UnigramInterpolationSmoothing,
    get_smoother,
    parse_smoothing,
)


@pytest.mark.parametrize(
    "method, expected_type",
    [
        (SmoothingMethod.NONE, NoSmoothing),
        (SmoothingMethod.UNIGRAM_INTERPOLATION, UnigramInterpolationSmoothing),
        (SmoothingMethod.LAPLACE, LaplaceSmoothing),
        (SmoothingMethod.ADD_K, AddKSmoothing),
    ],
)
def test_get_smoother(method, expected_type):
    assert isinstance(get_smoother(method, 10), expected_type)


def test_unigram_interpolation_mixes_both_estimates():
    smoother = UnigramInterpolationSmoothing(10)
    assert smoother.smooth(3, 4, unigram_probability=0.2) == pytest.approx(
        0.1 * 0.2 + 0.9 * 0.75
    )


def test_unigram_interpolation_falls_back_to_unigram():
    smoother = get_smoother(
        SmoothingMethod.UNIGRAM_INTERPOLATION, 10,
        unigram_weight=0.3, bigram_weight=0.7
    )
    assert smoother.smooth(0, 0, unigram_probability=0.5) == pytest.approx(0.15)


def test_laplace():
    assert LaplaceSmoothing(5).smooth(2, 2) == pytest.approx(3 / 7)


def test_add_k():
    smoother = get_smoother(SmoothingMethod.ADD_K, 4, k=0.25)
    assert smoother.smooth(1, 3) == pytest.approx(1.25 / 4)


def test_no_smoothing_unseen_context():
    assert NoSmoothing(3).smooth(0, 0) == 0.0


def test_parse_smoothing():
    assert parse_smoothing("Laplace") is SmoothingMethod.LAPLACE
    with pytest.raises(ValueError):
        parse_smoothing("kneser_ney")
