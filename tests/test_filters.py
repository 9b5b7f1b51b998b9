import numpy as np
import pytest

from bs1770.errors import InvalidSampleRate, LoudnessError
from bs1770.filters import (
    FilterState,
    KWeightingFilter,
    pre_filter_coefficients,
    rlb_filter_coefficients,
)


def test_48k_coefficients_match_recommendation_table() -> None:
    pre = pre_filter_coefficients(48_000)
    rlb = rlb_filter_coefficients(48_000)

    assert pre.b0 == pytest.approx(1.53512485958697, abs=1e-6)
    assert pre.b1 == pytest.approx(-2.69169618940638, abs=1e-6)
    assert pre.b2 == pytest.approx(1.19839281085285, abs=1e-6)
    assert pre.a1 == pytest.approx(-1.69065929318241, abs=1e-6)
    assert pre.a2 == pytest.approx(0.73248077421585, abs=1e-6)

    assert (rlb.b0, rlb.b1, rlb.b2) == (1.0, -2.0, 1.0)
    assert rlb.a1 == pytest.approx(-1.99004745483398, abs=1e-6)
    assert rlb.a2 == pytest.approx(0.99007225036621, abs=1e-6)


def test_coefficients_are_shared_per_rate() -> None:
    assert pre_filter_coefficients(44_100) is pre_filter_coefficients(44_100.0)
    assert rlb_filter_coefficients(96_000) is rlb_filter_coefficients(96_000)
    assert pre_filter_coefficients(44_100) != pre_filter_coefficients(48_000)


@pytest.mark.parametrize("rate", [0, -44_100, float("nan"), float("inf"), "fast"])
def test_invalid_sample_rate_is_rejected(rate) -> None:
    with pytest.raises(InvalidSampleRate):
        KWeightingFilter(rate)


def test_invalid_sample_rate_is_a_loudness_error() -> None:
    with pytest.raises(LoudnessError):
        pre_filter_coefficients(0)


def test_sample_by_sample_filtering_matches_one_batch(noise) -> None:
    signal = noise(1, 4_800)[0]

    batch = KWeightingFilter(48_000).process(signal)
    streaming = KWeightingFilter(48_000)
    samples = np.concatenate([streaming.process(signal[i : i + 1]) for i in range(signal.size)])

    assert np.array_equal(batch, samples)


def test_uneven_chunks_match_one_batch(noise) -> None:
    signal = noise(1, 44_100)[0]
    batch = KWeightingFilter(44_100).process(signal)

    chunked = KWeightingFilter(44_100)
    pieces = []
    start = 0
    for size in (1, 2, 3, 517, 4_410, 9_999):
        pieces.append(chunked.process(signal[start : start + size]))
        start += size
    pieces.append(chunked.process(signal[start:]))

    assert np.array_equal(batch, np.concatenate(pieces))


def test_filtering_is_causal(noise) -> None:
    signal = noise(1, 10_000)[0]
    cut = 6_123

    full = KWeightingFilter(48_000).process(signal)
    truncated = KWeightingFilter(48_000).process(signal[:cut])

    assert np.array_equal(full[:cut], truncated)


def test_state_belongs_to_caller() -> None:
    state = FilterState.initial()
    meter = KWeightingFilter(48_000, state=state)

    meter.process(np.ones(16))

    assert meter.state is state
    assert np.any(state.pre_filter != 0.0)
    assert np.any(state.rlb_filter != 0.0)


def test_empty_input_leaves_state_untouched() -> None:
    meter = KWeightingFilter(48_000)

    assert meter.process(np.empty(0)).size == 0
    assert np.array_equal(meter.state.pre_filter, np.zeros(2))


def test_dc_is_removed_and_highs_are_boosted() -> None:
    rate = 48_000
    dc = KWeightingFilter(rate).process(np.ones(2 * rate))
    assert abs(dc[-1]) < 1e-3

    t = np.arange(rate, dtype=np.float64) / rate
    tone = np.sin(2.0 * np.pi * 10_000.0 * t)
    weighted = KWeightingFilter(rate).process(tone)
    gain_db = 20.0 * np.log10(np.sqrt(np.mean(weighted[rate // 2 :] ** 2)) / np.sqrt(0.5))
    assert 3.5 < gain_db < 4.3


def test_multichannel_input_is_rejected() -> None:
    with pytest.raises(ValueError):
        KWeightingFilter(48_000).process(np.zeros((2, 10)))
