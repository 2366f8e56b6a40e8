import random

import pytest

from snnref.reference import (
    conv_and_pooling_compute,
    conv_compute,
    matrix_multiply,
    matrix_multiply_rows,
    pool2x2,
    pooling_compute,
    sequential_layer,
)


def _spikes(rng, size):
    return [rng.randrange(2) for _ in range(size)]


def _weights(rng, size):
    return [rng.randrange(-2, 4) for _ in range(size)]


def test_sequential_layer_matches_conv_compute_for_one_step():
    rng = random.Random(1)
    r = s = 2
    c, k, x, y = 2, 3, 4, 4
    inputs = _spikes(rng, x * y * c)
    filters = _weights(rng, k * r * s * c)
    state = [0] * (3 * 3 * k)
    seq_out, seq_state = sequential_layer(r, s, c, k, 1, 1, x, y, 1, inputs, filters, state, 2, 1, False)
    conv_out, conv_state = conv_compute(r, s, c, k, 0, 1, x, y, inputs, filters, state, 2)
    assert seq_out == conv_out
    assert seq_state == conv_state


def test_sequential_layer_carries_potential_over_steps():
    rng = random.Random(2)
    r = s = 1
    c, k, x, y = 2, 2, 3, 3
    first = _spikes(rng, x * y * c)
    inputs = first + [0] * (x * y * c)
    filters = [1] * (k * c)
    state = [0] * (x * y * k)
    _, one_state = sequential_layer(r, s, c, k, 1, 1, x, y, 1, first, filters, state, 1000, 1, False)
    outs, two_state = sequential_layer(r, s, c, k, 1, 1, x, y, 1, inputs, filters, state, 1000, 2, False)
    assert two_state == one_state
    assert outs == [0] * (2 * x * y * k)


def test_sequential_layer_pooling_without_spikes_is_zero():
    outs, state = sequential_layer(1, 1, 1, 2, 1, 1, 2, 2, 1, [0] * 4, [1, 1], [0] * 8, 1, 1, True)
    assert set(outs) == {0}
    assert state == [0] * 8


def test_conv_compute_fire_invariant():
    rng = random.Random(3)
    r = s = 3
    c, k, x, y, p = 2, 2, 5, 5, 1
    inputs = _spikes(rng, x * y * c)
    filters = _weights(rng, k * r * s * c)
    state = [rng.randrange(0, 3) for _ in range(x * y * k)]
    spikes, new_state = conv_compute(r, s, c, k, p, 1, x, y, inputs, filters, state, 3)
    assert len(spikes) == len(new_state) == x * y * k
    for spike, potential in zip(spikes, new_state):
        if spike:
            assert potential == 0
        else:
            assert potential < 3


def test_conv_compute_padding_with_identity_kernel():
    inputs = [1, 0, 0, 1]
    spikes, _ = conv_compute(1, 1, 1, 1, 1, 1, 2, 2, inputs, [1], [0] * 16, 1)
    assert spikes == [0, 0, 0, 0, 0, 1, 0, 0, 0, 0, 1, 0, 0, 0, 0, 0]


def test_conv_compute_adds_previous_potential():
    rng = random.Random(4)
    r = s = 2
    c, k, x, y = 1, 2, 3, 3
    inputs = _spikes(rng, x * y * c)
    filters = _weights(rng, k * r * s * c)
    zero = [0] * (2 * 2 * k)
    previous = [rng.randrange(1, 5) for _ in zero]
    _, base = conv_compute(r, s, c, k, 0, 1, x, y, inputs, filters, zero, 10**6)
    _, carried = conv_compute(r, s, c, k, 0, 1, x, y, inputs, filters, previous, 10**6)
    assert [b - a for a, b in zip(base, carried)] == previous


def test_conv_and_pooling_matches_conv_then_pooling():
    rng = random.Random(5)
    r = s = 2
    c, k, x, y = 2, 3, 5, 5
    inputs = _spikes(rng, x * y * c)
    filters = _weights(rng, k * r * s * c)
    state = [0] * (4 * 4 * k)
    spikes, conv_state = conv_compute(r, s, c, k, 0, 1, x, y, inputs, filters, state, 1)
    pooled, pool_state = conv_and_pooling_compute(r, s, c, k, 0, 1, x, y, inputs, filters, state, 1)
    assert pooled == pooling_compute(4, 4, k, 2, 2, 2, spikes)
    assert pool_state == conv_state


def test_matrix_multiply_identity_weights():
    inputs = [1, 0, 1, 0, 1, 1]
    identity = [1, 0, 0, 0, 1, 0, 0, 0, 1]
    spikes, state = matrix_multiply(2, 3, 3, inputs, identity, [0] * 6, 1, 0)
    assert spikes == inputs
    assert state == [0] * 6
    rows_spikes, _ = matrix_multiply_rows(2, 3, 3, inputs, identity, [0] * 6, 1, 0, 2)
    assert rows_spikes == spikes


def test_matrix_multiply_tile_offset_leaves_other_tiles():
    rng = random.Random(6)
    m, k, n = 2, 3, 2
    inputs = _spikes(rng, m * k)
    weights = _weights(rng, k * n)
    state = [rng.randrange(3) for _ in range(2 * m * n)]
    spikes, new_state = matrix_multiply(m, k, n, inputs, weights, state, 100, 1)
    assert new_state[: m * n] == state[: m * n]
    assert spikes == [0] * (m * n)
    assert new_state != state or weights == [0] * (k * n)


def test_matrix_multiply_rows_ignores_previous_potential():
    rng = random.Random(7)
    m, k, n = 2, 2, 2
    inputs = _spikes(rng, m * k)
    weights = _weights(rng, k * n)
    a = matrix_multiply_rows(m, k, n, inputs, weights, [0] * 8, 3, 1, 2)
    b = matrix_multiply_rows(m, k, n, inputs, weights, [0, 0, 0, 0, 9, 9, 9, 9], 3, 1, 2)
    assert a == b
    assert a[1][:4] == [0] * 4


def test_pool2x2_matches_pooling_compute_per_channel():
    rng = random.Random(8)
    channels, y_ = 3, 6
    sram = _spikes(rng, channels * 2 * y_)
    out = pool2x2(sram, y_, channels)
    expected = []
    for ch in range(channels):
        block = sram[ch * 2 * y_:(ch + 1) * 2 * y_]
        expected.extend(pooling_compute(2, y_, 1, 2, 2, 2, block))
    assert out == expected


def test_pool2x2_all_zero():
    assert pool2x2([0] * 16, 4, 2) == [0, 0, 0, 0]


def test_short_filters_raise():
    with pytest.raises(ValueError):
        conv_compute(2, 2, 1, 1, 0, 1, 3, 3, [0] * 9, [1], [0] * 4, 1)


def test_zero_stride_raises():
    with pytest.raises(ValueError):
        pooling_compute(4, 4, 1, 2, 2, 0, [0] * 16)


def test_pooling_window_too_large_raises():
    with pytest.raises(ValueError):
        pooling_compute(2, 2, 1, 3, 3, 1, [0] * 4)