"""Reference computations for spiking layers.

Every function works on flat integer sequences and never modifies its
arguments. Layers that integrate and fire return the output spikes together
with the updated membrane potentials. A neuron fires when its potential
reaches the threshold, and its potential then resets to zero.
"""

from __future__ import annotations

from collections.abc import Sequence
from itertools import product

__all__ = [
    "sequential_layer",
    "matrix_multiply",
    "matrix_multiply_rows",
    "pooling_compute",
    "conv_and_pooling_compute",
    "conv_compute",
    "pool2x2",
]


def _check_len(seq: Sequence, size: int, name: str) -> None:
    if len(seq) < size:
        raise ValueError(f"{name} holds {len(seq)} values, at least {size} are needed")


def _check_stride(stride: int) -> None:
    if stride <= 0:
        raise ValueError(f"stride must be positive, got {stride}")


def _out_dim(size: int, window: int, stride: int, name: str) -> int:
    if window > size:
        raise ValueError(f"window {window} is larger than the {name} dimension {size}")
    return (size - window) // stride + 1


def _fire(total: int, v_th: int) -> tuple[int, int]:
    """Return (spike, new potential) for an accumulated potential."""
    return (1, 0) if total >= v_th else (0, total)


def _pad_hwc(inputs: Sequence[int], x: int, y: int, c: int, p: int) -> list[int]:
    padded_y = y + 2 * p
    padded = [0] * ((x + 2 * p) * padded_y * c)
    for i, j in product(range(x), range(y)):
        dst = ((i + p) * padded_y + j + p) * c
        src = (i * y + j) * c
        padded[dst:dst + c] = list(inputs[src:src + c])
    return padded


def _conv_hwc(r, s, c, k, p, strides, x, y, inputs, filters, neuron_state, v_th):
    """Convolve an (X, Y, C) input with (K, R, S, C) filters; outputs are (outX, outY, K)."""
    _check_stride(strides)
    if p < 0:
        raise ValueError(f"padding must not be negative, got {p}")
    out_x = _out_dim(x + 2 * p, r, strides, "row")
    out_y = _out_dim(y + 2 * p, s, strides, "column")
    _check_len(inputs, x * y * c, "inputs")
    _check_len(filters, k * r * s * c, "filters")
    _check_len(neuron_state, out_x * out_y * k, "neuron_state")

    padded = _pad_hwc(inputs, x, y, c, p)
    padded_y = y + 2 * p
    state = list(neuron_state)
    spikes = [0] * (out_x * out_y * k)
    for i, j, ki in product(range(out_x), range(out_y), range(k)):
        total = 0
        for ri, si, ci in product(range(r), range(s), range(c)):
            in_row = i * strides + ri
            in_col = j * strides + si
            total += (
                padded[(in_row * padded_y + in_col) * c + ci]
                * filters[((ri * s + si) * c + ci) + ki * (r * s * c)]
            )
        idx = (i * out_y + j) * k + ki
        spikes[idx], state[idx] = _fire(total + state[idx], v_th)
    return spikes, state, out_x, out_y


def sequential_layer(
    r, s, c, k, g, n, x, y, strides, inputs, filters, neuron_state, v_th, timestamps, pooling_enabled
):
    """Run a convolution over several time steps on channel-last data.

    ``c`` and ``k`` are totals over the ``g`` groups. The input of time
    step ``t`` starts at ``t * x * y * (c // g)``. Potentials carry over
    between steps. With pooling enabled, spikes are pooled pairwise over
    output positions and channels, writing a quarter-sized block per step.
    Returns ``(outputs, neuron_state)``.
    """
    _check_stride(strides)
    if g <= 0:
        raise ValueError(f"number of groups must be positive, got {g}")
    if r > x or s > y:
        raise ValueError("filter is larger than the input")
    k_per = k // g
    c_per = c // g
    out_x = (x - r + strides) // strides
    out_y = (y - s + strides) // strides
    output_size = g * k_per * out_x * out_y
    size_oy = out_y * k_per * g
    size_y = y * g * c_per
    filter_size = r * s * c_per

    _check_len(neuron_state, output_size, "neuron_state")
    _check_len(filters, g * k_per * filter_size, "filters")
    state = list(neuron_state)
    written: dict[int, int] = {}

    for t in range(timestamps):
        base = t * x * y * c_per
        for _, gi, ki, oxi, oyi in product(
            range(n), range(g), range(k_per), range(out_x), range(out_y)
        ):
            total = 0
            for ci, ri, si in product(range(c_per), range(r), range(s)):
                total += (
                    inputs[
                        base + oxi * strides * size_y + oyi * strides * c_per * g
                        + ri * size_y + si * c_per * g + ci
                    ]
                    * filters[gi * k_per * filter_size + ki * filter_size + ri * s * c_per + si * c_per + ci]
                )
            state[oxi * size_oy + oyi * k_per * g + ki] += total

        step = [0] * output_size
        for i in range(output_size):
            step[i], state[i] = _fire(state[i], v_th) if state[i] >= v_th else (0, state[i])

        if pooling_enabled:
            offset = (t * output_size) // 4
            for i in range(1, out_x * out_y, 2):
                for j in range(1, k_per, 2):
                    spike_sum = (
                        step[i * k_per + j]
                        + step[i * k_per + j - 1]
                        + step[i * k_per + j - k_per]
                        + step[i * k_per + j - k_per - 1]
                    )
                    written[offset + ((i // 2) * k_per) // 2 + j // 2] = 1 if spike_sum > 0 else 0
        else:
            for i, spike in enumerate(step):
                written[t * output_size + i] = spike

    length = timestamps * output_size // 4 if pooling_enabled else timestamps * output_size
    if written:
        length = max(length, max(written) + 1)
    outputs = [0] * length
    for idx, spike in written.items():
        outputs[idx] = spike
    return outputs, state


def _matmul(m, k, n, inputs, weights, v_th, state, offset, accumulate):
    _check_len(inputs, m * k, "inputs")
    _check_len(weights, k * n, "weights")
    _check_len(state, offset + m * n, "neuron_state")
    spikes = [0] * (m * n)
    for i, j in product(range(m), range(n)):
        total = sum(inputs[i * k + kk] * weights[kk + j * k] for kk in range(k))
        idx = offset + i * n + j
        if accumulate:
            total += state[idx]
        spikes[i * n + j], state[idx] = _fire(total, v_th)
    return spikes, state


def matrix_multiply(m, k, n, inputs, weights, neuron_state, v_th, num_tile):
    """Multiply an M x K input by K x N weights (stored column by column) and fire.

    The tile's potentials start at ``num_tile * m * n`` in ``neuron_state``
    and are added to the products. Returns ``(spikes, neuron_state)`` where
    ``spikes`` holds the M x N block of this tile.
    """
    return _matmul(m, k, n, inputs, weights, v_th, list(neuron_state), num_tile * m * n, True)


def matrix_multiply_rows(m, k, n, inputs, weights, neuron_state, v_th, num_tile, rows):
    """Like :func:`matrix_multiply` without carrying potentials over.

    The tile starts at ``num_tile * rows * n``; earlier potentials there are
    overwritten, not accumulated.
    """
    return _matmul(m, k, n, inputs, weights, v_th, list(neuron_state), num_tile * rows * n, False)


def pooling_compute(x, y, c, r, s, stride, inputs):
    """Max-pool an (X, Y, C) spike map with an R x S window; outputs are (outX, outY, C)."""
    _check_stride(stride)
    out_x = _out_dim(x, r, stride, "row")
    out_y = _out_dim(y, s, stride, "column")
    _check_len(inputs, x * y * c, "inputs")
    output = [0] * (out_x * out_y * c)
    for i, j, ch in product(range(out_x), range(out_y), range(c)):
        window = (
            inputs[((i * stride + ri) * y + j * stride + si) * c + ch]
            for ri, si in product(range(r), range(s))
        )
        output[(i * out_y + j) * c + ch] = max(0, *window)
    return output


def conv_compute(r, s, c, k, p, strides, x, y, inputs, filters, neuron_state, v_th):
    """Padded convolution with integrate-and-fire on channel-last data.

    Returns ``(spikes, neuron_state)``, both laid out as (outX, outY, K).
    """
    spikes, state, _, _ = _conv_hwc(r, s, c, k, p, strides, x, y, inputs, filters, neuron_state, v_th)
    return spikes, state


def conv_and_pooling_compute(r, s, c, k, p, strides, x, y, inputs, filters, neuron_state, v_th):
    """:func:`conv_compute` followed by a 2 x 2, stride-2 OR pooling of the spikes.

    Returns ``(pooled_spikes, neuron_state)``.
    """
    spikes, state, out_x, out_y = _conv_hwc(
        r, s, c, k, p, strides, x, y, inputs, filters, neuron_state, v_th
    )
    pooled_x, pooled_y = out_x // 2, out_y // 2
    pooled = [0] * (pooled_x * pooled_y * k)
    for i, j, ki in product(range(pooled_x), range(pooled_y), range(k)):
        i0, j0 = i * 2, j * 2
        pooled[(i * pooled_y + j) * k + ki] = (
            spikes[(i0 * out_y + j0) * k + ki]
            | spikes[((i0 + 1) * out_y + j0) * k + ki]
            | spikes[(i0 * out_y + j0 + 1) * k + ki]
            | spikes[((i0 + 1) * out_y + j0 + 1) * k + ki]
        )
    return pooled, state


def pool2x2(sram, y_, channels):
    """Pool two rows of ``y_`` spikes per channel into ``y_ // 2`` outputs per channel."""
    _check_len(sram, channels * 2 * y_, "sram")
    output = [0] * ((channels * y_) // 2)
    for i, j in product(range(channels), range(y_ // 2)):
        addr = i * y_ * 2 + j * 2
        total = sram[addr] + sram[addr + 1] + sram[addr + y_] + sram[addr + y_ + 1]
        output[(i * y_) // 2 + j] = 1 if total >= 1 else 0
    return output