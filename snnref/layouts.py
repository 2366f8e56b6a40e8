"""Convolution reference computations for several memory layouts.

Three layouts are supported:

* CHW: inputs (C, X, Y), filters (K, C, R, S), outputs (K, outX, outY).
* HWC: inputs (X, Y, C), filters (K, R, S, C), outputs (outX, outY, K).
* HCW: inputs (X, C, Y), filters (K, R, C, S), outputs (outX, K, outY).

Every function takes flat integer sequences and leaves them unchanged. It
returns the output spikes and the updated membrane potentials. A neuron
fires when its accumulated potential reaches ``v_th``, and its potential
then resets to zero.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from itertools import product

from .reference import conv_and_pooling_compute, conv_compute

__all__ = [
    "conv_compute_chw",
    "conv_compute_hwc",
    "conv_compute_hcw",
    "conv_and_pooling_compute_chw",
    "conv_and_pooling_compute_hwc",
    "conv_and_pooling_compute_hcw",
]


@dataclass(frozen=True)
class _Layout:
    """Index functions that place an element in a flat buffer."""

    input_index: Callable[[int, int, int, int, int, int], int]  # (i, j, ch, x, y, c)
    filter_index: Callable[[int, int, int, int, int, int, int], int]  # (k, r, s, c, R, S, C)
    output_index: Callable[[int, int, int, int, int, int], int]  # (i, j, k, X, Y, K)


_CHW = _Layout(
    input_index=lambda i, j, ch, x, y, c: ch * x * y + i * y + j,
    filter_index=lambda ki, ri, si, ci, r, s, c: ki * c * r * s + ci * r * s + ri * s + si,
    output_index=lambda i, j, ki, ox, oy, k: ki * ox * oy + i * oy + j,
)

_HCW = _Layout(
    input_index=lambda i, j, ch, x, y, c: (i * c + ch) * y + j,
    filter_index=lambda ki, ri, si, ci, r, s, c: ki * r * c * s + ri * c * s + ci * s + si,
    output_index=lambda i, j, ki, ox, oy, k: (i * k + ki) * oy + j,
)


def _check_len(seq: Sequence, size: int, name: str) -> None:
    if len(seq) < size:
        raise ValueError(f"{name} holds {len(seq)} values, at least {size} are needed")


def _out_dim(size: int, window: int, stride: int, name: str) -> int:
    if window > size:
        raise ValueError(f"window {window} is larger than the {name} dimension {size}")
    return (size - window) // stride + 1


def _conv(layout: _Layout, r, s, c, k, p, strides, x, y, inputs, filters, neuron_state, v_th):
    if strides <= 0:
        raise ValueError(f"stride must be positive, got {strides}")
    if p < 0:
        raise ValueError(f"padding must not be negative, got {p}")
    out_x = _out_dim(x + 2 * p, r, strides, "row")
    out_y = _out_dim(y + 2 * p, s, strides, "column")
    _check_len(inputs, x * y * c, "inputs")
    _check_len(filters, k * r * s * c, "filters")
    _check_len(neuron_state, out_x * out_y * k, "neuron_state")

    state = list(neuron_state)
    spikes = [0] * (out_x * out_y * k)
    for i, j, ki in product(range(out_x), range(out_y), range(k)):
        total = 0
        for ri, si in product(range(r), range(s)):
            row = i * strides + ri - p
            col = j * strides + si - p
            if not (0 <= row < x and 0 <= col < y):
                continue  # padding contributes nothing
            for ci in range(c):
                total += (
                    inputs[layout.input_index(row, col, ci, x, y, c)]
                    * filters[layout.filter_index(ki, ri, si, ci, r, s, c)]
                )
        idx = layout.output_index(i, j, ki, out_x, out_y, k)
        total += state[idx]
        if total >= v_th:
            spikes[idx], state[idx] = 1, 0
        else:
            spikes[idx], state[idx] = 0, total
    return spikes, state, out_x, out_y


def _pool2x2(layout: _Layout, spikes: list[int], out_x: int, out_y: int, k: int) -> list[int]:
    pooled_x, pooled_y = out_x // 2, out_y // 2
    pooled = [0] * (pooled_x * pooled_y * k)
    for i, j, ki in product(range(pooled_x), range(pooled_y), range(k)):
        window = (
            spikes[layout.output_index(i * 2 + dx, j * 2 + dy, ki, out_x, out_y, k)]
            for dx, dy in product(range(2), range(2))
        )
        pooled[layout.output_index(i, j, ki, pooled_x, pooled_y, k)] = max(0, *window)
    return pooled


def conv_compute_chw(r, s, c, k, p, strides, x, y, inputs, filters, neuron_state, v_th):
    """Padded convolution with integrate-and-fire on channel-first data.

    Returns ``(spikes, neuron_state)``, both laid out as (K, outX, outY).
    """
    spikes, state, _, _ = _conv(_CHW, r, s, c, k, p, strides, x, y, inputs, filters, neuron_state, v_th)
    return spikes, state


def conv_compute_hwc(r, s, c, k, p, strides, x, y, inputs, filters, neuron_state, v_th):
    """Padded convolution with integrate-and-fire on channel-last data.

    Returns ``(spikes, neuron_state)``, both laid out as (outX, outY, K).
    """
    return conv_compute(r, s, c, k, p, strides, x, y, inputs, filters, neuron_state, v_th)


def conv_compute_hcw(r, s, c, k, p, strides, x, y, inputs, filters, neuron_state, v_th):
    """Padded convolution with integrate-and-fire on row, channel, column data.

    Returns ``(spikes, neuron_state)``, both laid out as (outX, K, outY).
    """
    spikes, state, _, _ = _conv(_HCW, r, s, c, k, p, strides, x, y, inputs, filters, neuron_state, v_th)
    return spikes, state


def conv_and_pooling_compute_chw(r, s, c, k, p, strides, x, y, inputs, filters, neuron_state, v_th):
    """:func:`conv_compute_chw` followed by 2 x 2, stride-2 max pooling.

    Returns ``(pooled_spikes, neuron_state)``; the pooled spikes are
    (K, outX // 2, outY // 2) and the potentials (K, outX, outY).
    """
    spikes, state, out_x, out_y = _conv(
        _CHW, r, s, c, k, p, strides, x, y, inputs, filters, neuron_state, v_th
    )
    return _pool2x2(_CHW, spikes, out_x, out_y, k), state


def conv_and_pooling_compute_hwc(r, s, c, k, p, strides, x, y, inputs, filters, neuron_state, v_th):
    """:func:`conv_compute_hwc` followed by 2 x 2, stride-2 max pooling.

    Returns ``(pooled_spikes, neuron_state)``; the pooled spikes are
    (outX // 2, outY // 2, K) and the potentials (outX, outY, K).
    """
    return conv_and_pooling_compute(r, s, c, k, p, strides, x, y, inputs, filters, neuron_state, v_th)


def conv_and_pooling_compute_hcw(r, s, c, k, p, strides, x, y, inputs, filters, neuron_state, v_th):
    """:func:`conv_compute_hcw` followed by 2 x 2, stride-2 max pooling.

    Returns ``(pooled_spikes, neuron_state)``; the pooled spikes are
    (outX // 2, K, outY // 2) and the potentials (outX, K, outY).
    """
    spikes, state, out_x, out_y = _conv(
        _HCW, r, s, c, k, p, strides, x, y, inputs, filters, neuron_state, v_th
    )
    return _pool2x2(_HCW, spikes, out_x, out_y, k), state