"""Network topology files: one layer per CSV line after a header line."""

from __future__ import annotations

from dataclasses import dataclass
from os import PathLike
from pathlib import Path

__all__ = ["LayerTopology", "parse_layer_line", "read_layers", "model_name"]

_NUMERIC_FIELDS = 13


@dataclass
class LayerTopology:
    """Parameters of one network layer as listed in a topology file."""

    type: str
    r: int
    s: int
    c: int
    k: int
    x: int
    y: int
    p: int
    stride: int
    pooling_size: int
    pooling_stride: int
    input_neuron: int
    output_neuron: int
    batch: int


def parse_layer_line(line: str) -> LayerTopology:
    """Parse one CSV line: the layer type followed by thirteen integers."""
    layer_type, sep, rest = line.rstrip("\r\n").partition(",")
    if not sep:
        raise ValueError(f"malformed layer line: {line!r}")
    fields = rest.split(",")
    if len(fields) < _NUMERIC_FIELDS:
        raise ValueError(
            f"expected {_NUMERIC_FIELDS} numeric fields, got {len(fields)}: {line!r}"
        )
    try:
        values = [int(field.strip()) for field in fields[:_NUMERIC_FIELDS]]
    except ValueError:
        raise ValueError(f"non-integer field in layer line: {line!r}") from None
    return LayerTopology(layer_type, *values)


def read_layers(path: str | PathLike[str]) -> list[LayerTopology]:
    """Read every layer of a topology file, skipping its header line and blank lines."""
    with open(path, encoding="utf-8") as handle:
        next(handle, None)
        return [parse_layer_line(line) for line in handle if line.strip()]


def model_name(path: str | PathLike[str]) -> str:
    """Return the file name of ``path`` without its directory and extension."""
    return Path(path).stem