"""Tiles: how a layer is split across the multiplier switches."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TextIO

from .utility import ind

__all__ = ["Tile"]

_IND_SIZE = 4


@dataclass
class Tile:
    """A convolutional tile: the amount of each layer dimension mapped at once.

    ``vn_size`` is the number of multipliers in one virtual neuron and
    ``num_vns`` the number of virtual neurons mapped at the same time.
    With folding enabled one extra multiplier is reserved per virtual
    neuron to accumulate partial sums.
    """

    t_r: int
    t_s: int
    t_c: int
    t_k: int
    t_g: int
    t_n: int
    t_x_: int
    t_y_: int
    folding: bool = False
    vn_size: int = field(init=False)
    num_vns: int = field(init=False)

    def __post_init__(self) -> None:
        self.vn_size = self.t_r * self.t_s * self.t_c + (1 if self.folding else 0)
        self.num_vns = self.t_k * self.t_g * self.t_n * self.t_x_ * self.t_y_

    @classmethod
    def fully_connected(cls, t_m: int, t_n: int, t_k: int, folding: bool) -> "Tile":
        """Build a tile for a fully connected layer of ``t_m`` x ``t_k`` by ``t_k`` x ``t_n``.

        The virtual neuron spans ``t_k`` elements; the number of virtual
        neurons is counted as ``t_m * t_n * t_k``.
        """
        tile = cls(
            t_r=1,
            t_s=t_k,
            t_c=1,
            t_k=t_n,
            t_g=1,
            t_n=1,
            t_x_=t_m,
            t_y_=1,
            folding=folding,
        )
        tile.num_vns = t_k * tile.t_g * t_n * tile.t_x_ * tile.t_y_
        return tile

    def format_configuration(self, indent: int) -> str:
        """Return the tile configuration as a JSON-like block, without a trailing newline."""
        inner = ind(indent + _IND_SIZE)
        entries = [
            ("T_R", self.t_r),
            ("T_S", self.t_s),
            ("T_C", self.t_c),
            ("T_K", self.t_k),
            ("T_G", self.t_g),
            ("T_N", self.t_n),
            ("T_X_", self.t_x_),
            ("T_Y_", self.t_y_),
            ("VN_Size", self.vn_size),
            ("Num_VNs", self.num_vns),
        ]
        lines = [f'{ind(indent)}"TileConfiguration" : {{']
        lines.extend(f'{inner}"{name}" : {value},' for name, value in entries)
        lines.append(f'{inner}"folding_enabled" : {int(bool(self.folding))}')
        lines.append(f"{ind(indent)}}}")
        return "\n".join(lines)

    def print_configuration(self, out: TextIO, indent: int) -> None:
        """Write the tile configuration to ``out``."""
        out.write(self.format_configuration(indent))