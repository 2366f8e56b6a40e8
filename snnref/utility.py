"""Small helpers shared across the package: numeric checks, enum names, indentation."""

from __future__ import annotations

import re
from enum import Enum, auto

__all__ = [
    "AdderConfig",
    "FwLinkDirection",
    "Dataflow",
    "PoolingType",
    "GenerationType",
    "is_num",
    "first_number",
    "is_power_of_2",
    "next_power_of_2",
    "to_lower",
    "ind",
    "adder_config_name",
    "fwlink_direction_name",
    "dataflow_from_name",
    "dataflow_name",
    "pooling_type_from_name",
]


class AdderConfig(Enum):
    """Configuration modes of an adder switch."""

    ADD_2_1 = auto()
    ADD_3_1 = auto()
    ADD_1_1_PLUS_FW_1_1 = auto()
    FW_2_2 = auto()
    NO_MODE = auto()
    FOLD = auto()


class FwLinkDirection(Enum):
    """Direction of a forwarding link."""

    SEND = auto()
    RECEIVE = auto()
    NOT_CONFIGURED = auto()


class Dataflow(Enum):
    """Dataflows supported by the memory controllers."""

    CNN_DATAFLOW = auto()
    MK_STA_KN_STR = auto()
    MK_STR_KN_STA = auto()
    SPARSE_DENSE_DATAFLOW = auto()


class PoolingType(Enum):
    """Pooling operations."""

    MAXPOOLING = auto()
    AVERAGEPOOLING = auto()


class GenerationType(Enum):
    """Order in which a matrix is traversed when compressing it."""

    GEN_BY_ROWS = auto()
    GEN_BY_COLS = auto()


_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_ASCII_LOWER = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"
)


def is_num(text: str) -> bool:
    """Return True if the whole of ``text`` (ignoring surrounding blanks) is a decimal number."""
    return _NUMBER.fullmatch(text.strip()) is not None


def first_number(text: str) -> str:
    """Return the first whitespace-separated token that is a number.

    If no token is numeric the last token is returned, or an empty string
    when there are no tokens at all.
    """
    tokens = text.split()
    for token in tokens:
        if is_num(token):
            return token
    return tokens[-1] if tokens else ""


def is_power_of_2(x: int) -> bool:
    """Return True if ``x`` is a positive power of two."""
    return x > 0 and not (x & (x - 1))


def next_power_of_2(x: int) -> int:
    """Return the smallest power of two that is not less than ``x`` (0 for 0)."""
    if x < 0:
        raise ValueError(f"no power of two for negative value {x}")
    if x == 0:
        return 0
    return 1 << (x - 1).bit_length()


def to_lower(text: str) -> str:
    """Lower-case the ASCII letters of ``text``, leaving everything else alone."""
    return text.translate(_ASCII_LOWER)


def ind(indent: int) -> str:
    """Return a string of ``indent`` spaces."""
    return " " * max(indent, 0)


def _member(enum_cls, value):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise ValueError(f"{value!r} is not a valid {enum_cls.__name__}") from None


def adder_config_name(config: AdderConfig) -> str:
    """Return the name of an adder configuration."""
    return _member(AdderConfig, config).name


def fwlink_direction_name(direction: FwLinkDirection) -> str:
    """Return the name of a forwarding-link direction."""
    return _member(FwLinkDirection, direction).name


def dataflow_from_name(name: str) -> Dataflow:
    """Look up a dataflow by its exact name."""
    try:
        return Dataflow[name]
    except KeyError:
        raise ValueError(f"{name} Not found") from None


def dataflow_name(dataflow: Dataflow) -> str:
    """Return the name of a dataflow."""
    return _member(Dataflow, dataflow).name


def pooling_type_from_name(name: str) -> PoolingType:
    """Look up a pooling type by its exact name."""
    try:
        return PoolingType[name]
    except KeyError:
        raise ValueError(f"{name} Not found") from None