"""Reference models, topology reading, tiles and sparse-matrix helpers for an SNN accelerator simulator."""

__version__ = "0.1.0"

__all__ = ["utility", "tile", "topology", "sparse", "reference", "layouts"]