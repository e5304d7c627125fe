"""Cell id numbering for adaptively refined three-dimensional Cartesian grids."""

__version__ = "0.1.0"
__all__ = ["mapping"]