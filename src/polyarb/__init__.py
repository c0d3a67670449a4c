"""polyarb - prediction-market probability consistency scanner."""

__version__ = "0.1.0"
