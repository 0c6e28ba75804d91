"""Track deposits, redeemable value and earnings of yield-bearing vault positions."""

__version__ = "0.1.0"
