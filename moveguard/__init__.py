"""Static safety checks for Move modules described as Python objects, aimed at the Sui object model."""

__version__ = "0.1.0"