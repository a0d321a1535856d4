"""Astra build pipeline.

Prepares registry data with the vanilla server's data generator and compiles
the Astra server executable.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
