"""Health monitor logic: sensor drivers, pulse processing, GPS parsing and cloud message packaging."""

__version__ = "0.1.0"

__all__ = ["__version__"]