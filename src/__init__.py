"""Pure electoral math shared by the apportionment and forecast engines."""

from src import formulas

__all__ = ["formulas"]
