"""techind: technical indicator calculation engine for OHLCV bar series."""

__version__ = "0.1.0"
