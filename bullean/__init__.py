"""Candle streaming, indicators, labelled datasets and strategies for trading."""

__version__ = "0.1.0"