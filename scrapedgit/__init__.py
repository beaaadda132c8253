"""Conversational query accumulation and product ranking for marketplace price comparison."""

__version__ = "0.1.0"
