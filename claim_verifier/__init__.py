"""Claim verification pipeline: extraction, reasoning, trust analysis and explanation."""

__version__ = "0.1.0"
