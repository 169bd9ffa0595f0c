"""Ruggy: a character chat agent that swaps, sends and reports tokens on Berachain."""

__version__ = "0.1.0"
