"""code-excerpt: budget-constrained source code excerpts for chat messages."""

__version__ = "0.1.0"
