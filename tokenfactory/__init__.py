"""Token factory: denoms, messages, keeper, queries, hooks and genesis handling."""

__version__ = "0.1.0"