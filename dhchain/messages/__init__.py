"""Snapshot message types."""

from dhchain.messages.chain_state import ChainStateMessage

__all__ = ["ChainStateMessage"]
