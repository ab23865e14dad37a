"""An asyncio actor framework with supervision trees and prioritised message ports."""

__version__ = "0.1.0"

__all__ = [
    "actor",
    "actor_cell",
    "actor_id",
    "concurrency",
    "errors",
    "messages",
    "monte_carlo",
    "ping_pong",
    "runtime",
    "supervision",
]