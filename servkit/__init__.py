"""In-memory server building blocks: skip list, leaderboard, topic queue, pub/sub and utilities."""

__version__ = "0.1.0"