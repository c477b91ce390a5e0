"""Personal news reader: a key-hiding proxy plus a terminal feed client."""

__all__ = ["config", "models", "server", "feed", "detail"]
