"""Package version — single source of truth for packaging and the X-Shrike-SDK-Version header."""

__version__ = "1.0.0"
