"""Payment selection, a signer interface and retry helpers for x402 payments."""

__version__ = "0.1.0"
__all__ = ["retry", "selector", "signer"]