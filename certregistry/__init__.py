"""Certificate registry gateway: IPFS-backed PDF registration and wallet roles."""

__version__ = "0.1.0"
