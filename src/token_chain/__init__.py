"""token-chain: tier-chain validation and reviewed external sync for design tokens."""

__version__ = "0.1.0"
