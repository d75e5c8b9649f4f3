"""Binary account layouts and state rules for an NFT auction manager."""

__version__ = "0.1.0"

__all__ = [
    "accounts",
    "auction_manager",
    "binary",
    "errors",
    "layout",
    "redemption",
    "safety_config",
    "store_ops",
    "tracker",
]