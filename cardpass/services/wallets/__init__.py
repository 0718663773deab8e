"""
Wallet pass encoders for Apple and Google Wallet.

This package provides:
- ApplePassEncoder: Builds the Apple pass.json model
- GooglePassEncoder: Builds the Google loyalty class/object pair
- PassCoordinator: Validates once and encodes for both platforms
- build_wallet_preview: Draft-friendly preview for the design editor
"""

from .apple import ApplePassEncoder, create_apple_pass_encoder
from .google import GooglePassEncoder, create_google_pass_encoder
from .coordinator import PassCoordinator, create_pass_coordinator, get_encoder
from .preview import barcode_placeholder_bars, build_wallet_preview

__all__ = [
    "ApplePassEncoder",
    "create_apple_pass_encoder",
    "GooglePassEncoder",
    "create_google_pass_encoder",
    "PassCoordinator",
    "create_pass_coordinator",
    "get_encoder",
    "barcode_placeholder_bars",
    "build_wallet_preview",
]
