"""
Pass Coordinator for dual-platform encoding.

Validates the design once, issues one set of scan tokens and encodes the
pass for every requested wallet. A failure on one platform is logged and
reported without stopping the others.
"""

import logging
from typing import Callable, Iterable, Optional

from cardpass.core.exceptions import CardPassError, EncodingError
from cardpass.domain.schemas import (
    CardDesign,
    Customer,
    Offer,
    PassBundle,
    ProgressSnapshot,
    WalletPlatform,
    coerce,
)
from cardpass.services.design_validation import validate_card_design
from cardpass.services.secure_tokens import issue_scan_tokens
from cardpass.services.wallets.apple import ApplePassEncoder, create_apple_pass_encoder
from cardpass.services.wallets.google import GooglePassEncoder, create_google_pass_encoder

logger = logging.getLogger(__name__)

PassEncoder = ApplePassEncoder | GooglePassEncoder

ENCODER_FACTORIES: dict[WalletPlatform, Callable[[], PassEncoder]] = {
    WalletPlatform.APPLE: create_apple_pass_encoder,
    WalletPlatform.GOOGLE: create_google_pass_encoder,
}


def get_encoder(platform: WalletPlatform | str) -> PassEncoder:
    """Create the encoder for a platform from settings."""
    return ENCODER_FACTORIES[WalletPlatform(platform)]()


class PassCoordinator:
    """
    Coordinates pass encoding across Apple and Google Wallet.

    Encoders are created lazily from settings unless injected.
    """

    def __init__(
        self,
        apple: Optional[ApplePassEncoder] = None,
        google: Optional[GooglePassEncoder] = None,
    ):
        self._encoders: dict[WalletPlatform, PassEncoder] = {}
        if apple is not None:
            self._encoders[WalletPlatform.APPLE] = apple
        if google is not None:
            self._encoders[WalletPlatform.GOOGLE] = google

    def encoder(self, platform: WalletPlatform) -> PassEncoder:
        """Lazy-initialize the encoder for a platform."""
        if platform not in self._encoders:
            self._encoders[platform] = get_encoder(platform)
        return self._encoders[platform]

    def encode_all(
        self,
        design: CardDesign | dict,
        offer: Offer | dict,
        customer: Customer | dict,
        progress: ProgressSnapshot | dict,
        platforms: Optional[Iterable[WalletPlatform | str]] = None,
        locale: Optional[str] = None,
    ) -> PassBundle:
        """
        Encode one customer's pass for each platform.

        Args:
            platforms: Platforms to encode, all by default
            locale: System string locale passed to every encoder

        Returns:
            PassBundle with the validation result, encoded passes and
            per-platform errors

        Raises:
            EncodingError: if the design has validation errors
            FormatError: if the customer ID is malformed
        """
        design = coerce(CardDesign, design)
        offer = coerce(Offer, offer)
        customer = coerce(Customer, customer)
        progress = coerce(ProgressSnapshot, progress)

        validation = validate_card_design(design)
        if validation.has_errors:
            logger.warning(
                f"[PassCoordinator] Design for offer {offer.offer_id} failed validation: "
                f"{validation.errors}"
            )
            raise EncodingError(
                "Card design has validation errors", errors=list(validation.errors)
            )

        # One token set per encoding, shared by every platform
        tokens = issue_scan_tokens(customer.customer_id, offer.business_id, offer.offer_id)

        targets = [WalletPlatform(p) for p in platforms] if platforms is not None else list(WalletPlatform)
        bundle = PassBundle(validation=validation)

        for platform in targets:
            try:
                bundle.passes[platform] = self.encoder(platform).encode(
                    design, offer, customer, progress, tokens=tokens, locale=locale
                )
            except (CardPassError, ValueError) as e:
                logger.error(f"[PassCoordinator] {platform.value} encoding error: {e}")
                bundle.errors[platform] = str(e)

        logger.info(
            f"[PassCoordinator] Encoded {len(bundle.passes)}/{len(targets)} passes "
            f"for customer {customer.customer_id}"
        )
        return bundle


def create_pass_coordinator() -> PassCoordinator:
    """Factory function to create PassCoordinator."""
    return PassCoordinator()
