"""
Module 'payments' (feature-first): point d'entrée public.
Réunit client Stripe, metadata de session et cas d'usage checkout/réconciliation.
"""

from .metadata import plant_id_from_metadata
from .stripe_client import CheckoutSession, StripeGateway, require_stripe, to_minor_units
from .service import reconcile_checkout, start_checkout

__all__ = [
    # metadata
    "plant_id_from_metadata",
    # stripe
    "CheckoutSession",
    "StripeGateway",
    "require_stripe",
    "to_minor_units",
    # services
    "start_checkout",
    "reconcile_checkout",
]
