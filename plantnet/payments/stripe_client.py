"""
Adaptateur Stripe: centralise les appels et la configuration Stripe Checkout.
"""
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, Optional
import logging

import stripe

from plantnet.config import (
    STRIPE_SECRET_KEY,
    STRIPE_CURRENCY,
    CLIENT_DOMAIN,
    CHECKOUT_SUCCESS_PATH,
    CHECKOUT_CANCEL_PATH,
)
from plantnet.errors import GatewayError, InvalidPrice

logger = logging.getLogger(__name__)


def require_stripe() -> stripe:
    """
    Prépare et retourne le module stripe prêt à l’emploi.
    - Configure stripe.api_key via STRIPE_SECRET_KEY si disponible.
    - En absence de clé, les appels Stripe échouent côté SDK (GatewayError).
    """
    if STRIPE_SECRET_KEY:
        stripe.api_key = STRIPE_SECRET_KEY
    return stripe


def to_minor_units(price: Any) -> int:
    """
    Convertit un prix (unités) en centimes: round(price * 100), arrondi half-up
    sur la valeur décimale (19.99 -> 1999).
    Soulève InvalidPrice si le prix n'est pas numérique, non fini ou <= 0.
    """
    if isinstance(price, bool) or price is None:
        raise InvalidPrice()
    try:
        value = Decimal(str(price).strip())
    except (InvalidOperation, ValueError):
        raise InvalidPrice()
    if not value.is_finite() or value <= 0:
        raise InvalidPrice()
    amount = int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    if amount <= 0:
        raise InvalidPrice()
    return amount


def _as_dict(obj: Any) -> Dict[str, Any]:
    if obj is None:
        return {}
    if isinstance(obj, dict):
        return dict(obj)
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return dict(obj)


@dataclass
class CheckoutSession:
    id: str
    payment_status: str
    payment_intent: Optional[str]
    customer_email: Optional[str]
    amount_total: int
    metadata: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_stripe(cls, session: Any) -> "CheckoutSession":
        data = _as_dict(session)
        details = _as_dict(data.get("customer_details"))
        intent = data.get("payment_intent")
        if intent is not None and not isinstance(intent, str):
            # payment_intent éventuellement "expand"é
            intent = _as_dict(intent).get("id")
        return cls(
            id=data.get("id") or "",
            payment_status=data.get("payment_status") or "",
            payment_intent=intent,
            customer_email=data.get("customer_email") or details.get("email"),
            amount_total=int(data.get("amount_total") or 0),
            metadata={k: str(v) for k, v in _as_dict(data.get("metadata")).items()},
        )


class StripeGateway:
    """
    Passerelle de paiement: crée et relit les sessions Stripe Checkout.
    success_url / cancel_url sont construites depuis CLIENT_DOMAIN.
    """

    def __init__(
        self,
        client_domain: str = CLIENT_DOMAIN,
        currency: str = STRIPE_CURRENCY,
        success_path: str = CHECKOUT_SUCCESS_PATH,
        cancel_path: str = CHECKOUT_CANCEL_PATH,
    ):
        self.client_domain = client_domain.rstrip("/")
        self.currency = currency
        self.success_path = success_path
        self.cancel_path = cancel_path

    def _urls(self, plant_id: str) -> tuple[str, str]:
        sep = "&" if "?" in self.success_path else "?"
        success_url = f"{self.client_domain}{self.success_path}{sep}session_id={{CHECKOUT_SESSION_ID}}"
        cancel_url = f"{self.client_domain}{self.cancel_path.replace('{plantId}', plant_id)}"
        return success_url, cancel_url

    def create_session(self, price_info: Dict[str, Any]) -> Dict[str, str]:
        """
        Crée une session Checkout pour un article unique.
        - price_info: {price, name, description?, image?, customer_email?, metadata{plantId, ...}}
        Retour: {"url": ..., "id": ...}
        """
        unit_amount = to_minor_units(price_info.get("price"))
        metadata = {k: str(v) for k, v in (price_info.get("metadata") or {}).items() if v is not None}
        product_data: Dict[str, Any] = {"name": price_info.get("name") or "Plant"}
        if price_info.get("description"):
            product_data["description"] = price_info["description"]
        if price_info.get("image"):
            product_data["images"] = [price_info["image"]]
        success_url, cancel_url = self._urls(metadata.get("plantId", ""))

        params: Dict[str, Any] = {
            "line_items": [
                {
                    "price_data": {
                        "currency": self.currency,
                        "product_data": product_data,
                        "unit_amount": unit_amount,
                    },
                    "quantity": 1,
                }
            ],
            "mode": "payment",
            "metadata": metadata,
            "success_url": success_url,
            "cancel_url": cancel_url,
        }
        if price_info.get("customer_email"):
            params["customer_email"] = price_info["customer_email"]

        require_stripe()
        try:
            session = stripe.checkout.Session.create(**params)
        except stripe.StripeError as e:
            logger.exception("stripe_client.create_session failed plantId=%s", metadata.get("plantId"))
            raise GatewayError("Failed to create checkout session", error=str(e))
        data = _as_dict(session)
        return {"url": data.get("url"), "id": data.get("id")}

    def retrieve_session(self, session_id: str) -> CheckoutSession:
        """
        Relit une session Checkout (statut, payment_intent, email acheteur, montant, metadata).
        Soulève GatewayError si Stripe ne connaît pas la session.
        """
        require_stripe()
        try:
            session = stripe.checkout.Session.retrieve(session_id)
        except stripe.StripeError as e:
            logger.warning("stripe_client.retrieve_session failed session_id=%s: %s", session_id, e)
            raise GatewayError("Failed to retrieve checkout session", error=str(e))
        return CheckoutSession.from_stripe(session)
