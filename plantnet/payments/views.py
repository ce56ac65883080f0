import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends

from plantnet.dependencies import get_order_repository, get_payment_gateway, get_plant_repository
from plantnet.errors import ValidationError
from plantnet.orders.repository import OrderRepository
from plantnet.payments import service as payments_service
from plantnet.payments.stripe_client import StripeGateway
from plantnet.plants.repository import PlantRepository
from plantnet.utils.rate_limit import optional_rate_limit
from plantnet.utils.responses import success
from plantnet.utils.security import require_user

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Payments API"])

# module plantnet.payments.views
@router.post("/create-checkout-session", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
def create_checkout_session(
    body: Optional[Dict[str, Any]] = Body(None),
    user: Dict[str, Any] = Depends(require_user),
    plants: PlantRepository = Depends(get_plant_repository),
    gateway: StripeGateway = Depends(get_payment_gateway),
):
    """
    Crée une session Checkout Stripe pour une plante.
    - Entrée JSON: {plantId, name?, description?, image?, customer?: {email, ...}}
    - Le montant facturé vient du prix de la plante en base
    - L'email acheteur par défaut est celui du jeton vérifié
    - Erreurs: 400 payload ou prix en base invalide, 404 plante introuvable, 409 rupture de stock
    """
    if not body:
        raise ValidationError("Checkout data required")
    payload = dict(body)
    customer = payload.get("customer") if isinstance(payload.get("customer"), dict) else {}
    payload["customer"] = {**customer, "email": customer.get("email") or user.get("email")}
    session = payments_service.start_checkout(payload, plants=plants, gateway=gateway)
    return success("Checkout session created", session, status_code=201)


@router.post("/payment-success")
def payment_success(
    body: Optional[Dict[str, Any]] = Body(None),
    user: Dict[str, Any] = Depends(require_user),
    plants: PlantRepository = Depends(get_plant_repository),
    orders: OrderRepository = Depends(get_order_repository),
    gateway: StripeGateway = Depends(get_payment_gateway),
):
    """
    Confirmation synchrone (déclenchée par le client après la page Stripe).
    - Entrée JSON: {"sessionId": "cs_..."}
    - 201 + commande créée; 400 paiement non confirmé; 404 plante; 409 commande déjà créée
    """
    session_id = str((body or {}).get("sessionId") or "").strip()
    if not session_id:
        raise ValidationError("sessionId required")
    result = payments_service.reconcile_checkout(session_id, plants=plants, orders=orders, gateway=gateway)
    logger.info("payments.payment_success session=%s by=%s", session_id, user.get("email"))
    return success("Order created", result, status_code=201)
