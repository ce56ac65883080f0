"""
Cas d'usage 'payments': orchestre les repositories plants/orders et la passerelle Stripe.
- start_checkout: prépare la session Stripe pour une plante (stock vérifié avant paiement).
- reconcile_checkout: convertit une session payée en commande, une seule fois par transaction.
"""
from typing import Any, Dict
import logging

from plantnet.errors import (
    AppError,
    Conflict,
    InsufficientStock,
    InvalidIdentifier,
    NotFound,
    PaymentIncomplete,
    ValidationError,
)
from plantnet.orders.repository import OrderRepository
from plantnet.payments.metadata import plant_id_from_metadata
from plantnet.payments.stripe_client import StripeGateway
from plantnet.plants.repository import PlantRepository

logger = logging.getLogger(__name__)

ORDER_STATUS_PENDING = "pending"


def start_checkout(
    payload: Dict[str, Any],
    *,
    plants: PlantRepository,
    gateway: StripeGateway,
) -> Dict[str, str]:
    """
    Crée la session de paiement pour la plante référencée par payload.plantId.
    - 400 si plantId manquant ou prix invalide, 404 si plante introuvable
    - 409 (InsufficientStock) si la plante n'est plus en stock
    Le prix facturé est celui de la plante en base; un prix envoyé par le client est ignoré.
    """
    plant_id = str(payload.get("plantId") or "").strip()
    if not plant_id:
        raise ValidationError("plantId required")
    plant = plants.get_by_id(plant_id)
    if int(plant.get("quantity") or 0) < 1:
        raise InsufficientStock(f"{plant.get('name') or 'Plant'} is out of stock")

    customer = payload.get("customer") or {}
    customer_email = customer.get("email") if isinstance(customer, dict) else None
    metadata = {"plantId": plant_id}
    if customer_email:
        metadata["customer"] = customer_email

    return gateway.create_session({
        "price": plant.get("price"),
        "name": payload.get("name") or plant.get("name"),
        "description": payload.get("description") or plant.get("description"),
        "image": payload.get("image") or plant.get("image"),
        "customer_email": customer_email,
        "metadata": metadata,
    })


def reconcile_checkout(
    session_id: str,
    *,
    plants: PlantRepository,
    orders: OrderRepository,
    gateway: StripeGateway,
) -> Dict[str, Any]:
    """
    Matérialise la commande d'une session Stripe payée.
    Étapes:
      1) relit la session (GatewayError: aucun effet de bord)
      2) résout la plante via metadata.plantId (NotFound: pas de commande)
      3) commande existante pour ce payment_intent -> Conflict, aucune écriture
      4) payment_status != "paid" -> PaymentIncomplete, aucune écriture
      5) insère la commande (contrainte UNIQUE sur transactionId) puis décrémente le stock
    Retour: {"order": <commande créée>, "plant": <plante utilisée>}
    """
    session = gateway.retrieve_session(session_id)
    try:
        plant = plants.get_by_id(plant_id_from_metadata(session.metadata))
    except InvalidIdentifier:
        # identifiant illisible dans la session: aucune plante ne correspond
        raise NotFound("Plant not found")

    transaction_id = session.payment_intent
    if orders.find_by_transaction_id(transaction_id):
        raise Conflict("Order already exists")

    if session.payment_status != "paid" or not transaction_id:
        raise PaymentIncomplete(f"Payment not completed (payment_status={session.payment_status or 'unknown'})")

    order = {
        "plantId": str(plant["id"]),
        "transactionId": transaction_id,
        "customer_email": session.customer_email,
        "status": ORDER_STATUS_PENDING,
        "seller": plant.get("seller"),
        "name": plant.get("name"),
        "category": plant.get("category"),
        "image": plant.get("image"),
        "quantity": 1,
        "price": session.amount_total / 100,
    }
    order["id"] = orders.insert(order)
    logger.info("payments.reconcile order created id=%s transactionId=%s plantId=%s", order["id"], transaction_id, order["plantId"])

    # La commande est la source de vérité: un échec du décrément n'annule pas la commande
    try:
        plants.decrement_quantity(plant["id"], 1)
    except AppError as e:
        logger.warning("payments.reconcile stock not decremented plantId=%s order=%s: %s", plant["id"], order["id"], e.message)

    return {"order": order, "plant": plant}
