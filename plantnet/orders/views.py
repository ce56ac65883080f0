# module plantnet.orders.views
"""Endpoints commandes (lecture).
- /my-orders: commandes de l'acheteur (customer_email).
- /seller-product-orders: commandes portant sur les plantes du vendeur (seller.email).
Sécurité: require_user; l'email demandé doit être celui du jeton (403 sinon).
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends

from plantnet.dependencies import get_order_repository
from plantnet.orders.repository import OrderRepository
from plantnet.utils.responses import success
from plantnet.utils.security import require_user, resolve_owner_email

router = APIRouter(tags=["Orders API"])


@router.get("/my-orders")
def my_orders(
    email: Optional[str] = None,
    user: Dict[str, Any] = Depends(require_user),
    orders: OrderRepository = Depends(get_order_repository),
):
    owner = resolve_owner_email(user, email)
    return success("Get customer orders successful", orders.find_by_customer_email(owner))


@router.get("/seller-product-orders")
def seller_product_orders(
    email: Optional[str] = None,
    user: Dict[str, Any] = Depends(require_user),
    orders: OrderRepository = Depends(get_order_repository),
):
    owner = resolve_owner_email(user, email)
    return success("Get seller orders successful", orders.find_by_seller_email(owner))
