"""
Accès aux données 'orders' (table Supabase).
- transactionId porte une contrainte UNIQUE: une violation (23505) à l'insertion
  est traduite en Conflict, ce qui ferme la fenêtre check-then-act.
- Les recherches par email sont des égalités strictes (sensibles à la casse).
"""
from typing import Any, Dict, List, Optional
import logging

from postgrest.exceptions import APIError

from plantnet.config import ORDERS_TABLE
from plantnet.errors import Conflict, StoreError

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


class OrderRepository:
    def __init__(self, client, table: str = ORDERS_TABLE):
        self.client = client
        self.table = table

    def _select_eq(self, column: str, value: str) -> List[dict]:
        try:
            res = self.client.table(self.table).select("*").eq(column, value).execute()
        except APIError as e:
            logger.exception("orders.repository select failed %s=%s", column, value)
            raise StoreError("Failed to get orders data", error=e.message)
        return res.data or []

    def find_by_transaction_id(self, transaction_id: str) -> Optional[dict]:
        if not transaction_id:
            return None
        rows = self._select_eq("transactionId", transaction_id)
        return rows[0] if rows else None

    def find_by_customer_email(self, email: str) -> List[dict]:
        return self._select_eq("customer_email", email)

    def find_by_seller_email(self, email: str) -> List[dict]:
        # seller est une colonne jsonb: filtre sur seller->>email
        return self._select_eq("seller->>email", email)

    def insert(self, order: Dict[str, Any]) -> str:
        try:
            res = self.client.table(self.table).insert(order).execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                logger.info("orders.repository.insert duplicate transactionId=%s", order.get("transactionId"))
                raise Conflict("Order already exists", error=e.message)
            logger.exception("orders.repository.insert failed transactionId=%s", order.get("transactionId"))
            raise StoreError("Failed to create order", error=e.message)
        rows = res.data or []
        if not rows:
            raise StoreError("Failed to create order", error="insert returned no row")
        return str(rows[0]["id"])
