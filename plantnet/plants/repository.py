"""
Accès aux données 'plants' (table Supabase).
- create: valide le payload (PlantCreate) puis insère, retourne l'id généré.
- list_all / get_by_id: lecture.
- decrement_quantity: décrément atomique conditionnel via la fonction SQL
  decrement_plant_quantity (voir sql/schema.sql), jamais sous zéro.
"""
from typing import Any, Dict, List
from uuid import UUID
import logging

from pydantic import ValidationError as PydanticValidationError
from postgrest.exceptions import APIError

from plantnet.config import PLANTS_TABLE
from plantnet.errors import InsufficientStock, InvalidIdentifier, NotFound, StoreError, ValidationError
from plantnet.plants.models import PlantCreate

logger = logging.getLogger(__name__)


def _check_id(plant_id: Any) -> str:
    try:
        return str(UUID(str(plant_id)))
    except (TypeError, ValueError, AttributeError):
        raise InvalidIdentifier("Invalid plant id")


class PlantRepository:
    def __init__(self, client, table: str = PLANTS_TABLE):
        self.client = client
        self.table = table

    def create(self, data: Dict[str, Any]) -> str:
        if not data:
            raise ValidationError("Plants data required!!!")
        try:
            plant = PlantCreate.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError("Invalid plants data", error=e.errors(include_url=False, include_context=False))
        try:
            res = self.client.table(self.table).insert(plant.model_dump()).execute()
        except APIError as e:
            logger.exception("plants.repository.create failed name=%s", plant.name)
            raise StoreError("Failed to post plants data", error=e.message)
        rows = res.data or []
        if not rows:
            raise StoreError("Failed to post plants data", error="insert returned no row")
        return str(rows[0]["id"])

    def list_all(self) -> List[dict]:
        try:
            res = self.client.table(self.table).select("*").execute()
        except APIError as e:
            logger.exception("plants.repository.list_all failed")
            raise StoreError("Failed to get plants data", error=e.message)
        return res.data or []

    def get_by_id(self, plant_id: Any) -> dict:
        pid = _check_id(plant_id)
        try:
            res = self.client.table(self.table).select("*").eq("id", pid).limit(1).execute()
        except APIError as e:
            logger.exception("plants.repository.get_by_id failed id=%s", pid)
            raise StoreError("Failed to get plant data", error=e.message)
        rows = res.data or []
        if not rows:
            raise NotFound("Plant not found")
        return rows[0]

    def decrement_quantity(self, plant_id: Any, by: int = 1) -> int:
        """
        Décrémente la quantité de `by` si le stock le permet.
        Retourne la nouvelle quantité; InsufficientStock sinon (la fonction
        SQL renvoie NULL quand la plante est absente ou le stock insuffisant).
        """
        pid = _check_id(plant_id)
        try:
            res = self.client.rpc("decrement_plant_quantity", {"plant_id": pid, "amount": int(by)}).execute()
        except APIError as e:
            logger.exception("plants.repository.decrement_quantity failed id=%s", pid)
            raise StoreError("Failed to update plant quantity", error=e.message)
        # NULL SQL: postgrest-py renvoie None ou [] selon la version; 0 reste un stock valide
        data = res.data
        if isinstance(data, list):
            data = data[0] if data else None
        if data is None:
            raise InsufficientStock(f"Insufficient stock for plant {pid}")
        return int(data)
