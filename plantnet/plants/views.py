# module plantnet.plants.views
"""Endpoints catalogue (plantes).
- POST /plants: création par un vendeur authentifié (400 si body vide ou invalide).
- GET /plants: liste complète.
- GET /plants/{plant_id}: détail (400 id invalide, 404 introuvable).
"""
from typing import Any, Dict, Optional
import logging

from fastapi import APIRouter, Body, Depends

from plantnet.dependencies import get_plant_repository
from plantnet.plants.repository import PlantRepository
from plantnet.utils.responses import success
from plantnet.utils.security import require_user

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Plants API"])


@router.post("/plants")
def create_plant(
    body: Optional[Dict[str, Any]] = Body(None),
    user: Dict[str, Any] = Depends(require_user),
    plants: PlantRepository = Depends(get_plant_repository),
):
    inserted_id = plants.create(body or {})
    logger.info("plants.create id=%s by=%s", inserted_id, user.get("email"))
    return success("creating plants data successful", {"insertedId": inserted_id}, status_code=201)


@router.get("/plants")
def list_plants(plants: PlantRepository = Depends(get_plant_repository)):
    return success("Get plants data from db successful", plants.list_all())


@router.get("/plants/{plant_id}")
def get_plant(plant_id: str, plants: PlantRepository = Depends(get_plant_repository)):
    return success("Get plant data from db successful", plants.get_by_id(plant_id))
