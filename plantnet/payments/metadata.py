"""
Lecture des métadonnées Stripe posées à la création de session (plantId, customer).
"""
from typing import Any, Dict

from plantnet.errors import NotFound

# module plantnet.payments.metadata
def plant_id_from_metadata(metadata: Dict[str, Any]) -> str:
    """
    Retourne metadata.plantId.
    - Une session sans plantId ne référence aucune plante: NotFound.
    """
    plant_id = str((metadata or {}).get("plantId") or "").strip()
    if not plant_id:
        raise NotFound("Plant reference missing from checkout session")
    return plant_id
