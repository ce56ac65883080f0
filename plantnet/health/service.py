"""
Sondes de santé: joignabilité de Supabase (table plants).
ping_store est aussi utilisé au démarrage (lifespan) pour échouer tôt.
"""
from typing import Any, Dict
import logging

import plantnet.infra.supabase_client as supabase_client
from plantnet.config import SUPABASE_URL, PLANTS_TABLE

logger = logging.getLogger(__name__)


def ping_store() -> None:
    """Lecture minimale sur la table plants; lève l'erreur d'origine si injoignable."""
    supabase_client.get_service_supabase().table(PLANTS_TABLE).select("id").limit(1).execute()


def health_supabase_info() -> Dict[str, Any]:
    info: Dict[str, Any] = {"url_set": bool(SUPABASE_URL), "connect_ok": False}
    try:
        ping_store()
        info["connect_ok"] = True
    except Exception as e:
        logger.warning("health.supabase ping failed: %s", e)
        info["error"] = str(e)
    return info
