from typing import Any, Dict
import logging

from plantnet.auth.repository import get_user_from_access_token
from plantnet.errors import Unauthorized

logger = logging.getLogger(__name__)


class IdentityVerifier:
    """
    Vérifie un jeton Bearer auprès de Supabase Auth.
    Aucun cache: chaque requête est vérifiée indépendamment.
    """

    def __init__(self, client):
        self.client = client

    def verify(self, access_token: str) -> Dict[str, Any]:
        """Retourne {id, email} pour un jeton valide; Unauthorized sinon."""
        if not access_token:
            raise Unauthorized()
        try:
            raw = get_user_from_access_token(self.client, access_token)
        except Exception as e:
            # gotrue lève des erreurs hétérogènes (AuthApiError, httpx...): toutes valent 401
            logger.info("auth.verify rejected token: %s", e)
            raise Unauthorized(error=str(e))
        email = raw.get("email")
        if not email:
            raise Unauthorized()
        return {"id": raw.get("id"), "email": email, "metadata": raw.get("user_metadata") or {}}
