from typing import Any, Dict, Optional
from fastapi import Depends, Request

from plantnet.auth.service import IdentityVerifier
from plantnet.dependencies import get_identity_verifier
from plantnet.errors import Forbidden, Unauthorized


def bearer_token(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization", "")
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


def get_current_user(
    request: Request,
    verifier: IdentityVerifier = Depends(get_identity_verifier),
) -> Dict[str, Any]:
    """
    unauthenticated -> authenticated(email):
    - extrait le jeton de l'en-tête Authorization: Bearer <jeton>
    - le vérifie auprès du service d'identité (à chaque requête)
    - attache l'email vérifié à request.state.token_email
    Absence ou échec: Unauthorized (401) avant l'exécution du handler.
    """
    token = bearer_token(request)
    if not token:
        raise Unauthorized()
    user = verifier.verify(token)
    request.state.token_email = user["email"]
    return user


def require_user(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    return user


def resolve_owner_email(user: Dict[str, Any], email: Optional[str]) -> str:
    """
    Email à utiliser pour lister les commandes de l'utilisateur:
    - par défaut l'email du jeton
    - un email différent de celui du jeton est interdit (403)
    """
    if email is None or email == "":
        return user["email"]
    if email != user["email"]:
        raise Forbidden()
    return email
