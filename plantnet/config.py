# plantnet.config
from pathlib import Path
import os
from dotenv import load_dotenv

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=False)

"""
Configuration centrale du backend PlantNet.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Normalise et expose les secrets/URLs (Supabase, Stripe)
- Expose les origines CORS autorisées et l'URL du client (redirections checkout)
"""

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

def _env_list(name: str, default: str) -> list[str]:
    return [x.strip() for x in _clean_env(os.getenv(name, default)).split(",") if x.strip()]

# Supabase: URL + clés (anon pour la vérification des jetons, service pour les tables)
SUPABASE_URL = _clean_env(os.getenv("SUPABASE_URL") or "")
SUPABASE_ANON = _clean_env(os.getenv("SUPABASE_ANON_KEY") or os.getenv("SUPABASE_KEY") or "")
SUPABASE_SERVICE_KEY = _clean_env(os.getenv("SUPABASE_SERVICE_KEY") or "")

if SUPABASE_URL and not SUPABASE_URL.startswith("http"):
    SUPABASE_URL = "https://" + SUPABASE_URL
if SUPABASE_URL.endswith("/"):
    SUPABASE_URL = SUPABASE_URL.rstrip("/")

# Tables
PLANTS_TABLE = _clean_env(os.getenv("PLANTS_TABLE") or "plants")
ORDERS_TABLE = _clean_env(os.getenv("ORDERS_TABLE") or "orders")

# CORS: clients front (vite dev + hébergement)
CORS_ORIGINS = _env_list(
    "CORS_ORIGINS",
    "http://localhost:5173,http://localhost:5174,https://b12-m11-session.web.app",
)

# Stripe
STRIPE_SECRET_KEY = _clean_env(os.getenv("STRIPE_SECRET_KEY") or "")
STRIPE_CURRENCY = _clean_env(os.getenv("STRIPE_CURRENCY") or "usd").lower()

# Pages de succès/annulation du checkout (côté client)
CLIENT_DOMAIN = _clean_env(os.getenv("CLIENT_DOMAIN") or "http://localhost:5173").rstrip("/")
CHECKOUT_SUCCESS_PATH = os.getenv("CHECKOUT_SUCCESS_PATH", "/payment-success")
# {plantId} est remplacé par l'identifiant de la plante
CHECKOUT_CANCEL_PATH = os.getenv("CHECKOUT_CANCEL_PATH", "/plant/{plantId}")
