"""
Factory d’application utilisée par les entrypoints (plantnet.asgi, python -m plantnet).
Ordonne les étapes d’initialisation de manière lisible et testable.
"""
from fastapi import FastAPI
from .lifespan import lifespan
from .middlewares import register_basic_middlewares, register_security_middleware
from .exceptions import register_exception_handlers
from .routers import register_routes, register_routers

def create_app() -> FastAPI:
    """
    Construit l’app FastAPI avec le lifespan et enregistre:
      - CORS et en-têtes de sécurité
      - gestionnaires d’exceptions (enveloppe JSON uniforme)
      - route racine et routers (plants, paiements, commandes, health)
    """
    app = FastAPI(title="PlantNet API", lifespan=lifespan)
    register_basic_middlewares(app)
    register_security_middleware(app)
    register_exception_handlers(app)
    register_routes(app)
    register_routers(app)
    return app
