"""
Registre central des routers.
- Catalogue: plants
- Paiement: create-checkout-session, payment-success
- Commandes: my-orders, seller-product-orders
- Health
"""
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from plantnet.plants.views import router as plants_router
from plantnet.payments.views import router as payments_router
from plantnet.orders.views import router as orders_router
from plantnet.health.router import router as health_router

def register_routes(app: FastAPI) -> None:
    @app.get("/", include_in_schema=False, response_class=PlainTextResponse)
    def root():
        return "Hello from Server.."

def register_routers(app: FastAPI) -> None:
    app.include_router(plants_router)
    app.include_router(payments_router)
    app.include_router(orders_router)
    app.include_router(health_router)
