"""
Fournisseurs de dépendances FastAPI.
Les clients Supabase/Stripe sont partagés (créés une fois); les stores, la passerelle
et le vérificateur d'identité sont injectés dans les routes et remplaçables en tests
via app.dependency_overrides.
"""
import plantnet.infra.supabase_client as supabase_client
from plantnet.auth.service import IdentityVerifier
from plantnet.orders.repository import OrderRepository
from plantnet.payments.stripe_client import StripeGateway
from plantnet.plants.repository import PlantRepository


def get_plant_repository() -> PlantRepository:
    return PlantRepository(supabase_client.get_service_supabase())


def get_order_repository() -> OrderRepository:
    return OrderRepository(supabase_client.get_service_supabase())


def get_payment_gateway() -> StripeGateway:
    return StripeGateway()


def get_identity_verifier() -> IdentityVerifier:
    return IdentityVerifier(supabase_client.get_supabase())
