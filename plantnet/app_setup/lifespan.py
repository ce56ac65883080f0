"""
Lifespan FastAPI: initialisation des ressources partagées.
- Vérifie la joignabilité de la base au démarrage (échec = arrêt du process).
- Initialise FastAPILimiter (Redis) avec options de test (fakeredis).
- Variables d’environnement supportées:
  - STARTUP_DB_CHECK=0: saute le ping Supabase (tests)
  - DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS=1: désactive le rate limiting
  - USE_FAKE_REDIS_FOR_TESTS=1: utilise fakeredis
"""
import os
import logging
from contextlib import asynccontextmanager

import redis.asyncio as redis
from fastapi import FastAPI
from fastapi_limiter import FastAPILimiter

from plantnet.health.service import ping_store

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger = logging.getLogger("uvicorn.error")

    if os.getenv("STARTUP_DB_CHECK", "1").lower() not in ("0", "false", "no"):
        # Pas de rattrapage: une base injoignable au boot est fatale
        ping_store()
        logger.info("Successfully connected to Supabase!")

    if os.getenv("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS") == "1":
        app.state.rate_limit_enabled = False
        logger.info("Rate limiting disabled by DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS")
        yield
        return

    try:
        if os.getenv("USE_FAKE_REDIS_FOR_TESTS") == "1":
            from fakeredis.aioredis import FakeRedis
            r = FakeRedis(decode_responses=True)
        else:
            redis_url = os.getenv("RATE_LIMIT_REDIS_URL", "redis://127.0.0.1:6379/0")
            r = redis.from_url(redis_url, encoding="utf-8", decode_responses=True)

        await FastAPILimiter.init(r)
        app.state.rate_limit_enabled = True
        logger.info("Rate limiting enabled")
    except Exception as e:
        app.state.rate_limit_enabled = False
        logger.warning(f"Rate limiting disabled due to init error: {e}")

    yield
