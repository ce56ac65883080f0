"""
ASGI entrypoint: expose `app` pour les process managers / déploiements.

- En production, un process manager (uvicorn, gunicorn -k uvicorn.workers.UvicornWorker)
  importe `plantnet.asgi:app`.
- Toute la configuration FastAPI est centralisée dans plantnet.app_setup.factory.
"""

from plantnet.app import app

if __name__ == "__main__":
    import os
    import uvicorn
    uvicorn.run(
        "plantnet.asgi:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "3000")),
        reload=True,
    )
