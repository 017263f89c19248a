# storefront/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI
import uvicorn

from storefront.api.routers import carts, health, orders
from storefront.data.database import Store
from storefront.utils.settings import DATABASE_URL
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def create_app(store: Store | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # handle otwierany przy starcie, zamykany przy shutdown
        owned = store is None
        app.state.store = store or Store(DATABASE_URL)
        app.state.store.create_schema()
        logger.info("Storefront fulfillment service started")
        try:
            yield
        finally:
            if owned:
                app.state.store.close()

    app = FastAPI(
        title="Storefront Fulfillment Service",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.include_router(health.router)
    app.include_router(carts.router)
    app.include_router(orders.router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
