# storefront/tasks/expire.py
from datetime import datetime, timezone, timedelta

from storefront.celery_worker import celery_app
from storefront.data.database import Store
from storefront.services.cart_service import CartService
from storefront.utils.settings import DATABASE_URL, GUEST_CART_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def purge_stale_guest_carts(store: Store, now: datetime | None = None) -> int:
    now = now or datetime.now(timezone.utc)
    cutoff = now - timedelta(seconds=GUEST_CART_TTL_SECONDS)

    with store.session() as db:
        return CartService(db).purge_stale_guest_lines(cutoff)


@celery_app.task(name="storefront.tasks.expire.purge_stale_guest_carts_task")
def purge_stale_guest_carts_task():
    logger.info("Purge stale guest carts task started")

    # worker ma wlasny handle, zamykany po tasku
    store = Store(DATABASE_URL)
    try:
        deleted = purge_stale_guest_carts(store)
    finally:
        store.close()

    logger.info(f"Purge stale guest carts task finished, {deleted} lines removed")
    return {"deleted": deleted}
