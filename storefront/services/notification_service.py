# storefront/services/notification_service.py
from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Serwis do wysyłania powiadomień o zamówieniach.
    Używa Celery do asynchronicznego przetwarzania, wołany dopiero po commicie.
    """

    @staticmethod
    def send_order_notification(owner: str, order_id: int, status: str = "pending"):
        send_order_notification_task.delay(owner, order_id, status)


@celery_app.task(name="storefront.services.notification_service.send_order_notification_task")
def send_order_notification_task(owner: str, order_id: int, status: str):
    """
    Celery task - dostarczanie (email/SMS) jest poza tym serwisem.
    Teraz tylko loguje.
    """
    logger.info(f"[NOTIFICATION] {owner}: order {order_id} is {status}")

    return {"owner": owner, "order_id": order_id, "status": status, "sent": True}
