"""Firestore order sink adapter.

Appends each order to the orders collection with a server-assigned
``orderDate`` and returns the generated document id.
"""

import structlog
from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import DefaultCredentialsError
from google.cloud import firestore

from ordering.checkout.port import OrderRecord, OrderSink
from ordering.errors import SinkUnreachable
from shared.firebase import get_firestore_client

logger = structlog.get_logger(__name__)


class FirestoreOrderSink(OrderSink):
    """Order sink backed by a Firestore collection."""

    def __init__(self, collection: str = "orders", client=None, timeout: float = 10.0) -> None:
        self.collection = collection
        self.timeout = timeout
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = get_firestore_client()
        return self._client

    def place_order(self, record: OrderRecord) -> str:
        document = {**record.to_document(), "orderDate": firestore.SERVER_TIMESTAMP}
        try:
            _, reference = self.client.collection(self.collection).add(document, timeout=self.timeout)
        except (GoogleAPIError, DefaultCredentialsError) as exc:
            logger.error("Order sink write failed", collection=self.collection, error=str(exc))
            raise SinkUnreachable(f"Failed to place order: {exc}") from exc
        return reference.id
