"""
Contract gateway: the four product operations.

Each operation maps 1:1 onto ProductTracker calls and reshapes the result
for JSON. Failures are classified, logged with their kind, and re-raised
as GatewayError carrying the operation's static public message.
"""

import json
from typing import Optional, Union

import structlog

from .config import Settings
from .errors import GatewayError, classify
from .evm import Product, ProductTrackerClient, ProductUpdate
from .formatting import format_timestamp
from .models import (
    HistoryEntryResponse,
    ProductHistoryResponse,
    ProductResponse,
    TransactionResponse,
)

logger = structlog.get_logger()


# Placeholder IoT payload attached to every update
SENSOR_DATA_PLACEHOLDER = json.dumps({"temp": "15C", "humidity": "60%"}, separators=(",", ":"))

PRODUCT_CREATED = "Product created successfully!"
UPDATE_ADDED = "Update added successfully!"

LIST_FAILED = "Failed to fetch products"
CREATE_FAILED = "Failed to create product"
HISTORY_FAILED = "Failed to fetch product history"
UPDATE_FAILED = "Failed to add update"


def parse_product_id(raw: Union[str, int]) -> int:
    """Convert a path id to an integer; ValueError for non-numeric input."""
    return int(raw)


class ContractGateway:
    """HTTP-facing operations over a ProductTrackerClient."""

    def __init__(self, client: ProductTrackerClient, settings: Settings):
        self.client = client
        self.settings = settings

    def _failure(self, exc: BaseException, message: str, **context) -> GatewayError:
        err = classify(exc)
        err.message = message
        logger.error(message, kind=err.kind.value, error=err.detail, **context)
        return err

    def _product(self, product: Product) -> ProductResponse:
        return ProductResponse(id=product.id, name=product.name, owner=product.owner)

    def _history_entry(self, update: ProductUpdate) -> HistoryEntryResponse:
        return HistoryEntryResponse(
            timestamp=format_timestamp(update.timestamp, self.settings.display_timezone),
            status=update.status,
            location=update.location,
            sensorData=update.sensor_data,
        )

    async def list_products(self, owner: Optional[str] = None) -> list[ProductResponse]:
        """
        List every product in storage order, optionally only those owned by
        `owner` (case-insensitive). Reads are sequential, one per product.
        """
        try:
            products = await self.client.list_products()
        except Exception as e:
            raise self._failure(e, LIST_FAILED, owner=owner)

        return [
            self._product(product)
            for product in products
            if not owner or product.owner.lower() == owner.lower()
        ]

    async def create_product(self, name: Optional[str]) -> TransactionResponse:
        """Submit createProduct(name) and wait for confirmation."""
        try:
            tx_hash = await self.client.create_product(name)
        except Exception as e:
            raise self._failure(e, CREATE_FAILED, product_name=name)

        logger.info("Product created", product_name=name, tx_hash=tx_hash)
        return TransactionResponse(message=PRODUCT_CREATED, txHash=tx_hash)

    async def get_product_history(self, product_id: Union[str, int]) -> ProductHistoryResponse:
        """
        Read a product and its history.

        The two reads are separate calls; an update landing between them
        is reflected in the history but not guarded against.
        """
        try:
            pid = parse_product_id(product_id)
            product = await self.client.get_product(pid)
            history = await self.client.get_product_history(pid)
            return ProductHistoryResponse(
                id=product.id,
                name=product.name,
                owner=product.owner,
                history=[self._history_entry(update) for update in history],
            )
        except Exception as e:
            raise self._failure(e, HISTORY_FAILED, product_id=product_id)

    async def add_product_update(
        self,
        product_id: Union[str, int],
        status: Optional[str],
        location: Optional[str],
    ) -> TransactionResponse:
        """Submit addUpdate(id, status, location, placeholder) and wait for confirmation."""
        try:
            pid = parse_product_id(product_id)
            tx_hash = await self.client.add_update(pid, status, location, SENSOR_DATA_PLACEHOLDER)
        except Exception as e:
            raise self._failure(e, UPDATE_FAILED, product_id=product_id)

        logger.info("Update added", product_id=pid, status=status, tx_hash=tx_hash)
        return TransactionResponse(message=UPDATE_ADDED, txHash=tx_hash)
