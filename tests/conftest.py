"""
Shared fixtures: an in-memory ProductTracker stand-in and a test client.
"""

from typing import Optional

import pytest
from fastapi.testclient import TestClient
from web3.exceptions import ContractLogicError, Web3ValidationError

from product_tracker_api.config import Settings
from product_tracker_api.evm import Product, ProductUpdate
from product_tracker_api.errors import ProductNotFound
from product_tracker_api.gateway import ContractGateway
from product_tracker_api.main import app, get_gateway


SIGNER = "0x1234567890AbcdEF1234567890aBcdef12345678"
OTHER_OWNER = "0xAbCdEf0123456789aBcDeF0123456789AbCdEf01"

# 2023-11-14 22:13:20 UTC
GENESIS_TIME = 1_700_000_000


class FakeProductTracker:
    """
    In-memory stand-in for ProductTrackerClient.

    Mirrors the contract: products live in an array (out-of-range reads
    revert), history is append-only, new products belong to the signer,
    and every update is stamped 60 seconds after the previous one.
    """

    def __init__(self, signer: str = SIGNER):
        self.signer = signer
        self.products: list[Product] = []
        self.histories: dict[int, list[ProductUpdate]] = {}
        self.now = GENESIS_TIME
        self.tx_count = 0
        self.closed = False

    def _tx_hash(self) -> str:
        self.tx_count += 1
        return f"0x{self.tx_count:064x}"

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.products):
            raise ContractLogicError("execution reverted")

    def seed(self, name: str, owner: Optional[str] = None) -> Product:
        product = Product(id=len(self.products), name=name, owner=owner or self.signer)
        self.products.append(product)
        self.histories[product.id] = []
        return product

    async def list_products(self) -> list[Product]:
        return [await self.get_product_at(index) for index in range(len(self.products))]

    async def get_product_at(self, index: int) -> Product:
        self._check_index(index)
        return self.products[index]

    async def get_product(self, product_id: int) -> Product:
        product = await self.get_product_at(product_id)
        if not product.exists:
            raise ProductNotFound(product_id)
        return product

    async def get_product_history(self, product_id: int) -> list[ProductUpdate]:
        self._check_index(product_id)
        return list(self.histories.get(product_id, []))

    async def create_product(self, name: Optional[str]) -> str:
        if not isinstance(name, str):
            raise Web3ValidationError("Could not identify the intended function")
        self.seed(name)
        return self._tx_hash()

    async def add_update(
        self,
        product_id: int,
        status: Optional[str],
        location: Optional[str],
        sensor_data: str,
    ) -> str:
        self._check_index(product_id)
        self.now += 60
        self.histories[product_id].append(
            ProductUpdate(
                timestamp=self.now,
                status=status,
                location=location,
                sensor_data=sensor_data,
            )
        )
        return self._tx_hash()

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from any local .env, displaying times in UTC."""
    return Settings(_env_file=None, display_timezone="UTC")


@pytest.fixture
def tracker() -> FakeProductTracker:
    return FakeProductTracker()


@pytest.fixture
def gateway(tracker, settings) -> ContractGateway:
    return ContractGateway(tracker, settings)


@pytest.fixture
def client(gateway):
    """Test client with the gateway dependency pointed at the fake contract."""
    app.dependency_overrides[get_gateway] = lambda: gateway
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
