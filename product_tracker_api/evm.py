"""
EVM client for the ProductTracker contract.
"""

from dataclasses import dataclass
from typing import Any, Optional, Sequence

import aiohttp
import structlog
from eth_account import Account
from web3 import AsyncHTTPProvider, AsyncWeb3, Web3
from web3.exceptions import ContractLogicError
from web3.types import TxParams, TxReceipt

from .abi import PRODUCT_COUNT_FUNCTION, has_view_function, load_abi
from .config import Settings
from .errors import NotConfigured, ProductNotFound, TransactionReverted

logger = structlog.get_logger()


ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


@dataclass
class Product:
    """A product record as stored by the contract."""

    id: int
    name: str
    owner: str

    @classmethod
    def from_contract(cls, raw: Sequence[Any]) -> "Product":
        """Build from the (productId, productName, owner) getter result."""
        product_id, name, owner = raw
        return cls(id=int(product_id), name=name, owner=owner)

    @property
    def exists(self) -> bool:
        return self.owner != ZERO_ADDRESS


@dataclass
class ProductUpdate:
    """One entry of a product's history."""

    timestamp: int
    status: str
    location: str
    sensor_data: str

    @classmethod
    def from_contract(cls, raw: Sequence[Any]) -> "ProductUpdate":
        """Build from a (timestamp, status, location, sensorData) struct."""
        timestamp, status, location, sensor_data = raw
        return cls(
            timestamp=int(timestamp),
            status=status,
            location=location,
            sensor_data=sensor_data,
        )


class ProductTrackerClient:
    """
    Async client for ProductTracker contract interactions.

    Reads are plain view calls. Writes are built from the contract
    function, signed locally with the configured key, and awaited until
    the receipt is available.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.w3 = AsyncWeb3(
            AsyncHTTPProvider(
                settings.rpc_url,
                request_kwargs={"timeout": aiohttp.ClientTimeout(total=settings.rpc_timeout_seconds)},
                exception_retry_configuration=None,
            )
        )
        self.account = (
            Account.from_key(settings.private_key) if settings.private_key else None
        )
        self.abi = load_abi(settings.contract_abi_path)
        self.contract = self.w3.eth.contract(
            address=Web3.to_checksum_address(settings.contract_address),
            abi=self.abi,
        )

    @property
    def address(self) -> str:
        """Get signer address."""
        if not self.account:
            raise NotConfigured("No private key configured")
        return self.account.address

    @property
    def contract_address(self) -> str:
        return self.contract.address

    async def check_connectivity(self) -> bool:
        """Check if EVM RPC is reachable."""
        try:
            await self.w3.eth.block_number
            return True
        except Exception:
            return False

    async def close(self) -> None:
        """Close the provider's cached HTTP sessions."""
        await self.w3.provider.disconnect()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_products(self) -> list[Product]:
        """
        Read every product in storage order, one products(i) call each.

        Uses productCount() when the ABI has it. Otherwise walks the public
        products(uint256) getter from index 0 and stops at the first read
        that reverts or returns a zero-value record.
        """
        if has_view_function(self.abi, PRODUCT_COUNT_FUNCTION):
            count = await getattr(self.contract.functions, PRODUCT_COUNT_FUNCTION)().call()
            return [await self.get_product_at(index) for index in range(int(count))]

        products: list[Product] = []
        while True:
            try:
                product = await self.get_product_at(len(products))
            except ContractLogicError:
                break
            if not product.exists:
                break
            products.append(product)
        return products

    async def get_product_at(self, index: int) -> Product:
        """Read products(index) without an existence check."""
        raw = await self.contract.functions.products(index).call()
        return Product.from_contract(raw)

    async def get_product(self, product_id: int) -> Product:
        """Read a product, raising ProductNotFound for a zero-value record."""
        product = await self.get_product_at(product_id)
        if not product.exists:
            raise ProductNotFound(product_id)
        return product

    async def get_product_history(self, product_id: int) -> list[ProductUpdate]:
        """Call ProductTracker.getProductHistory()."""
        raw = await self.contract.functions.getProductHistory(product_id).call()
        return [ProductUpdate.from_contract(entry) for entry in raw]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def send_transaction(self, function: Any) -> str:
        """Sign and send a contract function call, wait for its receipt, return the tx hash."""
        if not self.account:
            raise NotConfigured("No private key configured")

        params: TxParams = {
            "from": self.account.address,
            "nonce": await self.w3.eth.get_transaction_count(self.account.address, "pending"),
        }
        if self.settings.chain_id is not None:
            params["chainId"] = self.settings.chain_id

        tx = await function.build_transaction(params)
        signed = self.account.sign_transaction(tx)
        tx_hash = Web3.to_hex(await self.w3.eth.send_raw_transaction(signed.raw_transaction))

        logger.info("Transaction sent", tx_hash=tx_hash, function=function.fn_name)

        receipt: TxReceipt = await self.w3.eth.wait_for_transaction_receipt(
            tx_hash, timeout=self.settings.tx_timeout_seconds
        )

        if receipt["status"] != 1:
            logger.error("Transaction reverted", tx_hash=tx_hash, function=function.fn_name)
            raise TransactionReverted(tx_hash)

        logger.info(
            "Transaction confirmed",
            tx_hash=tx_hash,
            block_number=receipt["blockNumber"],
            gas_used=receipt["gasUsed"],
        )
        return tx_hash

    async def create_product(self, name: Optional[str]) -> str:
        """Call ProductTracker.createProduct()."""
        return await self.send_transaction(self.contract.functions.createProduct(name))

    async def add_update(
        self,
        product_id: int,
        status: Optional[str],
        location: Optional[str],
        sensor_data: str,
    ) -> str:
        """Call ProductTracker.addUpdate()."""
        return await self.send_transaction(
            self.contract.functions.addUpdate(product_id, status, location, sensor_data)
        )
