"""
Failure taxonomy for contract calls.

Every exception raised while talking to the node is classified into a
GatewayError carrying an ErrorKind. The kind is logged; HTTP callers only
ever see the operation's static message.
"""

import asyncio
from enum import Enum

import aiohttp
from web3.exceptions import (
    BadFunctionCallOutput,
    ContractLogicError,
    InvalidTransaction,
    MismatchedABI,
    ProviderConnectionError,
    RequestTimedOut,
    TimeExhausted,
    Web3RPCError,
    Web3ValidationError,
)


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    REJECTED = "rejected"
    TRANSPORT = "transport"
    CONFIRMATION_TIMEOUT = "confirmation_timeout"
    NOT_CONFIGURED = "not_configured"


class GatewayError(Exception):
    """
    A failed contract call.

    Attributes:
        kind: Classification of the failure
        detail: Underlying error text (logged only)
        message: Public, static message returned to HTTP callers.
            Set by the gateway operation that observed the failure.
    """

    def __init__(self, kind: ErrorKind, detail: str, message: str = "Contract call failed"):
        super().__init__(detail)
        self.kind = kind
        self.detail = detail
        self.message = message


class ProductNotFound(GatewayError):
    """The contract returned a zero-value record for the product id."""

    def __init__(self, product_id: int):
        super().__init__(ErrorKind.NOT_FOUND, f"Product {product_id} does not exist")
        self.product_id = product_id


class TransactionReverted(GatewayError):
    """A mined transaction whose receipt reports status 0."""

    def __init__(self, tx_hash: str):
        super().__init__(ErrorKind.REJECTED, f"Transaction {tx_hash} reverted")
        self.tx_hash = tx_hash


class NotConfigured(GatewayError):
    def __init__(self, detail: str):
        super().__init__(ErrorKind.NOT_CONFIGURED, detail)


_REJECTED = (
    ContractLogicError,
    Web3RPCError,
    BadFunctionCallOutput,
    MismatchedABI,
    InvalidTransaction,
    Web3ValidationError,
    ValueError,
    TypeError,
)

_TRANSPORT = (
    ProviderConnectionError,
    RequestTimedOut,
    aiohttp.ClientError,
    asyncio.TimeoutError,
    OSError,
)


def classify(exc: BaseException) -> GatewayError:
    """Map an exception raised by a contract call to a GatewayError."""
    if isinstance(exc, GatewayError):
        return exc

    detail = str(exc) or type(exc).__name__

    # RequestTimedOut is a Web3RPCError; check transport first
    if isinstance(exc, TimeExhausted):
        kind = ErrorKind.CONFIRMATION_TIMEOUT
    elif isinstance(exc, _TRANSPORT):
        kind = ErrorKind.TRANSPORT
    elif isinstance(exc, _REJECTED):
        kind = ErrorKind.REJECTED
    else:
        kind = ErrorKind.TRANSPORT

    err = GatewayError(kind, detail)
    err.__cause__ = exc
    return err
