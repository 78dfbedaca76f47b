"""
Tests for classification of contract-call failures.
"""

import asyncio

import aiohttp
import pytest
from web3.exceptions import (
    BadFunctionCallOutput,
    ContractLogicError,
    ContractPanicError,
    ProviderConnectionError,
    RequestTimedOut,
    TimeExhausted,
    Web3RPCError,
    Web3ValidationError,
)

from product_tracker_api.errors import (
    ErrorKind,
    GatewayError,
    NotConfigured,
    ProductNotFound,
    TransactionReverted,
    classify,
)


@pytest.mark.parametrize(
    "exc, kind",
    [
        (ContractLogicError("execution reverted"), ErrorKind.REJECTED),
        (ContractPanicError("Panic error 0x32: Array index is out of bounds."), ErrorKind.REJECTED),
        (BadFunctionCallOutput("Could not decode contract function call"), ErrorKind.REJECTED),
        (Web3ValidationError("Could not identify the intended function"), ErrorKind.REJECTED),
        (ValueError("invalid literal for int() with base 10: 'abc'"), ErrorKind.REJECTED),
        (TimeExhausted("Transaction not in the chain after 120 seconds"), ErrorKind.CONFIRMATION_TIMEOUT),
        (ProviderConnectionError("Could not connect"), ErrorKind.TRANSPORT),
        (aiohttp.ClientConnectionError("Cannot connect to host"), ErrorKind.TRANSPORT),
        (asyncio.TimeoutError(), ErrorKind.TRANSPORT),
        (Web3RPCError("insufficient funds for gas * price + value"), ErrorKind.REJECTED),
        (RequestTimedOut("Request timed out"), ErrorKind.TRANSPORT),
    ],
)
def test_classify(exc: Exception, kind: ErrorKind) -> None:
    err = classify(exc)
    assert isinstance(err, GatewayError)
    assert err.kind is kind
    assert err.__cause__ is exc
    assert err.detail


def test_gateway_errors_pass_through() -> None:
    original = ProductNotFound(12)
    assert classify(original) is original


def test_typed_errors() -> None:
    assert ProductNotFound(12).kind is ErrorKind.NOT_FOUND
    assert "12" in ProductNotFound(12).detail
    assert TransactionReverted("0xdead").kind is ErrorKind.REJECTED
    assert NotConfigured("No private key configured").kind is ErrorKind.NOT_CONFIGURED


def test_default_public_message() -> None:
    assert classify(RuntimeError("boom")).message == "Contract call failed"
