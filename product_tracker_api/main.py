"""
Product Tracker API - REST gateway for the ProductTracker contract.

Provides REST endpoints for:
- Listing products (GET /api/products)
- Creating a product (POST /api/products)
- Reading a product's history (GET /api/products/{id})
- Appending a history update (POST /api/products/{id}/updates)
- Health checks (GET /health)
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import structlog
import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import Settings, get_settings
from .errors import GatewayError, NotConfigured
from .evm import ProductTrackerClient
from .gateway import ContractGateway
from .models import (
    AddUpdateRequest,
    CreateProductRequest,
    ErrorResponse,
    HealthResponse,
    ProductHistoryResponse,
    ProductResponse,
    TransactionResponse,
)


def configure_logging(level: str = "INFO") -> None:
    """Configure structlog on top of stdlib logging."""
    logging.basicConfig(format="%(message)s", level=level.upper())
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
    )


configure_logging(get_settings().log_level)

logger = structlog.get_logger()


# Global clients (initialized at startup)
_client: Optional[ProductTrackerClient] = None
_gateway: Optional[ContractGateway] = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    global _client, _gateway

    settings = get_settings()

    _client = ProductTrackerClient(settings)
    _gateway = ContractGateway(_client, settings)

    logger.info(
        "API started",
        version=__version__,
        host=settings.host,
        port=settings.port,
        evm_rpc=settings.rpc_url,
        contract=_client.contract_address,
        writes_enabled=_client.account is not None,
    )

    yield

    # Cleanup
    await _client.close()
    _client = None
    _gateway = None

    logger.info("API stopped")


def get_gateway() -> ContractGateway:
    """Dependency returning the gateway created at startup."""
    if _gateway is None:
        logger.error("Contract gateway not initialized")
        raise NotConfigured("Contract gateway not initialized")
    return _gateway


# Create FastAPI app
app = FastAPI(
    title="Product Tracker API",
    description="REST gateway for the ProductTracker supply-chain contract",
    version=__version__,
    lifespan=lifespan,
    responses={500: {"model": ErrorResponse}},
)


# Add CORS middleware
_settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.allowed_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Error Handling
# ============================================================================


@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    """Every contract failure becomes a flat 500 with a static message."""
    return JSONResponse(status_code=500, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Unparseable request bodies share the same error shape."""
    logger.error("Invalid request", path=request.url.path, errors=exc.errors())
    return JSONResponse(status_code=500, content={"error": "Invalid request"})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything else still answers with the {"error": ...} body."""
    logger.error("Unhandled error", path=request.url.path, error=str(exc), exc_type=type(exc).__name__)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# ============================================================================
# Health Check
# ============================================================================


@app.get("/health", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_settings)) -> HealthResponse:
    """
    Check API health and connectivity.

    Returns service status, EVM RPC reachability and the configured
    contract/signer addresses.
    """
    evm_ok = False
    signer = None

    if _client:
        evm_ok = await _client.check_connectivity()
        if _client.account:
            signer = _client.account.address

    return HealthResponse(
        status="ok" if evm_ok else "degraded",
        version=__version__,
        evm_rpc=evm_ok,
        contract=settings.contract_address,
        signer=signer,
    )


# ============================================================================
# Products
# ============================================================================


@app.get("/api/products", response_model=list[ProductResponse])
async def list_products(
    owner: Optional[str] = None,
    gateway: ContractGateway = Depends(get_gateway),
) -> list[ProductResponse]:
    """
    Get all products, optionally filtered by owner address.

    The owner comparison is case-insensitive.
    """
    return await gateway.list_products(owner)


@app.post("/api/products", response_model=TransactionResponse, status_code=201)
async def create_product(
    request: CreateProductRequest,
    gateway: ContractGateway = Depends(get_gateway),
) -> TransactionResponse:
    """
    Create a new product.

    Blocks until the createProduct transaction is confirmed.
    """
    return await gateway.create_product(request.productName)


@app.get("/api/products/{product_id}", response_model=ProductHistoryResponse)
async def get_product_history(
    product_id: str,
    gateway: ContractGateway = Depends(get_gateway),
) -> ProductHistoryResponse:
    """Get a single product and its full update history."""
    return await gateway.get_product_history(product_id)


@app.post("/api/products/{product_id}/updates", response_model=TransactionResponse)
async def add_product_update(
    product_id: str,
    request: AddUpdateRequest,
    gateway: ContractGateway = Depends(get_gateway),
) -> TransactionResponse:
    """
    Append an update to a product's history.

    Sensor data is a fixed placeholder payload. Ownership is enforced by
    the contract, not here.
    """
    return await gateway.add_product_update(product_id, request.status, request.location)


# ============================================================================
# Entry Point
# ============================================================================


def run() -> None:
    """Run the API server."""
    settings = get_settings()
    uvicorn.run(
        "product_tracker_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
