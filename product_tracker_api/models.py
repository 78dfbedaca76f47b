"""
Pydantic models for API requests and responses.

Field names follow the JSON the existing frontend consumes (camelCase).
"""

from typing import Optional

from pydantic import BaseModel, Field


# ============================================================================
# Products
# ============================================================================

class CreateProductRequest(BaseModel):
    """Request to create a product.

    The name is forwarded to the contract unvalidated.
    """

    productName: Optional[str] = Field(None, description="Product name")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"productName": "Widget"}
            ]
        }
    }


class ProductResponse(BaseModel):
    """A product record."""

    id: int = Field(..., description="Product ID assigned by the contract")
    name: str = Field(..., description="Product name")
    owner: str = Field(..., description="Owner address (0x...)")


# ============================================================================
# History
# ============================================================================

class AddUpdateRequest(BaseModel):
    """Request to append a history update to a product."""

    status: Optional[str] = Field(None, description="Status label, e.g. 'Shipped'")
    location: Optional[str] = Field(None, description="Free-form location")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"status": "In Transit", "location": "Rotterdam"}
            ]
        }
    }


class HistoryEntryResponse(BaseModel):
    """One history entry."""

    timestamp: str = Field(..., description="Display timestamp (M/D/YYYY, h:mm:ss AM)")
    status: str
    location: str
    sensorData: str = Field(..., description="JSON-encoded sensor payload")


class ProductHistoryResponse(ProductResponse):
    """A product and its full update history."""

    history: list[HistoryEntryResponse] = Field(default_factory=list)


# ============================================================================
# Transactions / Errors
# ============================================================================

class TransactionResponse(BaseModel):
    """Response from a confirmed write."""

    message: str = Field(..., description="Human-readable result")
    txHash: str = Field(..., description="Transaction hash (0x...)")


class ErrorResponse(BaseModel):
    """Error body for every failed request."""

    error: str = Field(..., description="Static error message")


# ============================================================================
# Health Check
# ============================================================================

class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Service status")
    version: str = Field(..., description="API version")
    evm_rpc: bool = Field(..., description="EVM RPC connectivity")
    contract: str = Field(..., description="ProductTracker contract address")
    signer: Optional[str] = Field(None, description="Signer address (None when writes are disabled)")
