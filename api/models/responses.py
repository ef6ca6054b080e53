"""
API Response Models

Pydantic models for API response serialization.
"""

from typing import Any

from pydantic import BaseModel, Field

from core.merkle import ProofNode


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "merkle-vault-api"
    version: str = "v1"
    file_count: int = Field(default=0, description="Number of files in the stored batch")


class UploadResponse(BaseModel):
    """Response for POST /upload endpoint."""

    ok: bool = Field(..., description="Whether the batch was stored")
    root_hash: str = Field(..., description="Merkle root hash of the uploaded batch (hex)")
    file_count: int = Field(..., description="Number of files in the batch")


class ProofNodeModel(BaseModel):
    """One sibling descriptor of a Merkle proof."""

    hash: str = Field(..., description="Hex digest of the sibling subtree")
    left_idx: int = Field(..., ge=0, description="First leaf index covered by the sibling")
    right_idx: int = Field(..., ge=0, description="Last leaf index covered by the sibling")

    @classmethod
    def from_proof_node(cls, node: ProofNode) -> "ProofNodeModel":
        return cls(hash=node.hash, left_idx=node.left_idx, right_idx=node.right_idx)


class ProofResponse(BaseModel):
    """Response for GET /proofs/{index} endpoint."""

    ok: bool = Field(..., description="Whether the proof was generated")
    file_index: int = Field(..., description="Index of the proven file")
    root_hash: str = Field(..., description="Root hash of the tree the proof was taken from")
    proofs: list[ProofNodeModel] = Field(
        default_factory=list,
        description="Sibling descriptors ordered leaf-to-root",
    )


class ErrorDetail(BaseModel):
    """Detailed error information."""

    code: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response."""

    ok: bool = False
    error: ErrorDetail = Field(..., description="Error details")
