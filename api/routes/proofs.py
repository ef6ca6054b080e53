"""
Proof Routes

Generate the Merkle proof for a stored file.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from api.deps import get_store
from api.errors import from_vault_exception
from api.models.responses import ProofNodeModel, ProofResponse
from core.merkle import generate_merkle_proof
from core.schemas.errors import VaultException
from core.store import FileStore


logger = logging.getLogger(__name__)

router = APIRouter(tags=["proofs"])


@router.get("/proofs/{index}", response_model=ProofResponse)
async def get_merkle_proof(
    index: int,
    store: FileStore = Depends(get_store),
) -> ProofResponse:
    """
    Return the sibling chain for the file at the given index.

    The proof and the returned root hash come from the same stored batch.
    """
    snapshot = store.snapshot()
    try:
        proofs = generate_merkle_proof(snapshot.tree, index)
    except VaultException as e:
        raise from_vault_exception(e)

    return ProofResponse(
        ok=True,
        file_index=index,
        root_hash=snapshot.tree.root_hash,
        proofs=[ProofNodeModel.from_proof_node(p) for p in proofs],
    )
