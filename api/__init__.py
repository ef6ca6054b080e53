"""
Merkle Vault API (FastAPI)

HTTP API for the file vault:
- POST /upload - Upload an ordered batch of files
- GET /files/{index} - Download a file
- GET /proofs/{index} - Merkle proof for a file
- GET /health - Health check

Usage:
    uvicorn api.app:app --reload
"""

__version__ = "0.1.0"
