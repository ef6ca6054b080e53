"""
Vault CLI

Command-line client for the file vault: upload a batch, fetch files and
proofs, and verify downloads against the locally kept root hash.

Usage:
    python -m vault_cli upload --files-dir ./sample/files
    python -m vault_cli download --index 0 --out ./downloads/
    python -m vault_cli proof --index 0 --out ./proofs/
    python -m vault_cli verify --file ./downloads/file0.bin --index 0 \
        --proof ./proofs/proof_file0.json --root-hash merkle_root_hash.txt
"""

__version__ = "0.1.0"
