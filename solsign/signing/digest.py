import hashlib


def document_hash(pdf_bytes: bytes) -> str:
    """Hex SHA-256 of the original, pre-export document bytes."""
    return hashlib.sha256(pdf_bytes).hexdigest()
