"""
Signing-certificate identity of the host application.
"""

import base64
import hashlib
import logging
import re
import ssl
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)

DELIMITER = "|"
PEM_HEADER = b"-----BEGIN CERTIFICATE-----"
PEM_BLOCK_RE = re.compile(
    rb"-----BEGIN CERTIFICATE-----.*?-----END CERTIFICATE-----", re.DOTALL
)


def _load_der_certificates(path: str) -> List[bytes]:
    """DER bytes of every certificate in the file (a PEM chain yields several)"""
    with open(path, "rb") as f:
        raw = f.read()

    if PEM_HEADER in raw:
        return [
            ssl.PEM_cert_to_DER_cert(block.decode("ascii"))
            for block in PEM_BLOCK_RE.findall(raw)
        ]
    return [raw]


def get_certificate_hash(cert_paths: Iterable[str]) -> Optional[str]:
    """
    Base64 SHA-1 of each signing certificate, joined by '|'.

    Returns:
        The joined hashes, or None when no certificate is configured or any
        certificate cannot be read
    """
    hashes = []
    try:
        for path in cert_paths:
            for der in _load_der_certificates(path):
                digest = hashlib.sha1(der).digest()
                hashes.append(base64.b64encode(digest).decode("ascii"))
    except (OSError, ValueError) as e:
        logger.debug(f"Certificate hash unavailable: {e}")
        return None

    if not hashes:
        return None
    return DELIMITER.join(hashes)
