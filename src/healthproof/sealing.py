from __future__ import annotations

import hashlib
import hmac
import secrets
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, Tuple

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec

SUPPORTED_SCHEMES = ("hmac-sha256", "ecdsa-p256")


class Sealer(Protocol):
    scheme: str

    def seal(self, digest: bytes) -> bytes: ...

    def check(self, digest: bytes, seal: bytes) -> bool: ...


def generate_hmac_key(num_bytes: int = 32) -> bytes:
    if num_bytes <= 0:
        raise ValueError("Sealing key length must be positive.")
    return secrets.token_bytes(num_bytes)


def generate_ecdsa_keypair() -> Tuple[bytes, bytes]:
    private_key = ec.generate_private_key(ec.SECP256R1())
    priv_der = private_key.private_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    pub_der = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return priv_der, pub_der


@dataclass
class HMACSealer:
    key: bytes
    scheme: str = "hmac-sha256"

    def __post_init__(self) -> None:
        if not self.key:
            raise ValueError("Sealing key must be non-empty for HMAC sealer.")

    def seal(self, digest: bytes) -> bytes:
        return hmac.new(self.key, digest, hashlib.sha256).digest()

    def check(self, digest: bytes, seal: bytes) -> bool:
        expected = hmac.new(self.key, digest, hashlib.sha256).digest()
        return hmac.compare_digest(expected, seal)


@dataclass
class ECDSASealer:
    private_key_der: Optional[bytes]
    public_key_der: Optional[bytes]
    scheme: str = "ecdsa-p256"
    _priv: Any = field(default=None, init=False, repr=False)
    _pub: Any = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.public_key_der is None and self.private_key_der is None:
            raise ValueError("ECDSA sealer requires at least a public key.")

    def _load_private(self):
        if self._priv is None:
            if self.private_key_der is None:
                raise ValueError("ECDSA sealer has no private key for sealing.")
            self._priv = serialization.load_der_private_key(self.private_key_der, password=None)
        return self._priv

    def _load_public(self):
        if self._pub is None:
            if self.public_key_der is not None:
                self._pub = serialization.load_der_public_key(self.public_key_der)
            else:
                self._pub = self._load_private().public_key()
        return self._pub

    def seal(self, digest: bytes) -> bytes:
        return self._load_private().sign(digest, ec.ECDSA(hashes.SHA256()))

    def check(self, digest: bytes, seal: bytes) -> bool:
        if not seal:
            return False
        try:
            self._load_public().verify(seal, digest, ec.ECDSA(hashes.SHA256()))
        except InvalidSignature:
            return False
        return True


def create_sealer(scheme: str, private_key: bytes | None, public_key: bytes | None) -> Sealer:
    normalized = scheme.lower()
    if normalized in {"hmac", "hmac-sha256"}:
        if private_key is None:
            raise ValueError("HMAC sealer requires a secret key.")
        return HMACSealer(key=private_key)
    if normalized in {"ecdsa", "ecdsa-p256"}:
        return ECDSASealer(private_key_der=private_key, public_key_der=public_key)
    raise ValueError(f"Unsupported seal scheme: {scheme}")
