import enum
from typing import Optional, Union

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.serialization import load_pem_private_key, load_pem_public_key

from .exceptions import KeyException

PEM_MARKER = b"-----BEGIN "


class KeyType(enum.Enum):
    SECRET = "secret"
    ASYMMETRIC = "asymmetric"


class Key:
    """
    Key material resolved from a key store.

    ``material`` may be a shared secret (``str`` or ``bytes``), PEM text holding a private key, a public key or an
    X.509 certificate, or an already loaded RSA key object. The key type follows from the shape of the material.
    """

    def __init__(self, key_id: str, material: Union[str, bytes, rsa.RSAPrivateKey, rsa.RSAPublicKey],
                 hash_algorithm: Optional[str] = None, password: Optional[bytes] = None):
        self._key_id = key_id
        self._hash_algorithm = hash_algorithm.lower() if hash_algorithm is not None else None
        self._secret: Optional[bytes] = None
        self._private_key: Optional[rsa.RSAPrivateKey] = None
        self._public_key: Optional[rsa.RSAPublicKey] = None
        if isinstance(material, (rsa.RSAPrivateKey, rsa.RSAPublicKey)):
            self._load_key_object(material)
        else:
            if isinstance(material, str):
                material = material.encode()
            if not isinstance(material, bytes):
                raise KeyException(f"Unsupported key material for key '{key_id}'")
            if material.lstrip().startswith(PEM_MARKER):
                self._load_pem(material, password=password)
            else:
                self._secret = material
        self._type = KeyType.SECRET if self._secret is not None else KeyType.ASYMMETRIC

    @property
    def key_id(self) -> str:
        return self._key_id

    @property
    def hash_algorithm(self) -> Optional[str]:
        return self._hash_algorithm

    @property
    def type(self) -> KeyType:
        return self._type

    def _load_key_object(self, key):
        if isinstance(key, rsa.RSAPrivateKey):
            self._private_key = key
            self._public_key = key.public_key()
        else:
            self._public_key = key

    def _load_pem(self, pem: bytes, password=None):
        try:
            if b"CERTIFICATE-----" in pem:
                key = x509.load_pem_x509_certificate(pem).public_key()
            elif b"PRIVATE KEY-----" in pem:
                key = load_pem_private_key(pem, password=password)
            else:
                key = load_pem_public_key(pem)
        except (ValueError, TypeError) as e:
            raise KeyException(f"Unable to load PEM material for key '{self.key_id}'") from e
        if not isinstance(key, (rsa.RSAPrivateKey, rsa.RSAPublicKey)):
            raise KeyException(f"Key '{self.key_id}' is not an RSA key")
        self._load_key_object(key)

    @property
    def signing_key(self):
        if self.type == KeyType.SECRET:
            return self._secret
        if self._private_key is None:
            raise KeyException(f"Key '{self.key_id}' has no private key to sign with")
        return self._private_key

    @property
    def verifying_key(self):
        if self.type == KeyType.SECRET:
            return self._secret
        return self._public_key

    def __repr__(self):
        return f"{self.__class__.__name__}(key_id={self.key_id!r}, type={self.type.value!r})"
