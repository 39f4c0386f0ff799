import enum
from typing import Optional

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from .exceptions import AlgorithmException, KeyException

hash_algorithms = {
    "sha1": hashes.SHA1,
    "sha256": hashes.SHA256,
    "sha384": hashes.SHA384,
    "sha512": hashes.SHA512,
}


class AlgorithmFamily(enum.Enum):
    HMAC = "hmac"
    RSA = "rsa"


class HTTPSignatureAlgorithm:
    family: AlgorithmFamily

    def __init__(self, hash_algorithm: str = "sha256"):
        self.hash_name = self._check_hash_name(hash_algorithm)

    @property
    def algorithm_id(self) -> str:
        return f"{self.family.value}-{self.hash_name}"

    @staticmethod
    def _check_hash_name(hash_name: str) -> str:
        if hash_name.lower() not in hash_algorithms:
            raise AlgorithmException(f'Unsupported hash algorithm "{hash_name}"')
        return hash_name.lower()

    def _hash(self, hash_algorithm: Optional[str] = None) -> hashes.HashAlgorithm:
        hash_name = self.hash_name if hash_algorithm is None else self._check_hash_name(hash_algorithm)
        return hash_algorithms[hash_name]()

    def sign(self, key, message: bytes, hash_algorithm: Optional[str] = None) -> bytes:
        raise NotImplementedError("This method must be implemented by a subclass.")

    def verify(self, message: bytes, signature: bytes, key) -> bool:
        raise NotImplementedError("This method must be implemented by a subclass.")

    def __repr__(self):
        return f"{self.__class__.__name__}({self.hash_name!r})"


class HMACAlgorithm(HTTPSignatureAlgorithm):
    """
    Keyed-hash signatures over a shared secret. There is no verify operation: the verifier recomputes the expected
    signature and compares it in constant time.
    """

    family = AlgorithmFamily.HMAC

    def sign(self, key, message: bytes, hash_algorithm: Optional[str] = None) -> bytes:
        if not isinstance(key, bytes):
            raise KeyException("HMAC signatures require a shared secret")
        hasher = hmac.HMAC(key, algorithm=self._hash(hash_algorithm))
        hasher.update(message)
        return hasher.finalize()


class RSAAlgorithm(HTTPSignatureAlgorithm):
    family = AlgorithmFamily.RSA

    def __init__(self, hash_algorithm: str = "sha256"):
        super().__init__(hash_algorithm)
        self.padding: padding.AsymmetricPadding = padding.PKCS1v15()

    def sign(self, key, message: bytes, hash_algorithm: Optional[str] = None) -> bytes:
        if not isinstance(key, rsa.RSAPrivateKey):
            raise KeyException("Unexpected private key type")
        return key.sign(message, self.padding, self._hash(hash_algorithm))

    def verify(self, message: bytes, signature: bytes, key) -> bool:
        if not isinstance(key, rsa.RSAPublicKey):
            raise KeyException("Unexpected public key type")
        try:
            key.verify(signature, message, self.padding, self._hash())
        except InvalidSignature:
            return False
        return True


signature_algorithms = {
    AlgorithmFamily.HMAC: HMACAlgorithm,
    AlgorithmFamily.RSA: RSAAlgorithm,
}


def create_algorithm(name: str) -> HTTPSignatureAlgorithm:
    "Resolve an algorithm name of the form ``<family>-<hash>``, e.g. ``hmac-sha256`` or ``rsa-sha512``."
    family_name, _, hash_name = name.lower().partition("-")
    if not hash_name:
        raise AlgorithmException(f'Malformed algorithm name "{name}"')
    try:
        family = AlgorithmFamily(family_name)
    except ValueError as e:
        raise AlgorithmException(f'Unknown algorithm family "{family_name}"') from e
    return signature_algorithms[family](hash_name)
