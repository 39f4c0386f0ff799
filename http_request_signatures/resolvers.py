import logging
import urllib.parse
from typing import Dict, List

from .exceptions import KeyStoreException
from .keys import Key
from .structures import CaseInsensitiveDict

logger = logging.getLogger(__name__)


class HTTPSignatureComponentResolver:
    """
    Adapts a request object to the values a signing string is built from. The message must expose ``method``,
    ``url`` (or a ``path_url`` as on ``requests`` prepared requests) and ``headers``. Header containers that keep
    repeated fields (``getlist`` or ``get_all``) yield every occurrence in order; plain mappings yield at most one.
    """

    multi_value_accessors = ("getlist", "get_all")

    def __init__(self, message):
        self.message = message
        self.headers = message.headers

    def get_header(self, name: str) -> List[str]:
        for accessor in self.multi_value_accessors:
            if hasattr(self.headers, accessor):
                values = getattr(self.headers, accessor)(name) or []
                return [self._to_str(value) for value in values]
        value = CaseInsensitiveDict(self.headers).get(name)
        if value is None:
            return []
        return [self._to_str(value)]

    @staticmethod
    def _to_str(value) -> str:
        if isinstance(value, bytes):
            value = value.decode("latin-1")
        return str(value).strip()

    def get_method(self) -> str:
        return self.message.method.lower()

    def get_path(self) -> str:
        path_url = getattr(self.message, "path_url", None)
        if path_url:
            return path_url
        url = urllib.parse.urlsplit(self.message.url)
        path = url.path or "/"
        if url.query:
            path += "?" + url.query
        return path

    def get_request_target(self) -> str:
        return f"{self.get_method()} {self.get_path()}"


class HTTPSignatureKeyStore:
    def fetch(self, key_id: str) -> Key:
        raise NotImplementedError("This method must be implemented by a subclass.")


class KeyStore(HTTPSignatureKeyStore):
    "Key store backed by a mapping of keyId to a Key or to key material (shared secret or PEM)."

    def __init__(self, keys: Dict[str, object]):
        self.keys = {}
        for key_id, material in keys.items():
            self.keys[key_id] = material if isinstance(material, Key) else Key(key_id, material)

    def fetch(self, key_id: str) -> Key:
        if key_id not in self.keys:
            raise KeyStoreException(f"Key '{key_id}' not found")
        logger.debug("Resolved key %s", key_id)
        return self.keys[key_id]
