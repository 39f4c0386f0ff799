import collections
import collections.abc
from typing import Iterable, Iterator, Mapping, Optional

from .exceptions import HeaderException, SignatureParseException

VerifyResult = collections.namedtuple("VerifyResult", "verified key_id algorithm headers signing_string reason")


class CaseInsensitiveDict(collections.abc.MutableMapping):
    def __init__(self, *args, **kwargs):
        self._data = {}
        self.update(*args, **kwargs)

    def __setitem__(self, key: str, value):
        self._data[key.lower()] = (key, value)

    def __getitem__(self, key: str):
        return self._data[key.lower()][1]

    def __delitem__(self, key: str):
        del self._data[key.lower()]

    def __iter__(self):
        return (original_key for original_key, _ in self._data.values())

    def __len__(self):
        return len(self._data)

    def __repr__(self):
        return f"{self.__class__.__name__}({dict(self.items())!r})"


class HeaderList:
    """
    Ordered list of lower-cased header names covered by a signature. The order defines the order of lines in the
    signing string. Pseudo-headers such as ``(request-target)`` may appear anywhere in the list.
    """

    def __init__(self, names: Iterable[str]):
        self.names = [str(name).lower() for name in names]
        if not self.names:
            raise HeaderException("Header list must name at least one header")
        if len(set(self.names)) != len(self.names):
            raise HeaderException(f'Header list "{self}" names a header more than once')

    @classmethod
    def from_string(cls, value: str) -> "HeaderList":
        return cls(value.split())

    def __iter__(self) -> Iterator[str]:
        return iter(self.names)

    def __len__(self) -> int:
        return len(self.names)

    def __eq__(self, other) -> bool:
        if not isinstance(other, HeaderList):
            return NotImplemented
        return self.names == other.names

    def __str__(self) -> str:
        return " ".join(self.names)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.names!r})"


class SignatureDates:
    "Timestamps rendered by the (created) and (expires) pseudo-headers."

    def __init__(self, created: Optional[int] = None, expires: Optional[int] = None):
        self.created = created
        self.expires = expires

    @classmethod
    def from_parameters(cls, parameters: Mapping[str, str]) -> "SignatureDates":
        dates = {}
        for name in "created", "expires":
            if name in parameters:
                if not (parameters[name].isascii() and parameters[name].isdigit()):
                    raise SignatureParseException(f'Malformed "{name}" parameter')
                dates[name] = int(parameters[name])
        return cls(**dates)
