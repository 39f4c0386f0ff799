import re
from collections import UserDict

from http_sfv.string import parse_string, ser_string

from .exceptions import SignatureParseException

PARAMETER_KEY = re.compile(rb"[A-Za-z][A-Za-z0-9_-]*")
HTTP_OWS = b" \t"
EQUALS = ord(b"=")
DQUOTE = ord(b'"')
COMMA = ord(b",")


def discard_http_ows(data: bytes, pos: int) -> int:
    while pos < len(data) and data[pos] in HTTP_OWS:
        pos += 1
    return pos


class SignatureParameters(UserDict):
    """
    Parameters carried by a ``Signature`` header, or by an ``Authorization`` header after its ``Signature`` scheme
    prefix, e.g. ``keyId="pda",algorithm="hmac-sha256",headers="(request-target) date",signature="..."``.

    Which parameters are mandatory depends on the caller; use ``require()`` to enforce them.
    """

    def require(self, *names: str) -> None:
        for name in names:
            if name not in self:
                raise SignatureParseException(f'Signature parameters do not contain "{name}"')

    def __str__(self) -> str:
        return ",".join(f"{key}={ser_string(str(value))}" for key, value in self.items())


class SignatureParametersParser:
    def __init__(self, header_parameter_string: str):
        self.header_parameter_string = header_parameter_string

    def parse(self) -> SignatureParameters:
        try:
            data = self.header_parameter_string.encode("ascii")
        except UnicodeEncodeError as e:
            raise SignatureParseException("Signature parameters contain non-ASCII characters") from e
        parameters = SignatureParameters()
        pos = discard_http_ows(data, 0)
        if pos == len(data):
            raise SignatureParseException("Signature parameters are empty")
        while True:
            match = PARAMETER_KEY.match(data, pos)
            if match is None:
                raise SignatureParseException(f"Expected a parameter name at offset {pos}")
            key = match.group().decode()
            pos = match.end()
            if pos == len(data) or data[pos] != EQUALS:
                raise SignatureParseException(f'Parameter "{key}" is not followed by "="')
            pos += 1
            if pos == len(data) or data[pos] != DQUOTE:
                raise SignatureParseException(f'Value of parameter "{key}" is not quoted')
            try:
                offset, value = parse_string(data[pos:])
            except ValueError as e:
                raise SignatureParseException(f'Malformed value for parameter "{key}"') from e
            pos += offset
            if key in parameters:
                raise SignatureParseException(f'Parameter "{key}" appears more than once')
            parameters[key] = value
            pos = discard_http_ows(data, pos)
            if pos == len(data):
                return parameters
            if data[pos] != COMMA:
                raise SignatureParseException(f'Parameter "{key}" has trailing characters')
            pos = discard_http_ows(data, pos + 1)
            if pos == len(data):
                raise SignatureParseException("Signature parameters have a trailing comma")
