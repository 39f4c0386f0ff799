import base64
import binascii
import hmac
import logging
from typing import Optional, Union

from .algorithms import AlgorithmFamily, HTTPSignatureAlgorithm, RSAAlgorithm, create_algorithm
from .exceptions import (
    HeaderException,
    KeyStoreException,
    SignatureParseException,
    SignedHeaderNotPresentException,
    UnknownKeyTypeException,
)
from .keys import Key, KeyType
from .parameters import SignatureParameters, SignatureParametersParser
from .resolvers import HTTPSignatureComponentResolver, HTTPSignatureKeyStore
from .structures import HeaderList, SignatureDates, VerifyResult

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = HeaderList(["date"])


class SigningString:
    """
    Canonical text covered by a signature: one ``<name>: <value>`` line per entry of the header list, in list order,
    joined by newlines.

    When a header occurs more than once in the message, the last occurrence is used.
    """

    def __init__(self, header_list: HeaderList, message, signature_dates: Optional[SignatureDates] = None,
                 component_resolver_class: type = HTTPSignatureComponentResolver):
        self.header_list = header_list
        self.signature_dates = signature_dates or SignatureDates()
        self.component_resolver = component_resolver_class(message)

    def _line(self, name: str) -> str:
        if name == "(request-target)":
            return f"{name}: {self.component_resolver.get_request_target()}"
        if name in ("(created)", "(expires)"):
            value = getattr(self.signature_dates, name[1:-1])
            if value is None:
                raise SignedHeaderNotPresentException(f"No value for pseudo-header '{name}'")
            return f"{name}: {value}"
        values = self.component_resolver.get_header(name)
        if not values:
            raise SignedHeaderNotPresentException(f"Header '{name}' not in message")
        return f"{name}: {values[-1]}"

    def string(self) -> str:
        signing_string = "\n".join(self._line(name) for name in self.header_list)
        logger.debug("Built signing string over headers %s", self.header_list)
        return signing_string

    def encode(self) -> bytes:
        return self.string().encode()

    def __str__(self) -> str:
        return self.string()


class Signature:
    def __init__(self, message, key: Key, algorithm: Union[HTTPSignatureAlgorithm, str], header_list: HeaderList,
                 signature_dates: Optional[SignatureDates] = None,
                 component_resolver_class: type = HTTPSignatureComponentResolver):
        if isinstance(algorithm, str):
            algorithm = create_algorithm(algorithm)
        self.key = key
        self.algorithm = algorithm
        self.header_list = header_list
        self.signature_dates = signature_dates or SignatureDates()
        self.signing_string = SigningString(header_list, message, self.signature_dates,
                                            component_resolver_class=component_resolver_class)

    @property
    def algorithm_id(self) -> str:
        "Name of the algorithm the signature is computed with; the key's hash takes precedence over the algorithm's."
        return f"{self.algorithm.family.value}-{self.key.hash_algorithm or self.algorithm.hash_name}"

    def sign(self) -> bytes:
        return self.algorithm.sign(self.key.signing_key, self.signing_string.encode(), self.key.hash_algorithm)

    def string(self) -> str:
        return base64.b64encode(self.sign()).decode()

    def signature_parameters(self) -> SignatureParameters:
        """
        Parameters for a ``Signature`` header value. Prefix ``str()`` of the result with ``"Signature "`` to use it as
        an ``Authorization`` header value.
        """
        parameters = SignatureParameters()
        parameters["keyId"] = self.key.key_id
        parameters["algorithm"] = self.algorithm_id
        if self.signature_dates.created is not None:
            parameters["created"] = str(self.signature_dates.created)
        if self.signature_dates.expires is not None:
            parameters["expires"] = str(self.signature_dates.expires)
        parameters["headers"] = str(self.header_list)
        parameters["signature"] = self.string()
        return parameters

    def __str__(self) -> str:
        return self.string()


class Verification:
    """
    Decides whether a message carries a valid signature in its ``Signature`` or ``Authorization`` header.

    A missing, repeated or mis-prefixed header is rejected when the Verification is constructed. After that,
    ``verify()`` is total: any condition meaning "this message is not validly signed" yields ``False``, while
    configuration faults (an unknown algorithm family, a key of unknown type) still raise.
    """

    header_kinds = {"signature": "Signature", "authorization": "Authorization"}
    authorization_scheme = "Signature "

    def __init__(self, message, key_store: HTTPSignatureKeyStore, header: str = "signature", *,
                 default_headers: HeaderList = DEFAULT_HEADERS,
                 component_resolver_class: type = HTTPSignatureComponentResolver):
        if header.lower() not in self.header_kinds:
            raise HeaderException(f"Unknown header type '{header}', cannot verify")
        self.message = message
        self.key_store = key_store
        self.header = self.header_kinds[header.lower()]
        self.default_headers = default_headers
        self.component_resolver_class = component_resolver_class
        header_values = component_resolver_class(message).get_header(self.header)
        if not header_values:
            raise HeaderException(f"Cannot locate header '{self.header}'")
        if len(header_values) > 1:
            raise HeaderException(f"Multiple headers named '{self.header}'")
        header_parameter_string = header_values[0]
        if self.header == "Authorization":
            if not header_parameter_string.startswith(self.authorization_scheme):
                raise HeaderException("Authorization header does not use the Signature scheme")
            header_parameter_string = header_parameter_string[len(self.authorization_scheme):]
        self.parameters: Optional[SignatureParameters] = None
        self._parse_error: Optional[SignatureParseException] = None
        try:
            self.parameters = SignatureParametersParser(header_parameter_string).parse()
        except SignatureParseException as e:
            self._parse_error = e

    def _parsed_parameters(self) -> SignatureParameters:
        if self.parameters is None:
            raise SignatureParseException(f"'{self.header}' header is malformed") from self._parse_error
        return self.parameters

    def header_list(self) -> HeaderList:
        parameters = self._parsed_parameters()
        if "headers" not in parameters:
            return self.default_headers
        try:
            return HeaderList.from_string(parameters["headers"])
        except HeaderException as e:
            raise SignatureParseException(f"Malformed headers parameter: {e}") from e

    def verify(self) -> bool:
        return self.result().verified

    def result(self) -> VerifyResult:
        try:
            return self._verify()
        except (SignatureParseException, KeyStoreException, SignedHeaderNotPresentException) as e:
            logger.info("Rejected %s header: %s", self.header, e)
            return VerifyResult(verified=False, key_id=None, algorithm=None, headers=None, signing_string=None,
                                reason=str(e))

    def _verify(self) -> VerifyResult:
        parameters = self._parsed_parameters()
        parameters.require("keyId", "algorithm", "signature")
        key = self.key_store.fetch(parameters["keyId"])
        header_list = self.header_list()
        signature_dates = SignatureDates.from_parameters(parameters)
        if key.type == KeyType.SECRET:
            algorithm = create_algorithm(parameters["algorithm"])
            mismatch = self._key_mismatch(key, algorithm, AlgorithmFamily.HMAC)
            if mismatch:
                return self._rejected(parameters, header_list, mismatch)
            expected = Signature(self.message, key, algorithm, header_list, signature_dates,
                                 component_resolver_class=self.component_resolver_class)
            signing_string = expected.signing_string.string()
            verified = hmac.compare_digest(expected.string().encode(), parameters["signature"].encode())
        elif key.type == KeyType.ASYMMETRIC:
            mismatch = self._key_mismatch(key, create_algorithm(parameters["algorithm"]), AlgorithmFamily.RSA)
            if mismatch:
                return self._rejected(parameters, header_list, mismatch)
            algorithm = RSAAlgorithm(parameters["algorithm"].split("-")[1])
            signing_string = SigningString(header_list, self.message, signature_dates,
                                           component_resolver_class=self.component_resolver_class).string()
            try:
                provided_signature = base64.b64decode(parameters["signature"], validate=True)
            except binascii.Error as e:
                raise SignatureParseException("Signature is not valid base64") from e
            verified = algorithm.verify(signing_string.encode(), provided_signature, key.verifying_key)
        else:
            raise UnknownKeyTypeException(f"Unknown key type '{key.type}', cannot verify")
        if not verified:
            logger.info("Signature mismatch for keyId %s", parameters["keyId"])
        return VerifyResult(verified=verified,
                            key_id=parameters["keyId"],
                            algorithm=algorithm.algorithm_id,
                            headers=header_list,
                            signing_string=signing_string,
                            reason=None if verified else "Invalid signature")

    @staticmethod
    def _key_mismatch(key: Key, algorithm: HTTPSignatureAlgorithm, family: AlgorithmFamily) -> Optional[str]:
        if algorithm.family != family:
            return f'Algorithm "{algorithm.algorithm_id}" cannot be used with a {key.type.value} key'
        if key.hash_algorithm is not None and key.hash_algorithm.lower() != algorithm.hash_name:
            return f'Algorithm "{algorithm.algorithm_id}" does not match the hash of key \'{key.key_id}\''
        return None

    def _rejected(self, parameters: SignatureParameters, header_list: HeaderList, reason: str) -> VerifyResult:
        logger.info("Rejected %s header: %s", self.header, reason)
        return VerifyResult(verified=False, key_id=parameters["keyId"], algorithm=parameters["algorithm"],
                            headers=header_list, signing_string=None, reason=reason)
