class HTTPSignaturesException(Exception):
    "Base class for exceptions raised by http_request_signatures"


class HeaderException(HTTPSignaturesException):
    "The signature-carrying header is missing, duplicated or malformed, or a header list is unusable"


class SignatureParseException(HTTPSignaturesException):
    "Class for exceptions raised while parsing the parameters of a Signature or Authorization header"


class KeyStoreException(HTTPSignaturesException):
    "No key is known for the requested keyId"


class SignedHeaderNotPresentException(HTTPSignaturesException):
    "A header named in the signed header list is absent from the message"


class AlgorithmException(HTTPSignaturesException):
    "Unknown or malformed signature algorithm"


class KeyException(HTTPSignaturesException):
    "Key material is unusable for the requested operation"


class UnknownKeyTypeException(KeyException):
    "The key store returned a key of a type that cannot be verified"
