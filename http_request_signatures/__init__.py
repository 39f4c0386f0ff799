from . import algorithms  # noqa:F401
from .algorithms import HTTPSignatureAlgorithm, create_algorithm  # noqa:F401
from .exceptions import (  # noqa:F401
    AlgorithmException,
    HeaderException,
    HTTPSignaturesException,
    KeyException,
    KeyStoreException,
    SignatureParseException,
    SignedHeaderNotPresentException,
    UnknownKeyTypeException,
)
from .keys import Key, KeyType  # noqa:F401
from .parameters import SignatureParameters, SignatureParametersParser  # noqa:F401
from .resolvers import HTTPSignatureComponentResolver, HTTPSignatureKeyStore, KeyStore  # noqa:F401
from .signatures import DEFAULT_HEADERS, Signature, SigningString, Verification  # noqa:F401
from .structures import HeaderList, SignatureDates, VerifyResult  # noqa:F401
