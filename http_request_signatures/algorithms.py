from ._algorithms import (  # noqa:F401
    AlgorithmFamily,
    HMACAlgorithm,
    HTTPSignatureAlgorithm,
    RSAAlgorithm,
    create_algorithm,
    hash_algorithms,
    signature_algorithms,
)
