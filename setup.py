#!/usr/bin/env python

from setuptools import find_packages, setup  # type: ignore

setup(
    name="http-request-signatures",
    version="0.1.0",
    license="Apache License 2.0",
    description="Signing strings, HMAC and RSA signatures for the draft-cavage HTTP Signatures scheme",
    long_description=open("README.rst").read(),
    install_requires=["http-sfv >= 0.9.3", "cryptography >= 36.0.2"],
    extras_require={
        "tests": [
            "flake8",
            "coverage",
            "build",
            "wheel",
            "mypy",
            "requests",
            "ruff",
        ]
    },
    packages=find_packages(exclude=["test"]),
    include_package_data=True,
    package_data={
        "http_request_signatures": ["py.typed"],
    },
    platforms=["MacOS X", "Posix"],
    test_suite="test",
    classifiers=[
        "Intended Audience :: Developers",
        "Operating System :: MacOS :: MacOS X",
        "Operating System :: POSIX",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
)
