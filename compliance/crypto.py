# -*- coding: utf-8 -*-
import base64
import binascii
from urllib.parse import unquote_plus

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives.asymmetric.padding import PKCS1v15
from cryptography.hazmat.primitives.hashes import SHA1, SHA224, SHA256, SHA384, SHA512
from cryptography.x509 import load_pem_x509_certificate
from lxml.etree import tostring
from signxml import DigestAlgorithm, SignatureConfiguration, SignatureMethod, XMLVerifier
from signxml.exceptions import InvalidDigest, InvalidInput, InvalidSignature as InvalidSignature_

from compliance import log
from compliance.exceptions import SignatureVerificationError
from compliance.settings import (
    SIG_RSA_SHA1, SIG_RSA_SHA224, SIG_RSA_SHA256, SIG_RSA_SHA384, SIG_RSA_SHA512, SIGNED_PARAMS, SUPPORTED_ALGORITHMS,
)

logger = log.logger


def pem_format(cert):
    return '\n'.join([
        '-----BEGIN CERTIFICATE-----',
        cert,
        '-----END CERTIFICATE-----',
    ])


def normalize_x509(cert):
    if isinstance(cert, bytes):
        cert = cert.decode('ascii')
    return ''.join(
        cert.replace(
            '-----BEGIN CERTIFICATE-----', ''
        ).replace(
            '-----END CERTIFICATE-----', ''
        ).strip().split()
    )


def load_certificate(cert):
    cert = normalize_x509(cert)
    return load_pem_x509_certificate(
        pem_format(cert).encode('ascii'), backend=default_backend()
    )


class RSAVerifier(object):

    def __init__(self, digest, padding=None):
        self._digest = digest
        self._padding = padding or PKCS1v15()

    def verify(self, pubkey, signed_data, signature):
        try:
            pubkey.verify(signature, signed_data, self._padding, self._digest)
        except InvalidSignature:
            return False
        else:
            return True


RSA_VERIFIERS = {
    SIG_RSA_SHA1: RSAVerifier(SHA1()),
    SIG_RSA_SHA224: RSAVerifier(SHA224()),
    SIG_RSA_SHA256: RSAVerifier(SHA256()),
    SIG_RSA_SHA384: RSAVerifier(SHA384()),
    SIG_RSA_SHA512: RSAVerifier(SHA512()),
}


class HTTPRedirectSignatureVerifier(object):
    """
    Verify the signature of an HTTP-Redirect query string.

    `parameters` holds the query string values exactly as received, i.e.
    still URL-encoded: the signature covers the encoded octets.
    """

    def __init__(self, certificate, parameters, saml_type='SAMLResponse', verifiers=None):
        self._cert = certificate
        self._parameters = parameters
        self._saml_type = saml_type
        self._verifiers = verifiers or RSA_VERIFIERS

    @property
    def _supported_algorithms(self):
        return ', '.join(SUPPORTED_ALGORITHMS)

    def verify(self):
        verifier = self._get_verifier()
        pubkey = self._get_pubkey()
        return verifier.verify(pubkey, self._build_signed_data(), self._decode_signature())

    def _extract(self, key):
        value = self._parameters.get(key)
        if value is None:
            self._fail("Missing query string parameter: '{}'".format(key))
        return value

    @staticmethod
    def _fail(message):
        raise SignatureVerificationError(message)

    def _get_verifier(self):
        sig_alg = unquote_plus(self._extract('SigAlg'))
        try:
            return self._verifiers[sig_alg]
        except KeyError:
            self._fail(
                "Algorithm '{}' is unknown or not supported. Supported "
                "algorithms: {}".format(sig_alg, self._supported_algorithms)
            )

    def _get_pubkey(self):
        if not self._cert:
            self._fail('No signing certificate available.')
        try:
            return load_certificate(self._cert).public_key()
        except (ValueError, TypeError, UnicodeError) as e:
            self._fail('Unable to load the signing certificate: {}'.format(e))

    def _decode_signature(self):
        signature = unquote_plus(self._extract('Signature'))
        try:
            return base64.b64decode(signature, validate=True)
        except (binascii.Error, ValueError):
            self._fail("Unable to decode the 'Signature' parameter.")

    def _build_signed_data(self):
        keys = [self._saml_type] + SIGNED_PARAMS[1:]
        signed_data = '&'.join(
            '{}={}'.format(key, self._parameters[key])
            for key in keys
            if self._parameters.get(key) is not None
        )
        try:
            return signed_data.encode('ascii')
        except UnicodeEncodeError:
            self._fail('The signed query string is not URL-encoded.')


def verify_signature(saml_type, saml_message, relay_state, signature, sig_alg, certificate):
    """
    Check a detached HTTP-Redirect signature.

    Returns:
        True if the signature matches, False otherwise.

    Raises:
        SignatureVerificationError: If the input cannot be verified at all
            (malformed signature, unsupported algorithm, bad certificate).
    """
    logger.debug('http-redirect signature verification')
    logger.debug('message type {}'.format(saml_type))
    parameters = {
        saml_type: saml_message,
        'RelayState': relay_state,
        'Signature': signature,
        'SigAlg': sig_alg,
    }
    verifier = HTTPRedirectSignatureVerifier(certificate, parameters, saml_type)
    return verifier.verify()


# Same algorithms as the HTTP-Redirect verifiers, SHA1 included.
POST_SIGNATURE_CONFIG = SignatureConfiguration(
    signature_methods=frozenset(SignatureMethod(alg) for alg in SUPPORTED_ALGORITHMS),
    digest_algorithms=frozenset([
        DigestAlgorithm.SHA1,
        DigestAlgorithm.SHA224,
        DigestAlgorithm.SHA256,
        DigestAlgorithm.SHA384,
        DigestAlgorithm.SHA512,
    ]),
)


class HTTPPostSignatureVerifier(object):
    """
    Verify the enveloped XML signature of an HTTP-POST message.
    """

    def __init__(self, certificate, document, verifier=None, config=None):
        self._cert = certificate
        self._document = document
        self._verifier = verifier or XMLVerifier()
        self._config = config or POST_SIGNATURE_CONFIG

    def verify(self):
        if not self._cert:
            self._fail('No signing certificate available.')
        self._verify_signature()

    @staticmethod
    def _fail(message):
        raise SignatureVerificationError(message)

    def _verify_signature(self):
        logger.debug('http-post signature verification')
        try:
            self._verifier.verify(
                tostring(self._document),
                x509_cert=pem_format(normalize_x509(self._cert)),
                expect_config=self._config,
            )
        except InvalidDigest:
            self._fail('The digest value is not valid.')
        except InvalidSignature_:
            self._fail('Signature verification failed.')
        except InvalidInput as e:
            self._fail('Malformed signature: {}'.format(e))
