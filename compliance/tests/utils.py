# -*- coding: utf-8 -*-
import base64
import zlib
from urllib.parse import quote_plus

from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives.asymmetric.padding import PKCS1v15
from cryptography.hazmat.primitives.hashes import SHA1, SHA256, SHA512
from cryptography.hazmat.primitives.serialization import load_pem_private_key
from lxml.etree import fromstring as lxml_fromstring
from OpenSSL import crypto
from signxml import DigestAlgorithm, SignatureMethod, XMLSigner

from compliance.metadata import build_metadata_context
from compliance.navigation import fromstring
from compliance.session import Expectations, VerificationSession
from compliance.settings import (
    BINDING_HTTP_REDIRECT, NSMAP, SAML, SIG_RSA_SHA1, SIG_RSA_SHA256, SIG_RSA_SHA512, SIGNED_PARAMS,
)
from compliance.tests.data import sample_saml_responses as samples

_DIGESTS = {
    SIG_RSA_SHA1: SHA1,
    SIG_RSA_SHA256: SHA256,
    SIG_RSA_SHA512: SHA512,
}


def generate_certificate():
    key = crypto.PKey()
    key.generate_key(crypto.TYPE_RSA, 2048)
    cert = crypto.X509()
    cert.set_version(2)
    cert.set_serial_number(1)
    cert.get_subject().C = 'IT'
    cert.get_subject().CN = 'idp.example.org'
    cert.set_issuer(cert.get_subject())
    cert.gmtime_adj_notBefore(0)
    cert.gmtime_adj_notAfter(10 * 365 * 24 * 60 * 60)
    cert.set_pubkey(key)
    cert.sign(key, 'sha256')
    return (
        crypto.dump_privatekey(crypto.FILETYPE_PEM, key),
        crypto.dump_certificate(crypto.FILETYPE_PEM, cert),
    )


KEY, CERTIFICATE = generate_certificate()
OTHER_KEY, OTHER_CERTIFICATE = generate_certificate()


def deflate_and_base64_encode(msg):
    if not isinstance(msg, bytes):
        msg = msg.encode('utf-8')
    return base64.b64encode(zlib.compress(msg)[2:-4]).decode('ascii')


def sign_http_redirect(xmlstr, key=KEY, relay_state=None, sig_alg=SIG_RSA_SHA256):
    """
    Build the raw (URL-encoded) query string parameters of a signed
    HTTP-Redirect response.
    """
    args = {
        'SAMLResponse': deflate_and_base64_encode(xmlstr),
        'SigAlg': sig_alg,
    }
    if relay_state is not None:
        args['RelayState'] = relay_state
    parameters = {k: quote_plus(v) for k, v in args.items()}
    query_string = '&'.join(
        '{}={}'.format(k, parameters[k]) for k in SIGNED_PARAMS if k in parameters
    ).encode('ascii')
    private_key = load_pem_private_key(key, None, default_backend())
    signature = private_key.sign(query_string, PKCS1v15(), _DIGESTS[sig_alg]())
    parameters['Signature'] = quote_plus(base64.b64encode(signature).decode('ascii'))
    return parameters


class SHA1XMLSigner(XMLSigner):
    """signxml refuses SHA1 unless the deprecation check is switched off."""

    def check_deprecated_methods(self):
        pass


def sign_http_post(xmlstr, key=KEY, cert=CERTIFICATE, sha1=False):
    """
    Sign the response root with an enveloped XML signature.

    The document is parsed with the plain lxml parser, so indentation is
    kept in the signed tree as an identity provider would send it.
    """
    c14n = 'http://www.w3.org/2001/10/xml-exc-c14n#'
    if sha1:
        signer = SHA1XMLSigner(
            signature_algorithm=SignatureMethod.RSA_SHA1,
            digest_algorithm=DigestAlgorithm.SHA1,
            c14n_algorithm=c14n,
        )
    else:
        signer = XMLSigner(c14n_algorithm=c14n)
    root = lxml_fromstring(xmlstr)
    issuer = root.find('{%s}Issuer' % SAML)
    issuer.addnext(lxml_fromstring(
        '<ds:Signature xmlns:ds="http://www.w3.org/2000/09/xmldsig#" Id="placeholder"></ds:Signature>'))
    if isinstance(cert, bytes):
        cert = cert.decode('ascii')
    return signer.sign(root, key=key, cert=cert)


def find(node, path):
    return node.xpath(path, namespaces=NSMAP)[0]


def remove(node, path):
    for element in node.xpath(path, namespaces=NSMAP):
        element.getparent().remove(element)


def add_signature_placeholder(node):
    """Structural <ds:Signature> child, enough to mark `node` as signed."""
    node.insert(1, lxml_fromstring(
        '<ds:Signature xmlns:ds="http://www.w3.org/2000/09/xmldsig#"></ds:Signature>'))


def build_metadata(single_logout_services=(), certificate=CERTIFICATE):
    return build_metadata_context(samples.IDP_ENTITY_ID, certificate, single_logout_services)


def build_expectations(**overrides):
    values = {
        'relay_state': samples.RELAY_STATE,
        'in_response_to': samples.REQUEST_ID,
        'recipient': samples.ACS_URL,
        'audience': samples.SP_ENTITY_ID,
    }
    values.update(overrides)
    return Expectations(**values)


def build_session(response=None, metadata=None, expected=None, parameters=None,
                  relay_state_expected=False):
    if response is None:
        response = fromstring(samples.valid)
    return VerificationSession(
        response,
        metadata or build_metadata(),
        expected or build_expectations(),
        parameters,
        relay_state_expected,
    )


SLO = [(BINDING_HTTP_REDIRECT, 'https://idp.example.org/slo')]
