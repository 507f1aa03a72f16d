# -*- coding: utf-8 -*-
"""
Binding rules for responses delivered through HTTP-Redirect (3.4) and
HTTP-POST (3.5).

`session.parameters` holds the raw values: the query string parameters
still URL-encoded for HTTP-Redirect, the form controls for HTTP-POST.
"""
import base64
import binascii
import re
import zlib
from urllib.parse import unquote_plus

from compliance import log
from compliance.clauses import violation
from compliance.crypto import HTTPPostSignatureVerifier, verify_signature
from compliance.exceptions import SignatureVerificationError
from compliance.navigation import is_signed
from compliance.rules import Rule, RuleSet
from compliance.settings import RELAY_STATE_MAX_BYTES

logger = log.logger

_MALFORMED_ESCAPE = re.compile(r'%(?![0-9A-Fa-f]{2})')


def _byte_length(value):
    return len(value.encode('utf-8'))


def _verify_destination(session, clause):
    if session.response.get('Destination') != session.expected.recipient:
        raise violation(clause)


# HTTP-Redirect

def decode_relay_state(encoded_relay_state):
    """
    3.4.4.1 DEFLATE Encoding

    Percent-decodes a RelayState query string value. Malformed escapes and
    escapes that do not form UTF-8 are encoding violations.
    """
    if _MALFORMED_ESCAPE.search(encoded_relay_state):
        raise violation('SAMLBindings.3.4.4.1_c1')
    try:
        return unquote_plus(encoded_relay_state, errors='strict')
    except UnicodeDecodeError as e:
        raise violation('SAMLBindings.3.4.4.1_c1', cause=e)


def verify_redirect_saml_response(session):
    """
    3.4.4.1 DEFLATE Encoding
    """
    saml_response = session.parameters.get('SAMLResponse')
    if saml_response is None:
        return
    try:
        decoded = base64.b64decode(unquote_plus(saml_response), validate=True)
        zlib.decompress(decoded, -15)
    except (binascii.Error, ValueError, zlib.error) as e:
        raise violation('SAMLBindings.3.4.4.1_a', cause=e)


def verify_redirect_relay_state(session):
    """
    3.4.3 RelayState
    3.4.4.1 DEFLATE Encoding
    """
    encoded_relay_state = session.parameters.get('RelayState')
    if encoded_relay_state is None:
        return

    relay_state = decode_relay_state(encoded_relay_state)
    if _byte_length(relay_state) > RELAY_STATE_MAX_BYTES:
        raise violation('SAMLBindings.3.4.3_a')

    if session.relay_state_expected:
        expected = session.expected.relay_state
        if relay_state != expected:
            # the raw value matching means the sender did not encode it
            if encoded_relay_state == expected:
                raise violation('SAMLBindings.3.4.4.1_c1')
            raise violation('SAMLBindings.3.4.3_b1')


def verify_redirect_signature(session):
    """
    3.4.4.1 DEFLATE Encoding
    """
    parameters = session.parameters
    signature = parameters.get('Signature')
    if signature is None:
        return
    try:
        verified = verify_signature(
            'SAMLResponse',
            parameters.get('SAMLResponse'),
            parameters.get('RelayState'),
            signature,
            parameters.get('SigAlg'),
            session.metadata.signing_certificate,
        )
    except SignatureVerificationError as e:
        raise violation('SAMLBindings.3.4.4.1_d', cause=e)
    if not verified:
        raise violation('SAMLBindings.3.4.4.1_d')


def verify_redirect_sig_alg(session):
    """
    Any algorithm is accepted here: an unsupported one already fails the
    signature rule because it cannot be verified.
    """
    sig_alg = session.parameters.get('SigAlg')
    if sig_alg is None:
        return
    logger.debug('signature algorithm {}'.format(unquote_plus(sig_alg)))


def verify_redirect_destination(session):
    """
    3.4.5.2 Security Considerations
    """
    if session.parameters.get('Signature') is None:
        return
    _verify_destination(session, 'SAMLBindings.3.4.5.2_a')


REDIRECT_RULES = RuleSet([
    Rule('redirect saml response', verify_redirect_saml_response),
    Rule('redirect relay state', verify_redirect_relay_state),
    Rule('redirect signature', verify_redirect_signature),
    Rule('redirect signature algorithm', verify_redirect_sig_alg),
    Rule('redirect destination', verify_redirect_destination),
])


def verify_redirect(session):
    logger.debug('verifying response against the HTTP-Redirect binding')
    REDIRECT_RULES.run(session)


# HTTP-POST

def verify_post_saml_response(session):
    """
    3.5.4 Message Encoding
    """
    saml_response = session.parameters.get('SAMLResponse')
    if saml_response is None:
        return
    try:
        base64.b64decode(''.join(saml_response.split()), validate=True)
    except (binascii.Error, ValueError) as e:
        raise violation('SAMLBindings.3.5.4_a', cause=e)


def verify_post_relay_state(session):
    """
    3.5.3 RelayState
    """
    relay_state = session.parameters.get('RelayState')
    if relay_state is None:
        return

    if _byte_length(relay_state) > RELAY_STATE_MAX_BYTES:
        raise violation('SAMLBindings.3.5.3_a')

    if session.relay_state_expected and relay_state != session.expected.relay_state:
        raise violation('SAMLBindings.3.5.3_b1')


def verify_post_signature(session):
    if not is_signed(session.response):
        return
    verifier = HTTPPostSignatureVerifier(
        session.metadata.signing_certificate, session.response
    )
    try:
        verifier.verify()
    except SignatureVerificationError as e:
        raise violation('SAMLCore.5.4_a', cause=e)


def verify_post_destination(session):
    """
    3.5.5.2 Security Considerations
    """
    if not is_signed(session.response):
        return
    _verify_destination(session, 'SAMLBindings.3.5.5.2_a')


POST_RULES = RuleSet([
    Rule('post saml response', verify_post_saml_response),
    Rule('post relay state', verify_post_relay_state),
    Rule('post signature', verify_post_signature),
    Rule('post destination', verify_post_destination),
])


def verify_post(session):
    logger.debug('verifying response against the HTTP-POST binding')
    POST_RULES.run(session)
