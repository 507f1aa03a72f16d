# -*- coding: utf-8 -*-
"""Catalogue of the normative clauses enforced by the verifiers.

Every violation raised by the engine carries one of the identifiers below.
Identifiers follow the ``<Document>.<Section>[_<letter>]`` scheme, where the
optional suffix picks the sentence inside the section, e.g.
``SAMLProfiles.4.1.4.2_a``.
"""
import re
from collections import namedtuple

from compliance.exceptions import (
    ClauseRegistryError, DuplicateClauseError, SAMLComplianceError, UnknownClauseError,
)
from compliance.settings import RELAY_STATE_MAX_BYTES, XMLENC_ELEMENT

Clause = namedtuple('Clause', ['identifier', 'document', 'section', 'message'])

CLAUSE_IDENTIFIER = re.compile(
    r'^(?P<document>SAMLCore|SAMLProfiles|SAMLBindings)'
    r'\.(?P<section>\d+(?:\.\d+)*)'
    r'(?:_(?P<letter>[a-z]\d*))?$'
)


class ClauseRegistry(object):

    def __init__(self):
        self._clauses = {}

    def register(self, identifier, message):
        match = CLAUSE_IDENTIFIER.match(identifier)
        if match is None:
            raise ClauseRegistryError(
                "Malformed clause identifier '{}'".format(identifier))
        if identifier in self._clauses:
            raise DuplicateClauseError(identifier)
        if not message or not message.strip():
            raise ClauseRegistryError(
                "Clause '{}' has no documented rule".format(identifier))
        clause = Clause(
            identifier, match.group('document'), match.group('section'), message
        )
        self._clauses[identifier] = clause
        return clause

    def get(self, identifier):
        try:
            return self._clauses[identifier]
        except KeyError:
            raise UnknownClauseError(identifier)

    def violation(self, identifier, cause=None):
        clause = self.get(identifier)
        return SAMLComplianceError(clause.identifier, clause.message, cause)

    def __contains__(self, identifier):
        return identifier in self._clauses

    def __iter__(self):
        return iter(sorted(self._clauses.values()))

    def __len__(self):
        return len(self._clauses)


CATALOGUE = [
    # Core
    ('SAMLCore.2.2.4_a',
     'The <EncryptedID> element MUST contain an <xenc:EncryptedData> element.'),
    ('SAMLCore.2.2.4_b',
     'The Type attribute of an <EncryptedData> inside <EncryptedID>, if present, '
     'MUST contain a value of {}.'.format(XMLENC_ELEMENT)),
    ('SAMLCore.2.3.3_a',
     'The Version attribute of an <Assertion> MUST be "2.0" and its ID and '
     'IssueInstant attributes are required.'),
    ('SAMLCore.2.3.3_b',
     'The <Issuer> element of an <Assertion> is required.'),
    ('SAMLCore.2.3.3_c',
     'An xsi:type attribute MUST be used to indicate the actual statement type '
     'of a <Statement> element.'),
    ('SAMLCore.2.3.3_d',
     'An assertion with no statements MUST contain a <Subject> element.'),
    ('SAMLCore.2.3.4_a',
     'The Type attribute of an <EncryptedData> inside <EncryptedAssertion>, if '
     'present, MUST contain a value of {}.'.format(XMLENC_ELEMENT)),
    ('SAMLCore.5.4_a',
     'A signed SAML message MUST carry an XML Signature that verifies against '
     'the signing key of its issuer.'),

    # Profiles
    ('SAMLProfiles.4.1.4.2_a',
     'The <Issuer> element MUST be present exactly once.'),
    ('SAMLProfiles.4.1.4.2_b',
     'The <Issuer> element MUST contain the unique identifier of the issuing '
     'identity provider.'),
    ('SAMLProfiles.4.1.4.2_c',
     'The Format attribute of <Issuer> MUST be omitted or have a value of '
     'urn:oasis:names:tc:SAML:2.0:nameid-format:entity.'),
    ('SAMLProfiles.4.1.4.2_d',
     'The <Response> MUST contain at least one <Assertion>.'),
    ('SAMLProfiles.4.1.4.2_g',
     'Any assertion issued for consumption using this profile MUST contain a '
     '<Subject> element.'),
    ('SAMLProfiles.4.1.4.2_h',
     'Any assertion issued for consumption using this profile MUST contain at '
     'least one bearer <SubjectConfirmation> whose <SubjectConfirmationData> '
     'carries Recipient, NotOnOrAfter and InResponseTo and MUST NOT contain '
     'a NotBefore attribute.'),
    ('SAMLProfiles.4.1.4.2_j',
     'The set of one or more bearer assertions MUST contain at least one '
     '<AuthnStatement>.'),
    ('SAMLProfiles.4.1.4.2_k',
     'If the identity provider supports the Single Logout profile, any '
     'authentication statements MUST include a SessionIndex attribute.'),
    ('SAMLProfiles.4.1.4.2_l',
     'Each bearer assertion MUST contain an <AudienceRestriction> including '
     "the service provider's unique identifier as an <Audience>."),

    # Bindings
    ('SAMLBindings.3.4.3_a',
     'RelayState data MUST NOT exceed {} bytes in length.'.format(RELAY_STATE_MAX_BYTES)),
    ('SAMLBindings.3.4.3_b1',
     'If a SAML request message is accompanied by RelayState data, the SAML '
     'responder MUST return its response using a binding that supports '
     'RelayState and MUST place the exact RelayState data it received with '
     'the request into the corresponding RelayState parameter.'),
    ('SAMLBindings.3.4.4.1_a',
     'The SAML protocol message MUST be DEFLATE-compressed, base64-encoded and '
     'URL-encoded into the SAMLResponse query string parameter.'),
    ('SAMLBindings.3.4.4.1_c1',
     'RelayState data, if included, MUST be URL-encoded exactly once into the '
     'RelayState query string parameter.'),
    ('SAMLBindings.3.4.4.1_d',
     'The signature of the query string MUST verify against the signing key '
     'of the sender.'),
    ('SAMLBindings.3.4.5.2_a',
     'If the message is signed, the Destination XML attribute in the root SAML '
     'element MUST contain the URL to which the sender has instructed the user '
     'agent to deliver the message.'),
    ('SAMLBindings.3.5.3_a',
     'RelayState data MUST NOT exceed {} bytes in length.'.format(RELAY_STATE_MAX_BYTES)),
    ('SAMLBindings.3.5.3_b1',
     'If a SAML request message is accompanied by RelayState data, the SAML '
     'responder MUST place the exact RelayState data it received with the '
     'request into the corresponding RelayState form control.'),
    ('SAMLBindings.3.5.4_a',
     'The SAML protocol message MUST be base64-encoded into the SAMLResponse '
     'form control.'),
    ('SAMLBindings.3.5.5.2_a',
     'If the message is signed, the Destination XML attribute in the root SAML '
     'element MUST contain the URL to which the sender has instructed the user '
     'agent to deliver the message.'),
]


registry = ClauseRegistry()
for _identifier, _message in CATALOGUE:
    registry.register(_identifier, _message)


def violation(identifier, cause=None):
    return registry.violation(identifier, cause)
