# -*- coding: utf-8 -*-
"""
Single Sign-On profile rules, 4.1.4.2 <Response> Usage.
"""
from compliance import log
from compliance.clauses import violation
from compliance.navigation import children, is_signed, local_name, text
from compliance.rules import Rule, RuleSet
from compliance.settings import NAMEID_FORMAT_ENTITY, SCM_BEARER

logger = log.logger


def verify_issuer(node, metadata):
    """
    Checks the <Issuer> child of `node` against the IdP metadata.

    Args:
        node: a <Response> or <Assertion> element.
        metadata (MetadataContext): the IdP metadata of the session.
    """
    issuers = children(node, 'Issuer')
    if len(issuers) != 1:
        raise violation('SAMLProfiles.4.1.4.2_a')

    issuer = issuers[0]
    if text(issuer) != metadata.entity_id:
        raise violation('SAMLProfiles.4.1.4.2_b')

    issuer_format = issuer.get('Format')
    if issuer_format is not None and issuer_format != NAMEID_FORMAT_ENTITY:
        raise violation('SAMLProfiles.4.1.4.2_c')


def verify_response_issuer(session):
    response = session.response
    signed = is_signed(response) or any(
        is_signed(assertion) for assertion in children(response, 'Assertion')
    )
    if local_name(response) == 'Response' and signed:
        verify_issuer(response, session.metadata)


def verify_sso_assertions(session):
    assertions = children(session.response, 'Assertion')
    if not assertions:
        raise violation('SAMLProfiles.4.1.4.2_d')

    for assertion in assertions:
        verify_issuer(assertion, session.metadata)
        subject = _verify_subject(assertion)
        _verify_bearer_confirmations(subject, session.expected)
        _verify_authn_statements(assertion, session.metadata)
        _verify_audience_restriction(assertion, session.expected)


def _verify_subject(assertion):
    subjects = children(assertion, 'Subject')
    if len(subjects) != 1:
        raise violation('SAMLProfiles.4.1.4.2_g')
    return subjects[0]


def _verify_bearer_confirmations(subject, expected):
    bearer_confirmations = [
        confirmation for confirmation in children(subject, 'SubjectConfirmation')
        if confirmation.get('Method') == SCM_BEARER
    ]
    if not bearer_confirmations:
        raise violation('SAMLProfiles.4.1.4.2_h')

    confirmation_data = [
        data
        for confirmation in bearer_confirmations
        for data in children(confirmation, 'SubjectConfirmationData')
    ]
    data_with_not_before = [
        data for data in confirmation_data if data.get('NotBefore') is not None
    ]
    conforming_data = [
        data for data in confirmation_data
        if data.get('Recipient') == expected.recipient and
        data.get('InResponseTo') == expected.in_response_to and
        data.get('NotOnOrAfter') is not None
    ]
    if data_with_not_before and not conforming_data:
        raise violation('SAMLProfiles.4.1.4.2_h')


def _verify_authn_statements(assertion, metadata):
    authn_statements = children(assertion, 'AuthnStatement')
    if not authn_statements:
        raise violation('SAMLProfiles.4.1.4.2_j')

    # session tracking is mandatory as soon as the IdP supports logout
    if metadata.single_logout_services:
        if any(statement.get('SessionIndex') is None for statement in authn_statements):
            raise violation('SAMLProfiles.4.1.4.2_k')


def _verify_audience_restriction(assertion, expected):
    conditions = children(assertion, 'Conditions')
    if not conditions:
        return

    restrictions = children(conditions[0], 'AudienceRestriction')
    if not restrictions:
        raise violation('SAMLProfiles.4.1.4.2_l')

    audiences = children(restrictions[0], 'Audience')
    if not audiences or text(audiences[0]) != expected.audience:
        raise violation('SAMLProfiles.4.1.4.2_l')


SSO_RULES = RuleSet([
    Rule('sso response issuer', verify_response_issuer),
    Rule('sso assertions', verify_sso_assertions),
])


def verify_sso(session):
    logger.debug('verifying response against the SSO profile')
    SSO_RULES.run(session)
