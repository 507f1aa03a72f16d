# -*- coding: utf-8 -*-
"""Element level rules of the SAML Core document."""
from compliance import log
from compliance.clauses import violation
from compliance.navigation import children, xsi_type
from compliance.rules import Rule, RuleSet
from compliance.settings import STATEMENT_TAGS, VERSION, XMLENC_ELEMENT

logger = log.logger


def verify_encrypted_id(response):
    """
    2.2.4 Element <EncryptedID>
    """
    encrypted_ids = children(response, 'EncryptedID')
    if any(not children(encrypted_id, 'EncryptedData') for encrypted_id in encrypted_ids):
        raise violation('SAMLCore.2.2.4_a')
    _verify_encrypted_data(encrypted_ids, 'SAMLCore.2.2.4_b')


def verify_assertion(response):
    """
    2.3.3 Element <Assertion>
    """
    for assertion in children(response, 'Assertion'):
        if (assertion.get('Version') != VERSION or
                assertion.get('ID') is None or
                assertion.get('IssueInstant') is None):
            raise violation('SAMLCore.2.3.3_a')

        if not children(assertion, 'Issuer'):
            raise violation('SAMLCore.2.3.3_b')

        if any(xsi_type(statement) is None for statement in children(assertion, 'Statement')):
            raise violation('SAMLCore.2.3.3_c')

        # an assertion asserting nothing must still identify a principal
        has_statements = any(children(assertion, tag) for tag in STATEMENT_TAGS)
        if not has_statements and not children(assertion, 'Subject'):
            raise violation('SAMLCore.2.3.3_d')


def verify_encrypted_assertion(response):
    """
    2.3.4 Element <EncryptedAssertion>
    """
    _verify_encrypted_data(children(response, 'EncryptedAssertion'), 'SAMLCore.2.3.4_a')


def _verify_encrypted_data(containers, clause):
    """
    The Type attribute of <EncryptedData> SHOULD be present and, if present,
    MUST contain a value of http://www.w3.org/2001/04/xmlenc#Element.

    Args:
        containers (list): elements holding the <EncryptedData> children.
        clause (str): identifier of the clause to report.
    """
    for container in containers:
        for encrypted_data in children(container, 'EncryptedData'):
            data_type = encrypted_data.get('Type')
            if data_type is not None and data_type != XMLENC_ELEMENT:
                raise violation(clause)


CORE_RULES = RuleSet([
    Rule('core encrypted id', verify_encrypted_id),
    Rule('core assertion', verify_assertion),
    Rule('core encrypted assertion', verify_encrypted_assertion),
])


def verify_core(response):
    logger.debug('verifying response against the Core document')
    CORE_RULES.run(response)
