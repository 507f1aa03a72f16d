import logging
import unittest
from unittest.mock import patch

import pytest

from compliance import verification
from compliance.exceptions import BadConfiguration, ComplianceViolations, SAMLComplianceError
from compliance.settings import BINDING_HTTP_POST, BINDING_HTTP_REDIRECT
from compliance.tests.data import sample_saml_responses as samples
from compliance.tests.utils import (
    SLO, build_metadata, build_session, find, remove, sign_http_post, sign_http_redirect,
)
from compliance.verification import get_response_verifier, verify_response


class ResponseVerifierTestCase(unittest.TestCase):

    def test_stages(self):
        self.assertEqual(get_response_verifier().stages, ['core', 'sso profile'])
        self.assertEqual(
            get_response_verifier(BINDING_HTTP_REDIRECT).stages,
            ['core', 'sso profile', 'redirect binding'],
        )
        self.assertEqual(
            get_response_verifier(BINDING_HTTP_POST).stages,
            ['core', 'sso profile', 'post binding'],
        )

    def test_unknown_binding(self):
        with pytest.raises(BadConfiguration):
            get_response_verifier('urn:oasis:names:tc:SAML:2.0:bindings:SOAP')

    def test_valid_response(self):
        self.assertIsNone(verify_response(build_session()))

    def test_valid_redirect_response(self):
        parameters = sign_http_redirect(samples.valid, relay_state=samples.RELAY_STATE)
        session = build_session(parameters=parameters, relay_state_expected=True)
        self.assertIsNone(verify_response(session, BINDING_HTTP_REDIRECT))

    def test_valid_post_response(self):
        signed = sign_http_post(samples.valid)
        session = build_session(
            response=signed,
            parameters={'RelayState': samples.RELAY_STATE},
            relay_state_expected=True,
        )
        self.assertIsNone(verify_response(session, BINDING_HTTP_POST))

    def test_missing_session_index_with_logout_support(self):
        session = build_session(metadata=build_metadata(SLO))
        del find(session.response, '//saml:AuthnStatement').attrib['SessionIndex']
        with pytest.raises(SAMLComplianceError) as excinfo:
            verify_response(session)
        self.assertEqual(excinfo.value.clause, 'SAMLProfiles.4.1.4.2_k')

    def test_fail_fast_stops_at_first_stage(self):
        session = build_session(
            parameters={'RelayState': 'x' * 81}, relay_state_expected=True)
        assertion = find(session.response, 'saml:Assertion')
        assertion.set('Version', '1.0')
        remove(assertion, 'saml:AuthnStatement')
        with pytest.raises(SAMLComplianceError) as excinfo:
            verify_response(session, BINDING_HTTP_REDIRECT)
        self.assertEqual(excinfo.value.clause, 'SAMLCore.2.3.3_a')

    def test_accumulate_collects_every_stage(self):
        session = build_session(
            parameters={'RelayState': 'x' * 81}, relay_state_expected=True)
        assertion = find(session.response, 'saml:Assertion')
        assertion.set('Version', '1.0')
        remove(assertion, 'saml:AuthnStatement')
        with pytest.raises(ComplianceViolations) as excinfo:
            verify_response(session, BINDING_HTTP_REDIRECT, accumulate=True)
        self.assertEqual(excinfo.value.clauses, [
            'SAMLCore.2.3.3_a',
            'SAMLProfiles.4.1.4.2_j',
            'SAMLBindings.3.4.3_a',
        ])
        self.assertTrue(all(isinstance(e, SAMLComplianceError) for e in excinfo.value.details))

    def test_accumulate_without_violations(self):
        self.assertIsNone(verify_response(build_session(), accumulate=True))

    def test_response_is_not_serialized_without_debug_logging(self):
        logger = verification.logger
        level = logger.level
        logger.setLevel(logging.INFO)
        try:
            with patch('compliance.verification.prettify_xml') as mocked:
                verify_response(build_session())
            mocked.assert_not_called()
        finally:
            logger.setLevel(level)

    def test_response_is_serialized_with_debug_logging(self):
        with patch('compliance.verification.prettify_xml', return_value='') as mocked:
            verify_response(build_session())
        self.assertEqual(mocked.call_count, 1)
