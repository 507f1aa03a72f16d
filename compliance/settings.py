# -*- coding: utf-8 -*-

# Namespaces

SAML = 'urn:oasis:names:tc:SAML:2.0:assertion'
SAMLP = 'urn:oasis:names:tc:SAML:2.0:protocol'
DS = 'http://www.w3.org/2000/09/xmldsig#'
XENC = 'http://www.w3.org/2001/04/xmlenc#'
XSI = 'http://www.w3.org/2001/XMLSchema-instance'
MD = 'urn:oasis:names:tc:SAML:2.0:metadata'

NSMAP = {'saml': SAML, 'samlp': SAMLP, 'ds': DS, 'xenc': XENC, 'xsi': XSI, 'md': MD}

# SAML2

VERSION = '2.0'
NAMEID_FORMAT_ENTITY = 'urn:oasis:names:tc:SAML:2.0:nameid-format:entity'
SCM_BEARER = 'urn:oasis:names:tc:SAML:2.0:cm:bearer'
XMLENC_ELEMENT = 'http://www.w3.org/2001/04/xmlenc#Element'
XSI_TYPE = '{%s}type' % XSI

STATEMENT_TAGS = [
    'Statement',
    'AuthnStatement',
    'AuthzDecisionStatement',
    'AttributeStatement',
]

BINDING_HTTP_POST = 'urn:oasis:names:tc:SAML:2.0:bindings:HTTP-POST'
BINDING_HTTP_REDIRECT = 'urn:oasis:names:tc:SAML:2.0:bindings:HTTP-Redirect'
BINDINGS = [BINDING_HTTP_REDIRECT, BINDING_HTTP_POST]

RELAY_STATE_MAX_BYTES = 80

# Crypto

SIG_RSA_SHA1 = 'http://www.w3.org/2000/09/xmldsig#rsa-sha1'
SIG_RSA_SHA224 = 'http://www.w3.org/2001/04/xmldsig-more#rsa-sha224'
SIG_RSA_SHA256 = 'http://www.w3.org/2001/04/xmldsig-more#rsa-sha256'
SIG_RSA_SHA384 = 'http://www.w3.org/2001/04/xmldsig-more#rsa-sha384'
SIG_RSA_SHA512 = 'http://www.w3.org/2001/04/xmldsig-more#rsa-sha512'
SUPPORTED_ALGORITHMS = [SIG_RSA_SHA1, SIG_RSA_SHA224, SIG_RSA_SHA256, SIG_RSA_SHA384, SIG_RSA_SHA512]

SIGNED_PARAMS = ['SAMLResponse', 'RelayState', 'SigAlg']

# Verification modes

FAIL_FAST = 'fail_fast'
ACCUMULATE = 'accumulate'
VERIFICATION_MODES = [FAIL_FAST, ACCUMULATE]
