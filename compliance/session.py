# -*- coding: utf-8 -*-
from collections import namedtuple

Expectations = namedtuple(
    'Expectations',
    ['relay_state', 'in_response_to', 'recipient', 'audience'],
)


class VerificationSession(object):
    """
    Everything a verification run looks at: the response root, the IdP
    metadata, the values the test transaction expects back and the raw
    binding parameters (query string or form values).
    """

    def __init__(self, response, metadata, expected, parameters=None,
                 relay_state_expected=False):
        self.response = response
        self.metadata = metadata
        self.expected = expected
        self.parameters = dict(parameters or {})
        self.relay_state_expected = relay_state_expected
