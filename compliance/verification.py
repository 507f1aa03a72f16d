# -*- coding: utf-8 -*-
import logging
from collections import namedtuple

from compliance import log
from compliance.bindings import POST_RULES, REDIRECT_RULES
from compliance.core import CORE_RULES
from compliance.exceptions import BadConfiguration, ComplianceViolations
from compliance.profiles import SSO_RULES
from compliance.settings import BINDING_HTTP_POST, BINDING_HTTP_REDIRECT
from compliance.utils import prettify_xml

logger = log.logger

Stage = namedtuple('Stage', ['name', 'rules', 'target'])


def _response(session):
    return session.response


def _session(session):
    return session


class ResponseVerifier(object):
    """
    Runs the verification stages in order against a session.

    In fail-fast mode the first violation propagates unchanged and no
    further rule runs. In accumulating mode every rule runs and all the
    violations are raised together as ComplianceViolations.
    """

    def __init__(self, stages, accumulate=False):
        self._stages = stages
        self._accumulate = accumulate

    @property
    def stages(self):
        return [stage.name for stage in self._stages]

    def verify(self, session):
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug('verifying response\n{}'.format(prettify_xml(session.response)))
        if self._accumulate:
            self._verify_all(session)
        else:
            for stage in self._stages:
                stage.rules.run(stage.target(session))

    def _verify_all(self, session):
        violations = []
        for stage in self._stages:
            violations += stage.rules.collect(stage.target(session))
        if violations:
            raise ComplianceViolations(violations)


_BINDING_STAGES = {
    BINDING_HTTP_REDIRECT: Stage('redirect binding', REDIRECT_RULES, _session),
    BINDING_HTTP_POST: Stage('post binding', POST_RULES, _session),
}


def get_response_verifier(binding=None, accumulate=False):
    stages = [
        Stage('core', CORE_RULES, _response),
        Stage('sso profile', SSO_RULES, _session),
    ]
    if binding is not None:
        try:
            stages.append(_BINDING_STAGES[binding])
        except KeyError:
            raise BadConfiguration("Unknown binding '{}'".format(binding))
    return ResponseVerifier(stages, accumulate)


def verify_response(session, binding=None, accumulate=False):
    get_response_verifier(binding, accumulate).verify(session)
