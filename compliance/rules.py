# -*- coding: utf-8 -*-
from collections import namedtuple

from compliance import log
from compliance.exceptions import DuplicateRuleError, SAMLComplianceError

logger = log.logger

Rule = namedtuple('Rule', ['name', 'check'])


class RuleSet(object):
    """
    An ordered list of named checks.

    Each check takes the verification target and either returns or raises
    SAMLComplianceError. New clauses are added as new entries; the order of
    the list is the order in which they run.
    """

    def __init__(self, rules):
        self._rules = list(rules)
        self._ensure_unique_names()

    def _ensure_unique_names(self):
        seen = set()
        for rule in self._rules:
            if rule.name in seen:
                raise DuplicateRuleError(
                    "Rule '{}' is defined more than once".format(rule.name))
            seen.add(rule.name)

    def __iter__(self):
        return iter(self._rules)

    def __len__(self):
        return len(self._rules)

    @property
    def names(self):
        return [rule.name for rule in self._rules]

    def extend(self, rules):
        return RuleSet(self._rules + list(rules))

    def run(self, target):
        """Run every rule; the first violation propagates unchanged."""
        for rule in self._rules:
            self._run_rule(rule, target)

    def collect(self, target):
        """Run every rule and return the violations, in rule order."""
        violations = []
        for rule in self._rules:
            violation = self.evaluate(rule, target)
            if violation is not None:
                violations.append(violation)
        return violations

    def evaluate(self, rule, target):
        try:
            self._run_rule(rule, target)
        except SAMLComplianceError as e:
            return e
        return None

    @staticmethod
    def _run_rule(rule, target):
        logger.debug('checking rule {}'.format(rule.name))
        try:
            rule.check(target)
        except SAMLComplianceError as e:
            logger.info('rule {} failed: {}'.format(rule.name, e))
            raise
