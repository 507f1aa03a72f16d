class ComplianceError(Exception):
    """Base exception class"""


class BadConfiguration(ComplianceError):
    pass


class SignatureVerificationError(ComplianceError):
    pass


class ClauseRegistryError(ComplianceError):
    pass


class UnknownClauseError(ClauseRegistryError):

    def __init__(self, identifier):
        super(UnknownClauseError, self).__init__(
            "Unknown clause identifier '{}'".format(identifier))
        self.identifier = identifier


class DuplicateClauseError(ClauseRegistryError):

    def __init__(self, identifier):
        super(DuplicateClauseError, self).__init__(
            "Clause identifier '{}' is already registered".format(identifier))
        self.identifier = identifier


class DuplicateRuleError(ComplianceError):
    pass


class SAMLComplianceError(ComplianceError):
    """A single violated normative clause"""

    def __init__(self, clause, message, cause=None):
        super(SAMLComplianceError, self).__init__(
            '{}: {}'.format(clause, message))
        self.clause = clause
        self.message = message
        self.cause = cause


class ComplianceViolations(ComplianceError):
    """Every violation collected by an accumulating verification run"""

    def __init__(self, details):
        super(ComplianceViolations, self).__init__(
            ', '.join(detail.clause for detail in details))
        self.details = details

    @property
    def clauses(self):
        return [detail.clause for detail in self.details]
