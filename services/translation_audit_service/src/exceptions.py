class AuditError(Exception):
    status_code = 500

class ClientInputError(AuditError):
    """Caller sent an unusable request: missing or empty source/translation."""
    status_code = 400

class ConfigurationError(AuditError):
    """Operator-actionable: the service is missing a credential or setting."""
    pass

class UpstreamError(AuditError):
    """Completion API answered with a non-success status or could not be reached."""
    pass

class ModelOutputError(AuditError):
    """Model reply is not a usable report: not JSON even after the brace scan, or fails strict checks."""
    pass
