class RustDiagnosticsError(Exception):
    """Base class for failures raised by the external-tool runners."""


class AnalyzerError(RustDiagnosticsError):
    pass


class GitError(RustDiagnosticsError):
    pass
