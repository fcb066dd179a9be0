"""
Exception hierarchy for output settings resolution

Every fatal condition raised while resolving options derives from
OutputSettingsError. Plain filesystem failures are not wrapped: they
propagate as the OSError raised by the read that failed.
"""


class OutputSettingsError(Exception):
    """Base class for resolution failures"""
    pass


class CouldNotDeduceFormatError(OutputSettingsError):
    """Raised in strict mode when the output format cannot be inferred"""

    def __init__(self, extension: str, fallback: str):
        self.extension = extension
        self.fallback = fallback
        super().__init__(
            f"Could not deduce format from file extension '{extension}'; "
            f"defaulting to {fallback}"
        )


class IncompatiblePdfEngineError(OutputSettingsError):
    """Raised when a writer and a PDF engine cannot be paired"""
    pass


class UnknownWriterError(OutputSettingsError):
    """Raised when no writer is registered for a format"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown output format {name}")


class UnknownExtensionError(OutputSettingsError):
    """Raised when a flavored format names an extension that does not exist"""

    def __init__(self, extension: str):
        self.extension = extension
        super().__init__(f"Unknown extension: {extension}")


class UnsupportedExtensionError(OutputSettingsError):
    """Raised when an extension is enabled for a writer that does not support it"""

    def __init__(self, extension: str, format_name: str):
        self.extension = extension
        self.format_name = format_name
        super().__init__(
            f"The extension {extension} is not supported for {format_name}"
        )


class TemplateCompilationError(OutputSettingsError):
    """Raised when a template (or one of its partials) fails to compile"""
    pass


class SyntaxMapError(OutputSettingsError):
    """Raised when a syntax definition file cannot be parsed"""
    pass


class HighlightStyleError(OutputSettingsError):
    """Raised when a highlighting style cannot be found or loaded"""
    pass


class SandboxViolationError(OutputSettingsError):
    """Raised when a sandboxed writer reads a file outside its allow-list"""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Sandbox does not allow access to {path}")


class CustomWriterError(OutputSettingsError):
    """Raised when a custom writer script cannot be loaded"""
    pass


class FetchError(OutputSettingsError):
    """Raised when a resource cannot be fetched from a URL"""
    pass
