"""Custom exceptions for legacy project import."""
import logging

logger = logging.getLogger(__name__)


class AUPImportError(Exception):
    """Base exception for legacy project import errors."""
    def __init__(self, message: str, file_path: str = None):
        self.message = message
        self.file_path = file_path
        super().__init__(self.message)
        if file_path:
            logger.error(f"AUP import error in {file_path}: {message}")


class UnsupportedFormatError(AUPImportError):
    """Exception for project files this importer cannot read."""
    pass


class CorruptedFileError(AUPImportError):
    """Exception for documents the tokenizer cannot parse."""
    pass


class InvalidAttributeError(AUPImportError):
    """Exception for a malformed or out-of-range tag attribute."""
    def __init__(self, tag: str, attribute: str, message: str = None, file_path: str = None):
        self.tag = tag
        self.attribute = attribute
        super().__init__(
            message or f"Invalid {tag} '{attribute}' attribute.",
            file_path
        )


class UnrecognizedTagError(AUPImportError):
    """Exception for tags outside the vocabulary or in the wrong context."""
    def __init__(self, tag: str, parent: str = None, file_path: str = None):
        self.tag = tag
        self.parent = parent
        super().__init__(
            f"Internal error in importer...tag not recognized: <{tag}>",
            file_path
        )


class MissingDataError(AUPImportError):
    """Exception for a project whose data folder cannot be located."""
    pass


class AudioDecodeError(AUPImportError):
    """Exception raised by the audio decode service."""
    pass


class ConfigurationError(AUPImportError):
    """Configuration-related errors."""
    pass
