"""Custom exceptions for TriviaBolt."""

class TriviaBoltError(Exception):
    """Base exception for TriviaBolt."""
    pass

class ConfigError(TriviaBoltError):
    """Invalid configuration value."""
    pass

class ValidationError(TriviaBoltError):
    """Invalid input parameters."""
    pass

class OCRError(TriviaBoltError):
    """Error initializing or running the OCR engine."""
    pass

class CaptureError(TriviaBoltError):
    """Error reading from the capture surface."""
    pass

class CaptureUnavailableError(CaptureError):
    """No frame is ready yet; the tick should be skipped."""
    pass

class QuestionBankError(TriviaBoltError):
    """Error loading or validating the question database."""
    pass
