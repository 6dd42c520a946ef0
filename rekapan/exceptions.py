"""
Custom exceptions for the activation recap bot
"""


class RekapanError(Exception):
    """
    Base exception for the activation recap bot
    """
    def __init__(self, message: str, user_message: str = None):
        super().__init__(message)
        self.user_message = user_message or message


class ConfigurationError(RekapanError):
    """
    Raised when required settings are missing at startup
    """
    def __init__(self, message: str, missing: list = None):
        super().__init__(message)
        self.missing = missing or []


class ValidationError(RekapanError):
    """
    Raised when a submission is rejected before persistence
    """
    pass


class MissingUsernameError(ValidationError):
    """
    Raised when the sender has no Telegram username
    """
    pass


class EmptySubmissionError(ValidationError):
    """
    Raised when /aktivasi is sent without any data
    """
    pass


class MissingBusinessKeyError(ValidationError):
    """
    Raised when the AO field is empty after extraction
    """
    pass


class DuplicateRecordError(ValidationError):
    """
    Raised when the AO id already exists in the records sheet
    """
    def __init__(self, message: str, ao: str = None, **kwargs):
        super().__init__(message, **kwargs)
        self.ao = ao


class AccessDeniedError(RekapanError):
    """
    Raised when an identity is not an active roster member or lacks the admin role
    """
    def __init__(self, message: str, identity: str = None, **kwargs):
        super().__init__(message, **kwargs)
        self.identity = identity


class DeliveryError(RekapanError):
    """
    Raised when a Telegram delivery still fails after all retries
    """
    def __init__(self, message: str, chat_id=None, attempts: int = 0, **kwargs):
        super().__init__(message, **kwargs)
        self.chat_id = chat_id
        self.attempts = attempts
