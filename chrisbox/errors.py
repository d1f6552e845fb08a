"""Exceptions raised by CHRIS/Proba processing steps."""

from chrisbox.auxdata.thuillier import CorruptDataError, ResourceMissingError


class ProcessingError(Exception):
    """Error raised by a processing step"""

    def __init__(self, step_name: str, message: str):
        self.step_name = step_name
        self.message = message
        super().__init__(f"Error in {step_name}: {message}")


__all__ = ['ProcessingError', 'ResourceMissingError', 'CorruptDataError']
