from typing import Optional


class QrngError(Exception):
    """Base class for everything the range pipeline raises on purpose."""


class InvalidRangeError(QrngError, ValueError):
    pass


class RangeTooLargeError(QrngError, ValueError):
    pass


class ConversionError(QrngError, ArithmeticError):
    pass


class SourceFailureError(QrngError):
    """
    The raw sample source failed (success=false, transport error or a reply
    that breaks its contract). `remaining` is the number of samples that were
    not delivered, filled in by the scheduler once it knows it.
    """

    def __init__(self, message: str, remaining: Optional[int] = None):
        super().__init__(message)
        self.remaining = remaining

    def __str__(self) -> str:
        msg = super().__str__()
        if self.remaining is None:
            return msg
        r = self.remaining
        # hex past the str() digit limit
        shown = str(r) if r.bit_length() <= 12000 else format(r, "#x")
        return f"{msg} ({shown} samples not delivered)"
