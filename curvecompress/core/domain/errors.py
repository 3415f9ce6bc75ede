"""
Error Taxonomy - Exceptions raised by the compression engine.
"""


class ConfigurationError(Exception):
    """
    Invalid compression configuration.

    Raised immediately on construction or assignment of a parameter object.
    Must not subclass ValueError: pydantic only wraps ValueError and
    AssertionError raised by validators into a ValidationError.
    """


class InvalidSegmentError(ValueError):
    """A curve segment or segment sequence violates its structural invariants."""
