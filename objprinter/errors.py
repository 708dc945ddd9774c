"""
ObjPrinter exceptions.
"""


class ConfigurationError(ValueError):
    """
    Invalid printing configuration.

    Raised by PrintingConfig builder methods at configuration time, never while printing.
    """
