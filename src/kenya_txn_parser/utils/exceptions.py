"""Custom exceptions for the transaction message parser."""


class TxnParserError(Exception):
    """Base exception for parser errors."""

    pass


class ExtractionError(TxnParserError):
    """A field extractor met text it could not convert."""

    pass


class ConfigurationError(TxnParserError):
    """Error in configuration."""

    pass
