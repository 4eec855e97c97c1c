"""Custom exceptions for order-tally."""


class OrderTallyError(Exception):
    """Base class for every error raised by order-tally."""


class InvalidInput(OrderTallyError, ValueError):
    """Raised when the pizza list handed to the aggregator is unusable."""


class ToppingsParseError(OrderTallyError):
    """Raised when pizza source data cannot be parsed."""


class OrderParseError(OrderTallyError):
    """Raised when order source data cannot be parsed."""


class InvalidProduct(OrderTallyError, ValueError):
    """Raised when a product lacks a field its pricing method requires."""


class UnknownPricingMethod(OrderTallyError, ValueError):
    """Raised when a product carries an unrecognized pricing method."""
