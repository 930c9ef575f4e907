"""Domain Exceptions"""


class PricingError(Exception):
    """Base error for the revenue and pricing context"""


class InvalidSeasonRuleError(PricingError, ValueError):
    """Season rule input was rejected at the add-rule boundary"""


class DataGatewayError(PricingError):
    """The external property/booking store could not be reached or refused a request"""
