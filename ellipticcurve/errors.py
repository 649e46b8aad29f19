class EllipticCurveError(Exception):
	"""Base class for every error raised by this package."""


class CurveArithmeticError(EllipticCurveError, ArithmeticError):
	"""A field element had no inverse, or nonce derivation ran out of attempts.

	For well-formed inputs this is unreachable; hitting it points to a logic bug.
	"""


class MalformedEncodingError(EllipticCurveError, ValueError):
	"""Structural violation in DER or fixed-width byte input."""


class UnknownCurveError(MalformedEncodingError, LookupError):
	pass


class InvalidKeyError(EllipticCurveError, ValueError):
	pass


class InvalidSignatureError(EllipticCurveError, ValueError):
	pass


class InvalidCurveError(EllipticCurveError, ValueError):
	pass


class ConfigurationError(EllipticCurveError, ValueError):
	"""An environment setting failed validation."""
