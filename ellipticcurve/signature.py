import logging
from dataclasses import dataclass

from . import der
from .curve import Curve
from .errors import InvalidSignatureError, MalformedEncodingError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Signature:
	"""ECDSA signature value (r, s)."""
	r: int
	s: int

	def __post_init__(self):
		if self.r < 1 or self.s < 1:
			raise InvalidSignatureError("signature values r and s must be positive")

	def check_range(self, curve: Curve) -> 'Signature':
		if self.r >= curve.n or self.s >= curve.n:
			raise InvalidSignatureError(f"signature values out of range [1, n-1] for {curve.name}")
		return self

	# ---------- DER ----------

	def to_der(self) -> bytes:
		return der.encode_sequence(der.encode_integer(self.r), der.encode_integer(self.s))

	@classmethod
	def from_der(cls, data: bytes, curve: Curve | None = None) -> 'Signature':
		try:
			body, rest = der.remove_sequence(data)
			if rest:
				raise MalformedEncodingError(f"trailing junk after DER signature: {rest.hex()}")
			r, body = der.remove_integer(body)
			s, body = der.remove_integer(body)
			if body:
				raise MalformedEncodingError(f"trailing junk after DER numbers: {body.hex()}")
		except MalformedEncodingError as e:
			logger.debug("rejected DER signature: %s", e)
			raise

		signature = cls(r, s)
		if curve is not None:
			signature.check_range(curve)
		return signature

	# ---------- Raw bytes ----------

	def to_bytes(self, curve: Curve) -> bytes:
		"""r || s, each exactly curve.length bytes."""
		self.check_range(curve)
		return self.r.to_bytes(curve.length, "big") + self.s.to_bytes(curve.length, "big")

	@classmethod
	def from_bytes(cls, data: bytes, curve: Curve) -> 'Signature':
		length = curve.length
		if len(data) != 2 * length:
			raise MalformedEncodingError(
				f"raw signature on {curve.name} must be {2 * length} bytes, got {len(data)}"
			)
		r = int.from_bytes(data[:length], "big")
		s = int.from_bytes(data[length:], "big")
		return cls(r, s).check_range(curve)
