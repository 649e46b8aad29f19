import logging
from dataclasses import dataclass, field

from voluptuous import Schema, Required, All, Match, Invalid, MultipleInvalid

from . import der
from .arithmetic import scalar_multiply, sqrt_mod
from .config import get_settings
from .curve import Curve, curve_by_name, curve_by_oid
from .errors import InvalidKeyError, MalformedEncodingError
from .point import Point, INF
from .randomness import between


logger = logging.getLogger(__name__)

EC_PUBLIC_KEY_OID = (1, 2, 840, 10045, 2, 1)  # id-ecPublicKey

hexstr = Match(r'^[0-9a-fA-F]+$')

PublicKeySchema = Schema({
	Required("curve"): str,
	Required("x"): All(str, hexstr),
	Required("y"): All(str, hexstr),
}, extra=False)


def _default_curve() -> Curve:
	return curve_by_name(get_settings().default_curve)


def _expect_empty(rest: bytes, where: str):
	if rest:
		raise MalformedEncodingError(f"trailing junk after {where}: {rest.hex()}")


@dataclass(frozen=True)
class PublicKey:
	curve: Curve
	point: Point

	def __post_init__(self):
		if self.point is INF:
			raise InvalidKeyError("public key cannot be the point at infinity")
		if not isinstance(self.point, Point):
			object.__setattr__(self, "point", Point(*self.point))
		if not self.curve.contains(self.point):
			raise InvalidKeyError(f"public point {self.point} is not on curve {self.curve.name}")

	# ---------- Raw bytes ----------

	def to_bytes(self, encoding: str = "uncompressed") -> bytes:
		"""Fixed-width point encoding.

		"uncompressed": 0x04 || x || y
		"compressed":   0x02 or 0x03 (parity of y) || x
		"raw":          x || y
		"""
		length = self.curve.length
		x = self.point.x.to_bytes(length, "big")
		y = self.point.y.to_bytes(length, "big")
		if encoding == "uncompressed":
			return b'\x04' + x + y
		if encoding == "compressed":
			return (b'\x03' if self.point.y & 1 else b'\x02') + x
		if encoding == "raw":
			return x + y
		raise ValueError(f"unknown point encoding {encoding!r}")

	@classmethod
	def from_bytes(cls, data: bytes, curve: Curve | None = None) -> 'PublicKey':
		if curve is None:
			curve = _default_curve()
		length = curve.length

		if len(data) == 2 * length:
			x, y = data[:length], data[length:]
			return cls(curve, Point(int.from_bytes(x, "big"), int.from_bytes(y, "big")))

		if len(data) == 2 * length + 1 and data[0] == 0x04:
			x, y = data[1:length + 1], data[length + 1:]
			return cls(curve, Point(int.from_bytes(x, "big"), int.from_bytes(y, "big")))

		if len(data) == length + 1 and data[0] in (0x02, 0x03):
			return cls(curve, _decompress(curve, int.from_bytes(data[1:], "big"), data[0] & 1))

		raise MalformedEncodingError(
			f"cannot decode {len(data)}-byte public point on {curve.name} "
			f"(expected {length + 1}, {2 * length} or {2 * length + 1} bytes)"
		)

	# ---------- DER ----------

	def to_der(self, compressed: bool = False) -> bytes:
		"""SubjectPublicKeyInfo: SEQUENCE { SEQUENCE { id-ecPublicKey, curve }, BIT STRING point }"""
		return der.encode_sequence(
			der.encode_sequence(
				der.encode_oid(EC_PUBLIC_KEY_OID),
				der.encode_oid(self.curve.oid),
			),
			der.encode_bit_string(self.to_bytes("compressed" if compressed else "uncompressed")),
		)

	@classmethod
	def from_der(cls, data: bytes) -> 'PublicKey':
		try:
			body, rest = der.remove_sequence(data)
			_expect_empty(rest, "DER public key")

			algorithm, body = der.remove_sequence(body)
			key_type, algorithm = der.remove_object(algorithm)
			if key_type != EC_PUBLIC_KEY_OID:
				raise MalformedEncodingError(
					f"expected id-ecPublicKey in DER public key, got {'.'.join(map(str, key_type))}"
				)
			oid, algorithm = der.remove_object(algorithm)
			_expect_empty(algorithm, "DER public key algorithm")
			curve = curve_by_oid(oid)

			point_bytes, body = der.remove_bit_string(body)
			_expect_empty(body, "DER public key point")
			return _decode_prefixed_point(cls, point_bytes, curve)
		except MalformedEncodingError as e:
			logger.debug("rejected DER public key: %s", e)
			raise

	# ---------- Hex document ----------

	def to_dict(self) -> dict:
		length = self.curve.length
		return {
			"curve": self.curve.name,
			"x": self.point.x.to_bytes(length, "big").hex(),
			"y": self.point.y.to_bytes(length, "big").hex(),
		}

	@classmethod
	def from_dict(cls, data: dict) -> 'PublicKey':
		try:
			validated = PublicKeySchema(data)
		except (MultipleInvalid, Invalid) as e:
			raise MalformedEncodingError(f"invalid public key document: {e}") from e

		curve = curve_by_name(validated["curve"])
		width = 2 * curve.length
		for name in ("x", "y"):
			if len(validated[name]) != width:
				raise MalformedEncodingError(
					f"public key coordinate {name} must be {width} hex digits on {curve.name}, "
					f"got {len(validated[name])}"
				)
		return cls(curve, Point(int(validated["x"], 16), int(validated["y"], 16)))


def _decompress(curve: Curve, x: int, parity: int) -> Point:
	if x >= curve.p:
		raise InvalidKeyError(f"compressed x coordinate is not a field element of {curve.name}")
	y = sqrt_mod(x * x * x + curve.a * x + curve.b, curve.p)
	if y is None:
		raise InvalidKeyError(f"no point with x = {x:#x} on curve {curve.name}")
	if y & 1 != parity:
		y = (curve.p - y) % curve.p
	return Point(x, y)


def _decode_prefixed_point(cls, data: bytes, curve: Curve) -> PublicKey:
	"""Decode a point that must carry its 02/03/04 prefix, as DER keys do."""
	expected = {0x02: curve.length + 1, 0x03: curve.length + 1, 0x04: 2 * curve.length + 1}
	if not data or data[0] not in expected:
		raise MalformedEncodingError(
			f"expected compressed or uncompressed point, got prefix {data[:1].hex() or 'none'}"
		)
	if len(data) != expected[data[0]]:
		raise MalformedEncodingError(
			f"point with prefix {data[:1].hex()} on {curve.name} must be "
			f"{expected[data[0]]} bytes, got {len(data)}"
		)
	return cls.from_bytes(data, curve)


@dataclass(frozen=True)
class PrivateKey:
	curve: Curve
	secret: int = field(repr=False)

	def __post_init__(self):
		if not 1 <= self.secret < self.curve.n:
			raise InvalidKeyError(f"private key secret out of range [1, n-1] for {self.curve.name}")

	@classmethod
	def generate(cls, curve: Curve | None = None) -> 'PrivateKey':
		if curve is None:
			curve = _default_curve()
		logger.debug("generating private key on %s", curve.name)
		return cls(curve, between(1, curve.n))

	def public_key(self) -> PublicKey:
		return PublicKey(self.curve, scalar_multiply(self.curve.g, self.secret, self.curve))

	# ---------- Raw bytes ----------

	def to_bytes(self) -> bytes:
		"""Secret as exactly curve.length big-endian bytes."""
		return self.secret.to_bytes(self.curve.length, "big")

	@classmethod
	def from_bytes(cls, data: bytes, curve: Curve | None = None) -> 'PrivateKey':
		if curve is None:
			curve = _default_curve()
		if len(data) > curve.length:
			raise MalformedEncodingError(
				f"private key is {len(data)} bytes, {curve.name} allows at most {curve.length}"
			)
		data = bytes(data).rjust(curve.length, b'\x00')
		return cls(curve, int.from_bytes(data, "big"))

	# ---------- DER ----------

	def to_der(self, compressed: bool = False) -> bytes:
		"""SEQUENCE { INTEGER 1, OCTET STRING secret, [0] curve oid, [1] BIT STRING public point }"""
		encoded_public_key = self.public_key().to_bytes("compressed" if compressed else "uncompressed")
		return der.encode_sequence(
			der.encode_integer(1),
			der.encode_octet_string(self.to_bytes()),
			der.encode_constructed(0, der.encode_oid(self.curve.oid)),
			der.encode_constructed(1, der.encode_bit_string(encoded_public_key)),
		)

	@classmethod
	def from_der(cls, data: bytes) -> 'PrivateKey':
		try:
			s, rest = der.remove_sequence(data)
			_expect_empty(rest, "DER private key")

			version, s = der.remove_integer(s)
			if version != 1:
				raise MalformedEncodingError(f"expected '1' at start of DER private key, got {version}")

			secret_bytes, s = der.remove_octet_string(s)

			tag, oid_body, s = der.remove_constructed(s)
			if tag != 0:
				raise MalformedEncodingError(f"expected tag 0 in DER private key, got {tag}")
			oid, oid_rest = der.remove_object(oid_body)
			_expect_empty(oid_rest, "DER private key curve oid")
			curve = curve_by_oid(oid)

			key = cls.from_bytes(secret_bytes, curve)

			if s:
				tag, public_body, s = der.remove_constructed(s)
				if tag != 1:
					raise MalformedEncodingError(f"expected tag 1 in DER private key, got {tag}")
				point_bytes, public_rest = der.remove_bit_string(public_body)
				_expect_empty(public_rest, "DER private key public point")
				_expect_empty(s, "DER private key fields")
				embedded = _decode_prefixed_point(PublicKey, point_bytes, curve)
				if embedded != key.public_key():
					raise InvalidKeyError("public key embedded in DER private key does not match its secret")
			return key
		except MalformedEncodingError as e:
			logger.debug("rejected DER private key: %s", e)
			raise
