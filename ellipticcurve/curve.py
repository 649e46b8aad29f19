import logging
from dataclasses import dataclass
from types import MappingProxyType

from voluptuous import Schema, Required, All, Any, Match, Length, Range, Invalid, MultipleInvalid

from .errors import InvalidCurveError, UnknownCurveError
from .point import Point, INF


logger = logging.getLogger(__name__)


@dataclass(frozen=True, repr=False)
class Curve:
	"""Short Weierstrass curve y^2 = x^3 + a*x + b (mod p) with base point g of order n."""
	a: int
	b: int
	p: int
	n: int
	g: Point
	name: str
	oid: tuple

	def __post_init__(self):
		if not self.contains(self.g):
			raise InvalidCurveError(f"generator of curve {self.name} does not satisfy the curve equation")

	def __repr__(self):
		return f'Curve({self.name})'

	@property
	def length(self) -> int:
		"""Byte width of scalars and coordinates: ceil(bitlen(n) / 8)."""
		return (self.n.bit_length() + 7) // 8

	def contains(self, point) -> bool:
		if point is INF:
			return False
		x, y = point
		if not (0 <= x < self.p and 0 <= y < self.p):
			return False
		return (y * y - (x * x * x + self.a * x + self.b)) % self.p == 0


# === Built-in curves ===

secp256k1 = Curve(
	a=0,
	b=7,
	p=0xfffffffffffffffffffffffffffffffffffffffffffffffffffffffefffffc2f,
	n=0xfffffffffffffffffffffffffffffffebaaedce6af48a03bbfd25e8cd0364141,
	g=Point(
		0x79be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798,
		0x483ada7726a3c4655da4fbfc0e1108a8fd17b448a68554199c47d08ffb10d4b8,
	),
	name="secp256k1",
	oid=(1, 3, 132, 0, 10),
)

secp256r1 = Curve(
	a=0xffffffff00000001000000000000000000000000fffffffffffffffffffffffc,
	b=0x5ac635d8aa3a93e7b3ebbd55769886bc651d06b0cc53b0f63bce3c3e27d2604b,
	p=0xffffffff00000001000000000000000000000000ffffffffffffffffffffffff,
	n=0xffffffff00000000ffffffffffffffffbce6faada7179e84f3b9cac2fc632551,
	g=Point(
		0x6b17d1f2e12c4247f8bce6e563a440f277037d812deb33a0f4a13945d898c296,
		0x4fe342e2fe1a7f9b8ee7eb4a7c0f9e162bce33576b315ececbb6406837bf51f5,
	),
	name="secp256r1",
	oid=(1, 2, 840, 10045, 3, 1, 7),
)

secp384r1 = Curve(
	a=0xfffffffffffffffffffffffffffffffffffffffffffffffffffffffffffffffeffffffff0000000000000000fffffffc,
	b=0xb3312fa7e23ee7e4988e056be3f82d19181d9c6efe8141120314088f5013875ac656398d8a2ed19d2a85c8edd3ec2aef,
	p=0xfffffffffffffffffffffffffffffffffffffffffffffffffffffffffffffffeffffffff0000000000000000ffffffff,
	n=0xffffffffffffffffffffffffffffffffffffffffffffffffc7634d81f4372ddf581a0db248b0a77aecec196accc52973,
	g=Point(
		0xaa87ca22be8b05378eb1c71ef320ad746e1d3b628ba79b9859f741e082542a385502f25dbf55296c3a545e3872760ab7,
		0x3617de4a96262c6f5d9e98bf9292dc29f8f41dbd289a147ce9da3113b5f0b8c00a60b1ce1d7e819d7a431d7c90ea0e5f,
	),
	name="secp384r1",
	oid=(1, 3, 132, 0, 34),
)


# === Registry ===

_supported = (secp256k1, secp256r1, secp384r1)

curves_by_name = MappingProxyType({curve.name: curve for curve in _supported})
curves_by_oid = MappingProxyType({curve.oid: curve for curve in _supported})

logger.debug("curve registry ready: %s", ", ".join(curves_by_name))


def supported_curves() -> tuple:
	return _supported


def curve_by_name(name: str) -> Curve:
	try:
		return curves_by_name[name]
	except KeyError:
		raise UnknownCurveError(
			f"unknown curve {name!r}, supported curves: {', '.join(curves_by_name)}"
		) from None


def curve_by_oid(oid) -> Curve:
	oid = tuple(oid)
	try:
		return curves_by_oid[oid]
	except KeyError:
		raise UnknownCurveError(
			f"unknown curve with oid {'.'.join(map(str, oid))}, "
			f"supported curves: {', '.join(curves_by_name)}"
		) from None


# === Custom curves ===

def _to_int(value):
	if isinstance(value, str):
		return int(value, 16)
	return value


hexint = Any(int, All(str, Match(r'^(0x)?[0-9a-fA-F]+$'), _to_int))

CurveSchema = Schema({
	Required("name"): All(str, Length(min=1)),
	Required("oid"): All(Any([int], (int,)), Length(min=2)),
	Required("a"): hexint,
	Required("b"): hexint,
	Required("p"): All(hexint, Range(min=3)),
	Required("n"): All(hexint, Range(min=2)),
	Required("gx"): hexint,
	Required("gy"): hexint,
}, extra=False)


def curve_from_dict(data: dict) -> Curve:
	"""Build a Curve from a mapping of parameters.

	Integer parameters may be given as ints or hex strings. The resulting curve
	is not registered; pass it explicitly wherever a curve is expected.
	"""
	try:
		params = CurveSchema(data)
	except (MultipleInvalid, Invalid) as e:
		raise InvalidCurveError(f"invalid curve description: {e}") from e

	oid = tuple(params["oid"])
	if oid[0] > 2 or (oid[0] < 2 and oid[1] >= 40) or any(arc < 0 for arc in oid):
		raise InvalidCurveError(f"invalid curve oid {'.'.join(map(str, oid))}")

	return Curve(
		a=params["a"] % params["p"],
		b=params["b"] % params["p"],
		p=params["p"],
		n=params["n"],
		g=Point(params["gx"], params["gy"]),
		name=params["name"],
		oid=oid,
	)
