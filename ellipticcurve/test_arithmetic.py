import pytest
from cryptography.hazmat.primitives.asymmetric import ec

from ellipticcurve.arithmetic import inverse_mod, point_add, point_double, scalar_multiply, sqrt_mod
from ellipticcurve.curve import secp256k1, secp256r1, secp384r1
from ellipticcurve.errors import CurveArithmeticError
from ellipticcurve.point import Point, INF


CURVES = [secp256k1, secp256r1, secp384r1]

REFERENCE_CURVES = {
	"secp256k1": ec.SECP256K1(),
	"secp256r1": ec.SECP256R1(),
	"secp384r1": ec.SECP384R1(),
}


def negate(point, curve):
	return Point(point.x, (-point.y) % curve.p)


# === Field ===

def test_inverse_mod():
	assert inverse_mod(3, 7) == 5
	assert inverse_mod(-3, 7) == 2
	n = secp256k1.n
	for a in (1, 2, 0xdeadbeef, n - 1):
		assert a * inverse_mod(a, n) % n == 1


def test_inverse_mod_not_invertible():
	with pytest.raises(CurveArithmeticError):
		inverse_mod(0, 7)
	with pytest.raises(CurveArithmeticError):
		inverse_mod(14, 7)
	with pytest.raises(ArithmeticError):
		inverse_mod(4, 8)


@pytest.mark.parametrize("p", [13, 17, 41, secp256r1.p])
def test_sqrt_mod(p):
	for value in range(1, 40):
		root = sqrt_mod(value, p)
		if root is None:
			assert pow(value % p, (p - 1) // 2, p) == p - 1
		else:
			assert root * root % p == value % p
	assert sqrt_mod(0, p) == 0


# === Points ===

@pytest.mark.parametrize("curve", CURVES, ids=lambda c: c.name)
def test_generator_on_curve_and_order(curve):
	assert curve.contains(curve.g)
	assert scalar_multiply(curve.g, curve.n, curve) is INF


@pytest.mark.parametrize("curve", CURVES, ids=lambda c: c.name)
def test_point_add_special_cases(curve):
	G = curve.g
	assert point_add(INF, G, curve) == G
	assert point_add(G, INF, curve) == G
	assert point_add(G, negate(G, curve), curve) is INF
	assert point_add(G, G, curve) == point_double(G, curve)
	assert curve.contains(point_double(G, curve))


def test_point_add_vertical_tangent():
	class Tiny:
		p = 11
		a = 1
		b = 0
		n = 12

	# (0, 0) lies on y^2 = x^3 + x and has order 2
	assert point_add(Point(0, 0), Point(0, 0), Tiny) is INF
	assert point_add(Point(5, 3), Point(5, 8), Tiny) is INF


@pytest.mark.parametrize("curve", CURVES, ids=lambda c: c.name)
def test_scalar_multiply(curve):
	G = curve.g
	two = point_double(G, curve)
	three = point_add(two, G, curve)
	five = scalar_multiply(G, 5, curve)

	assert scalar_multiply(G, 1, curve) == G
	assert scalar_multiply(G, 2, curve) == two
	assert scalar_multiply(G, 3, curve) == three
	assert point_add(two, three, curve) == five
	assert scalar_multiply(G, 0, curve) is INF
	assert scalar_multiply(G, curve.n + 1, curve) == G
	assert scalar_multiply(G, -1, curve) == negate(G, curve)
	assert scalar_multiply(INF, 12345, curve) is INF


@pytest.mark.parametrize("curve", CURVES, ids=lambda c: c.name)
def test_scalar_multiply_matches_cryptography(curve):
	# Use cryptography only to pick a key, then compare the public point with pure Python math
	reference = ec.generate_private_key(REFERENCE_CURVES[curve.name])
	numbers = reference.private_numbers()

	point = scalar_multiply(curve.g, numbers.private_value, curve)

	assert point == Point(numbers.public_numbers.x, numbers.public_numbers.y)
