from .errors import CurveArithmeticError
from .point import Point, INF


# === Field arithmetic ===

def inverse_mod(a: int, m: int) -> int:
	"""Modular inverse using extended Euclidean algorithm."""
	a %= m
	if a == 0:
		raise CurveArithmeticError(f"0 has no inverse modulo {m:#x}")

	s, old_s = 0, 1
	r, old_r = m, a

	while r != 0:
		q = old_r // r
		old_r, r = r, old_r - q * r
		old_s, s = s, old_s - q * s

	# old_r is gcd(a, m)
	if old_r != 1:
		raise CurveArithmeticError(f"{a:#x} has no inverse modulo {m:#x} (gcd {old_r:#x})")

	return old_s % m


def sqrt_mod(value: int, p: int):
	"""Square root of value modulo the odd prime p, or None for a non-residue.

	Of the two roots the one returned is unspecified; callers choose by parity.
	"""
	value %= p
	if value == 0:
		return 0
	if pow(value, (p - 1) // 2, p) != 1:
		return None

	if p % 4 == 3:
		return pow(value, (p + 1) // 4, p)

	# Tonelli-Shanks
	q, e = p - 1, 0
	while q % 2 == 0:
		q //= 2
		e += 1
	z = 2
	while pow(z, (p - 1) // 2, p) != p - 1:
		z += 1

	c = pow(z, q, p)
	root = pow(value, (q + 1) // 2, p)
	t = pow(value, q, p)
	while t != 1:
		i, t2 = 0, t
		while t2 != 1:
			t2 = t2 * t2 % p
			i += 1
		b = pow(c, 1 << (e - i - 1), p)
		root = root * b % p
		c = b * b % p
		t = t * c % p
		e = i
	return root


# === Point arithmetic ===

def point_add(p1, p2, curve):
	"""Affine addition on the curve y^2 = x^3 + a*x + b over field p."""
	if p1 is INF:
		return p2
	if p2 is INF:
		return p1

	x1, y1 = p1
	x2, y2 = p2
	p = curve.p

	# P + (-P) = INF, and vertical tangent at y = 0
	if x1 == x2 and (y1 != y2 or y1 == 0):
		return INF

	if x1 == x2:
		m = ((3 * x1 * x1 + curve.a) * inverse_mod(2 * y1, p)) % p
	else:
		m = ((y2 - y1) * inverse_mod(x2 - x1, p)) % p

	x3 = (m * m - x1 - x2) % p
	y3 = (m * (x1 - x3) - y1) % p
	return Point(x3, y3)


def point_double(point, curve):
	return point_add(point, point, curve)


def scalar_multiply(point, scalar: int, curve):
	"""Multiply a point by an integer using double-and-add, most significant bit first.

	The scalar is reduced modulo the group order n first, so any integer is
	accepted and k * point is INF whenever k is a multiple of n.
	"""
	if point is INF:
		return INF

	k = scalar % curve.n
	if k == 0:
		return INF

	result = INF
	for bit in range(k.bit_length() - 1, -1, -1):
		result = point_add(result, result, curve)
		if (k >> bit) & 1:
			result = point_add(result, point, curve)

	return result
