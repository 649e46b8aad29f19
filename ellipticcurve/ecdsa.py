import hashlib
import logging
from itertools import islice

from .arithmetic import inverse_mod, point_add, scalar_multiply
from .config import get_settings
from .errors import CurveArithmeticError
from .keys import PrivateKey, PublicKey
from .point import INF
from .randomness import deterministic_nonces
from .signature import Signature


logger = logging.getLogger(__name__)


def digest_to_int(digest: bytes, curve) -> int:
	"""Convert a hash to an integer using FIPS 186-4 truncation.

	Returns the leftmost bitlen(n) bits of the hash interpreted as a big-endian
	bit string. A hash no longer than n is just its big-endian integer value.
	"""
	if not isinstance(digest, (bytes, bytearray)):
		raise TypeError("digest must be bytes or bytearray")
	if len(digest) == 0:
		raise ValueError("digest must not be empty")

	n_bits = curve.n.bit_length()
	h_bits = len(digest) * 8
	z = int.from_bytes(digest, "big")
	if h_bits > n_bits:
		z >>= (h_bits - n_bits)
	return z


def sign(digest: int, private_key: PrivateKey, hashfunc=hashlib.sha256) -> Signature:
	"""Sign an integer digest with a deterministic (RFC 6979) nonce.

	`hashfunc` only drives the nonce derivation's HMAC; it should be the hash the
	caller used to produce `digest`.
	"""
	if digest < 0:
		raise ValueError("digest must be a non-negative integer")

	curve = private_key.curve
	n = curve.n
	attempts = get_settings().max_nonce_attempts
	nonces = deterministic_nonces(private_key.secret, digest, n, hashfunc)

	for attempt, k in enumerate(islice(nonces, attempts)):
		R = scalar_multiply(curve.g, k, curve)
		r = R.x % n
		if r == 0:
			logger.debug("nonce attempt %d gave r == 0, retrying", attempt + 1)
			continue
		s = (inverse_mod(k, n) * (digest + r * private_key.secret)) % n
		if s == 0:
			logger.debug("nonce attempt %d gave s == 0, retrying", attempt + 1)
			continue
		return Signature(r, s)

	raise CurveArithmeticError(f"no usable nonce after {attempts} attempts on {curve.name}")


def verify(digest: int, signature: Signature, public_key: PublicKey) -> bool:
	"""Verify an ECDSA signature (r, s) for an integer digest.

	An invalid signature yields False; this never raises for well-typed input.
	"""
	curve = public_key.curve
	n = curve.n
	r, s = signature.r, signature.s

	if not (1 <= r < n and 1 <= s < n):
		return False

	w = inverse_mod(s, n)
	u1 = (digest * w) % n
	u2 = (r * w) % n

	X = point_add(
		scalar_multiply(curve.g, u1, curve),
		scalar_multiply(public_key.point, u2, curve),
		curve,
	)

	if X is INF:
		return False

	return X.x % n == r
