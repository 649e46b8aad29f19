import hashlib
import hmac
import os


def between(low: int, high: int) -> int:
	"""Uniformly random integer in [low, high).

	Draws just enough random bytes to cover the range, masks off the excess high
	bits and rejects candidates outside the range instead of reducing them.
	"""
	if high <= low:
		raise ValueError(f"empty range [{low}, {high})")

	size = high - low
	bits = (size - 1).bit_length()
	if bits == 0:
		return low
	mask = (1 << bits) - 1
	nbytes = (bits + 7) // 8

	while True:
		candidate = int.from_bytes(os.urandom(nbytes), "big") & mask
		if candidate < size:
			return low + candidate


# === RFC 6979 deterministic nonces ===

def _bits2int(data: bytes, qlen: int) -> int:
	value = int.from_bytes(data, "big")
	blen = len(data) * 8
	if blen > qlen:
		value >>= (blen - qlen)
	return value


def deterministic_nonces(secret: int, digest: int, order: int, hashfunc=hashlib.sha256):
	"""Yield RFC 6979 (section 3.2) nonce candidates for the given key and digest.

	`digest` is the integer form of the message hash (bits2int already applied).
	Every candidate lies in [1, order - 1]. Pulling another value from the
	generator performs the K/V update of step h.3, so a caller rejecting a nonce
	(r == 0 or s == 0) simply asks for the next one.
	"""
	qlen = order.bit_length()
	rlen = (qlen + 7) // 8
	hlen = hashfunc().digest_size

	x = secret.to_bytes(rlen, "big")
	h = (digest % order).to_bytes(rlen, "big")

	v = b'\x01' * hlen
	k = b'\x00' * hlen
	k = hmac.new(k, v + b'\x00' + x + h, hashfunc).digest()
	v = hmac.new(k, v, hashfunc).digest()
	k = hmac.new(k, v + b'\x01' + x + h, hashfunc).digest()
	v = hmac.new(k, v, hashfunc).digest()

	while True:
		t = b''
		while len(t) * 8 < qlen:
			v = hmac.new(k, v, hashfunc).digest()
			t += v
		candidate = _bits2int(t, qlen)
		if 1 <= candidate < order:
			yield candidate
		k = hmac.new(k, v + b'\x00', hashfunc).digest()
		v = hmac.new(k, v, hashfunc).digest()


def deterministic_nonce(secret: int, digest: int, order: int, hashfunc=hashlib.sha256) -> int:
	return next(deterministic_nonces(secret, digest, order, hashfunc))
