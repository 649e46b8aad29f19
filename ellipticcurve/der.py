"""Minimal ASN.1 DER codec for EC keys and signatures.

Encoders return the complete tag/length/value bytes. Decoders (`remove_*`)
consume one element from the front of a buffer and return what they parsed
together with the remaining bytes; any structural violation raises
MalformedEncodingError.
"""

from .errors import MalformedEncodingError


INTEGER = 0x02
BIT_STRING = 0x03
OCTET_STRING = 0x04
OBJECT_IDENTIFIER = 0x06
SEQUENCE = 0x30
CONTEXT_CONSTRUCTED = 0xa0

_names = {
	INTEGER: "INTEGER",
	BIT_STRING: "BIT STRING",
	OCTET_STRING: "OCTET STRING",
	OBJECT_IDENTIFIER: "OBJECT IDENTIFIER",
	SEQUENCE: "SEQUENCE",
}


# === Encoding ===

def encode_length(length: int) -> bytes:
	if length < 0:
		raise ValueError("negative length")
	if length < 0x80:
		return bytes((length,))
	s = length.to_bytes((length.bit_length() + 7) // 8, "big")
	return bytes((0x80 | len(s),)) + s


def _encode(tag: int, value: bytes) -> bytes:
	return bytes((tag,)) + encode_length(len(value)) + value


def encode_sequence(*parts: bytes) -> bytes:
	return _encode(SEQUENCE, b''.join(parts))


def encode_integer(value: int) -> bytes:
	"""Encode a non-negative INTEGER, padding with 0x00 when the high bit is set."""
	if value < 0:
		raise ValueError("negative integers are not supported")
	s = value.to_bytes(max(1, (value.bit_length() + 7) // 8), "big")
	if s[0] & 0x80:
		s = b'\x00' + s
	return _encode(INTEGER, s)


def encode_octet_string(value: bytes) -> bytes:
	return _encode(OCTET_STRING, value)


def encode_bit_string(value: bytes) -> bytes:
	# leading byte: number of unused bits in the last octet
	return _encode(BIT_STRING, b'\x00' + value)


def _encode_arc(arc: int) -> bytes:
	groups = [arc & 0x7f]
	arc >>= 7
	while arc:
		groups.append(0x80 | (arc & 0x7f))
		arc >>= 7
	return bytes(reversed(groups))


def encode_oid(oid) -> bytes:
	arcs = list(oid)
	if len(arcs) < 2 or arcs[0] > 2 or (arcs[0] < 2 and arcs[1] >= 40) or any(a < 0 for a in arcs):
		raise ValueError(f"invalid object identifier {oid!r}")
	body = _encode_arc(40 * arcs[0] + arcs[1]) + b''.join(_encode_arc(a) for a in arcs[2:])
	return _encode(OBJECT_IDENTIFIER, body)


def encode_constructed(tag: int, value: bytes) -> bytes:
	"""Explicit context-specific tag [tag] wrapping an already encoded value."""
	if not 0 <= tag < 0x1f:
		raise ValueError(f"unsupported context tag {tag}")
	return _encode(CONTEXT_CONSTRUCTED | tag, value)


# === Decoding ===

def read_length(data: bytes):
	"""Parse a DER length field. Returns (length, number of bytes consumed)."""
	if not data:
		raise MalformedEncodingError("truncated DER: missing length")
	first = data[0]
	if first < 0x80:
		return first, 1
	if first == 0x80:
		raise MalformedEncodingError("indefinite length is not allowed in DER")

	count = first & 0x7f
	if len(data) < 1 + count:
		raise MalformedEncodingError(
			f"truncated DER: length needs {count} bytes, {len(data) - 1} available"
		)
	encoded = data[1:1 + count]
	if encoded[0] == 0:
		raise MalformedEncodingError("non-canonical DER length: leading zero byte")
	length = int.from_bytes(encoded, "big")
	if length < 0x80:
		raise MalformedEncodingError(
			f"non-canonical DER length: long form used for length {length}"
		)
	return length, 1 + count


def _split(data: bytes, start: int):
	"""Read the length at data[start:] and split the element body from the rest."""
	length, consumed = read_length(data[start:])
	begin = start + consumed
	end = begin + length
	if end > len(data):
		raise MalformedEncodingError(
			f"truncated DER: element claims {length} bytes, {len(data) - begin} available"
		)
	return data[begin:end], data[end:]


def _remove(data: bytes, tag: int):
	if not data:
		raise MalformedEncodingError(f"wanted type {_names[tag]} (0x{tag:02x}), got empty buffer")
	if data[0] != tag:
		raise MalformedEncodingError(
			f"wanted type {_names[tag]} (0x{tag:02x}), got 0x{data[0]:02x}"
		)
	return _split(data, 1)


def remove_sequence(data: bytes):
	return _remove(data, SEQUENCE)


def remove_integer(data: bytes):
	body, rest = _remove(data, INTEGER)
	if not body:
		raise MalformedEncodingError("empty INTEGER")
	if body[0] & 0x80:
		raise MalformedEncodingError("negative INTEGER is not supported")
	if len(body) > 1 and body[0] == 0 and not body[1] & 0x80:
		raise MalformedEncodingError("non-minimal INTEGER encoding: superfluous leading zero")
	return int.from_bytes(body, "big"), rest


def remove_octet_string(data: bytes):
	return _remove(data, OCTET_STRING)


def remove_bit_string(data: bytes):
	body, rest = _remove(data, BIT_STRING)
	if not body:
		raise MalformedEncodingError("empty BIT STRING")
	if body[0] != 0:
		raise MalformedEncodingError(f"BIT STRING with {body[0]} unused bits is not supported")
	return body[1:], rest


def remove_object(data: bytes):
	body, rest = _remove(data, OBJECT_IDENTIFIER)
	if not body:
		raise MalformedEncodingError("empty OBJECT IDENTIFIER")

	arcs = []
	value = 0
	pending = False
	for byte in body:
		if not pending and byte == 0x80:
			raise MalformedEncodingError("non-minimal OBJECT IDENTIFIER arc encoding")
		value = (value << 7) | (byte & 0x7f)
		pending = bool(byte & 0x80)
		if not pending:
			arcs.append(value)
			value = 0
	if pending:
		raise MalformedEncodingError("truncated OBJECT IDENTIFIER arc")

	first = arcs[0]
	if first < 80:
		head = [first // 40, first % 40]
	else:
		head = [2, first - 80]
	return tuple(head + arcs[1:]), rest


def remove_constructed(data: bytes):
	"""Remove an explicit context-specific element. Returns (tag, body, rest)."""
	if not data:
		raise MalformedEncodingError("wanted constructed tag (0xa0-0xbe), got empty buffer")
	if data[0] & 0xe0 != CONTEXT_CONSTRUCTED or data[0] & 0x1f == 0x1f:
		raise MalformedEncodingError(f"wanted constructed tag (0xa0-0xbe), got 0x{data[0]:02x}")
	tag = data[0] & 0x1f
	body, rest = _split(data, 1)
	return tag, body, rest
