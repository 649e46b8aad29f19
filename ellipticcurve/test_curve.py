import pytest

from ellipticcurve.config import load_settings
from ellipticcurve.curve import (
	Curve, curves_by_name, secp256k1, secp256r1, secp384r1,
	supported_curves, curve_by_name, curve_by_oid, curve_from_dict,
)
from ellipticcurve.errors import ConfigurationError, InvalidCurveError, UnknownCurveError
from ellipticcurve.keys import PrivateKey
from ellipticcurve.ecdsa import sign, verify
from ellipticcurve.point import Point


def test_lengths():
	assert secp256k1.length == 32
	assert secp256r1.length == 32
	assert secp384r1.length == 48


def test_registry_lookup():
	assert supported_curves() == (secp256k1, secp256r1, secp384r1)
	for curve in supported_curves():
		assert curve_by_name(curve.name) is curve
		assert curve_by_oid(curve.oid) is curve
		assert curve_by_oid(list(curve.oid)) is curve


def test_registry_unknown():
	with pytest.raises(UnknownCurveError, match="secp256k1, secp256r1, secp384r1"):
		curve_by_name("ed25519")
	with pytest.raises(UnknownCurveError, match="1.3.132.0.35"):
		curve_by_oid((1, 3, 132, 0, 35))


def test_registry_is_read_only():
	with pytest.raises(TypeError):
		curves_by_name["mine"] = secp256k1


def test_curves_are_immutable():
	with pytest.raises(AttributeError):
		secp256k1.n = 7


def test_bad_generator_rejected():
	with pytest.raises(InvalidCurveError):
		Curve(a=0, b=7, p=secp256k1.p, n=secp256k1.n, g=Point(1, 1), name="x", oid=(1, 2))


# ---------- Custom curves ----------

P256_DESCRIPTION = {
	"name": "prime256v1",
	"oid": [1, 2, 840, 10045, 3, 1, 7],
	"a": "ffffffff00000001000000000000000000000000fffffffffffffffffffffffc",
	"b": "5ac635d8aa3a93e7b3ebbd55769886bc651d06b0cc53b0f63bce3c3e27d2604b",
	"p": "0xffffffff00000001000000000000000000000000ffffffffffffffffffffffff",
	"n": secp256r1.n,
	"gx": "6b17d1f2e12c4247f8bce6e563a440f277037d812deb33a0f4a13945d898c296",
	"gy": "4fe342e2fe1a7f9b8ee7eb4a7c0f9e162bce33576b315ececbb6406837bf51f5",
}


def test_curve_from_dict():
	curve = curve_from_dict(P256_DESCRIPTION)

	assert curve.name == "prime256v1"
	assert curve.oid == secp256r1.oid
	assert (curve.a, curve.b, curve.p, curve.n, curve.g) == (secp256r1.a, secp256r1.b, secp256r1.p, secp256r1.n, secp256r1.g)

	key = PrivateKey.generate(curve)
	assert verify(99, sign(99, key), key.public_key())


def test_small_custom_curve():
	# y^2 = x^3 + 2x + 2 over F_17 has a generator (5, 1) of prime order 19
	curve = curve_from_dict({
		"name": "toy", "oid": (1, 3, 9999), "a": 2, "b": 2, "p": 17, "n": 19, "gx": 5, "gy": 1,
	})
	key = PrivateKey(curve, 3)
	assert verify(4, sign(4, key), key.public_key())


@pytest.mark.parametrize("change", [
	{"gy": "00"},
	{"p": 2},
	{"oid": [1]},
	{"oid": [1, 40]},
	{"a": "not hex"},
	{"extra": 1},
])
def test_curve_from_dict_invalid(change):
	with pytest.raises(InvalidCurveError):
		curve_from_dict({**P256_DESCRIPTION, **change})


def test_curve_from_dict_missing_field():
	description = dict(P256_DESCRIPTION)
	del description["n"]
	with pytest.raises(InvalidCurveError):
		curve_from_dict(description)


# ---------- Settings ----------

def test_settings_defaults():
	settings = load_settings({})
	assert settings.default_curve == "secp256k1"
	assert settings.max_nonce_attempts == 64


def test_settings_from_environment():
	settings = load_settings({
		"ELLIPTICCURVE_DEFAULT_CURVE": "secp384r1",
		"ELLIPTICCURVE_MAX_NONCE_ATTEMPTS": " 5 ",
	})
	assert settings.default_curve == "secp384r1"
	assert settings.max_nonce_attempts == 5


@pytest.mark.parametrize("environ", [
	{"ELLIPTICCURVE_DEFAULT_CURVE": "curve25519"},
	{"ELLIPTICCURVE_MAX_NONCE_ATTEMPTS": "0"},
	{"ELLIPTICCURVE_MAX_NONCE_ATTEMPTS": "many"},
])
def test_settings_invalid(environ):
	with pytest.raises(ConfigurationError):
		load_settings(environ)
