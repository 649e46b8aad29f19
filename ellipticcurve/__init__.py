import logging

from .curve import (
	Curve, secp256k1, secp256r1, secp384r1,
	supported_curves, curve_by_name, curve_by_oid, curve_from_dict,
)
from .ecdsa import sign, verify, digest_to_int
from .errors import (
	EllipticCurveError, CurveArithmeticError, MalformedEncodingError, UnknownCurveError,
	InvalidKeyError, InvalidSignatureError, InvalidCurveError, ConfigurationError,
)
from .keys import PrivateKey, PublicKey
from .point import Point, INF
from .signature import Signature

logging.getLogger(__name__).addHandler(logging.NullHandler())
