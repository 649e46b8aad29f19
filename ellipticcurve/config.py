import os
from types import SimpleNamespace

from voluptuous import Schema, Required, All, Coerce, In, Range, Invalid, MultipleInvalid

from .curve import curves_by_name
from .errors import ConfigurationError


# ---------- Environment ----------

ENV_PREFIX = "ELLIPTICCURVE_"

SettingsSchema = Schema({
	Required("default_curve", default="secp256k1"): All(str, In(list(curves_by_name))),
	Required("max_nonce_attempts", default=64): All(Coerce(int), Range(min=1)),
}, extra=False)


def load_settings(environ=None) -> SimpleNamespace:
	"""Read ELLIPTICCURVE_* variables from `environ` (default os.environ)."""
	if environ is None:
		environ = os.environ
	raw = {}
	for key in ("default_curve", "max_nonce_attempts"):
		value = environ.get(ENV_PREFIX + key.upper())
		if value is not None:
			raw[key] = value.strip()
	try:
		return SimpleNamespace(**SettingsSchema(raw))
	except (MultipleInvalid, Invalid) as e:
		raise ConfigurationError(f"invalid {ENV_PREFIX}* setting: {e}") from e


_settings = None


def get_settings() -> SimpleNamespace:
	global _settings
	if _settings is None:
		_settings = load_settings()
	return _settings


def reload_settings() -> SimpleNamespace:
	global _settings
	_settings = load_settings()
	return _settings
