import pytest

from ellipticcurve.config import reload_settings


@pytest.fixture
def settings_env(monkeypatch):
	"""Set ELLIPTICCURVE_* variables and reload settings; restores defaults afterwards."""
	def apply(**values):
		for key, value in values.items():
			monkeypatch.setenv("ELLIPTICCURVE_" + key.upper(), str(value))
		return reload_settings()

	yield apply

	monkeypatch.undo()
	reload_settings()
