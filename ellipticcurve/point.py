from typing import NamedTuple


INF = None  # point at infinity representation


class Point(NamedTuple):
	"""Affine point (x, y) over the curve's prime field."""
	x: int
	y: int

	def __str__(self):
		return f'({self.x:#x}, {self.y:#x})'
