from collections.abc import Mapping
from typing import Any

from .attributes import normalize_attributes


DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 20


class Paginator:
	""" Turns request-style pagination params ({"page": "2", "per_page": "10"}) into query options. """

	def __init__(self, params: Mapping[Any, Any] | None = None) -> None:
		params = normalize_attributes(params)
		self.page = _positive_int(params.get("page"), DEFAULT_PAGE, "page")
		self.per_page = _positive_int(params.get("per_page"), DEFAULT_PER_PAGE, "per_page")

	@property
	def offset(self) -> int:
		return (self.page - 1) * self.per_page

	@property
	def limit(self) -> int:
		return self.per_page

	@property
	def options(self) -> dict[str, int]:
		return { "skip": self.offset, "limit": self.limit }

def _positive_int(value: Any, default: int, name: str) -> int:
	if value is None or value == "":
		return default
	try:
		number = int(value)
	except (TypeError, ValueError):
		raise ValueError(f"Pagination parameter '{name}' must be an integer, got {value!r}.")
	if number < 1:
		raise ValueError(f"Pagination parameter '{name}' must be at least 1, got {number}.")
	return number
