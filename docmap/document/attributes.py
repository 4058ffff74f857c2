from collections.abc import Mapping
from enum import Enum
from typing import Any


def normalize_key(key: Any) -> str:
	""" Returns the canonical form of an attribute key. Drivers hand us str keys, callers may hand us enums or bytes. """
	if isinstance(key, str):
		# StrEnum members are str instances too, reduce them to their plain value
		return str(key.value) if isinstance(key, Enum) else str(key)
	if isinstance(key, Enum):
		return str(key.value)
	if isinstance(key, bytes):
		return key.decode()
	return str(key)

def normalize_attributes(attributes: Mapping[Any, Any] | None) -> dict[str, Any]:
	""" Returns a new dict with every top-level key normalized. Values are left untouched. """
	if not attributes:
		return {}
	return { normalize_key(key): value for key, value in attributes.items() }
