from typing import Any, TYPE_CHECKING
if TYPE_CHECKING:
	from .document import Document


class FieldAccessor:
	""" Descriptor installed on a Document class for every declared field.
	Reads and writes go straight to the instance's attribute store. """

	def __init__(self, name: str) -> None:
		self.name = name

	def __get__(self, instance: 'Document | None', owner: type | None = None) -> Any:
		if instance is None:
			return self
		return instance.read_attribute(self.name)

	def __set__(self, instance: 'Document', value: Any) -> None:
		instance.write_attribute(self.name, value)

	def __repr__(self) -> str:
		return f"FieldAccessor({self.name!r})"


class HiddenField:
	""" Installed over an inherited FieldAccessor when a subclass declares fields without it. """

	def __init__(self, name: str) -> None:
		self.name = name

	def __get__(self, instance: 'Document | None', owner: type | None = None) -> Any:
		owner_name = (owner or type(instance)).__name__
		raise AttributeError(f"{owner_name} does not declare field '{self.name}'")

	def __set__(self, instance: 'Document', value: Any) -> None:
		raise AttributeError(f"{type(instance).__name__} does not declare field '{self.name}'")

	def __repr__(self) -> str:
		return f"HiddenField({self.name!r})"
