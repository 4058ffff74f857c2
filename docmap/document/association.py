from collections.abc import Iterable, Mapping
from enum import StrEnum
from typing import Any, Protocol, runtime_checkable

import inflection

from ..utilities.setup_error import SetupError
from typing import TYPE_CHECKING
if TYPE_CHECKING:
	from .document import Document


class AssociationKind(StrEnum):
	BELONGS_TO = "belongs_to"
	HAS_ONE = "has_one"
	HAS_MANY = "has_many"


@runtime_checkable
class Bsonable(Protocol):
	""" Anything that can be assigned to an association. Documents implement this by returning their attribute store. """
	def to_bson(self) -> Any: ...


def classify(name: str) -> str:
	""" "addresses" -> "Address", "home_address" -> "HomeAddress" """
	return inflection.camelize(inflection.singularize(name))


class Association:
	""" Descriptor for a belongs_to / has_one / has_many association.

	The related object is stored serialized under the association's name in the owner's attributes, and rebuilt by the association factory on every read.
	The target class is kept by name only and resolved on read, so an association can point at a class that is defined later in the module (or not at all, in which case reading it raises ResolutionError).
	"""

	def __init__(self, kind: AssociationKind | str, name: str | None = None, class_name: str | None = None) -> None:
		try:
			self.kind = AssociationKind(kind)
		except ValueError:
			raise SetupError(f"Unknown association kind '{kind}'. Expected one of: {', '.join(AssociationKind)}.") from None
		self.name = name
		self.class_name = class_name

	def __set_name__(self, owner: type, name: str) -> None:
		if self.name is None:
			self.name = name
		elif self.name != name:
			raise SetupError(f"Association '{self.name}' on {owner.__name__} is bound to attribute '{name}'. The names must match.")

	@property
	def target_name(self) -> str:
		""" The name of the Document class this association materializes. """
		if self.class_name:
			return self.class_name
		if self.name is None:
			raise SetupError("Association has not been bound to a name.")
		return classify(self.name)

	def __get__(self, instance: 'Document | None', owner: type | None = None) -> Any:
		if instance is None:
			return self
		from .association_factory import create_association
		return create_association(self.kind, self.name, instance)

	def __set__(self, instance: 'Document', value: Any) -> None:
		instance.write_attribute(self.name, self.serialize(value))

	def serialize(self, value: Any) -> Any:
		""" Returns the storage form of a value assigned to this association. """
		if value is None:
			return None
		if self.kind is AssociationKind.HAS_MANY:
			if isinstance(value, Bsonable):
				return [value.to_bson()]
			if isinstance(value, Iterable) and not isinstance(value, (str, bytes, Mapping)):
				return [self._serialize_one(element) for element in value]
		return self._serialize_one(value)

	def _serialize_one(self, value: Any) -> Any:
		if not isinstance(value, Bsonable):
			raise TypeError(f"Cannot assign {type(value).__name__} to association '{self.name}': it does not implement to_bson().")
		return value.to_bson()

	def __repr__(self) -> str:
		return f"Association({self.kind}, {self.name!r}, target={self.class_name or (self.name and classify(self.name))!r})"


# Declarations used inside a Document class body, e.g.
#	class Person(Document):
#		addresses = has_many()
#		name = has_one()
def belongs_to(class_name: str | None = None) -> Association:
	return Association(AssociationKind.BELONGS_TO, class_name=class_name)

def has_one(class_name: str | None = None) -> Association:
	return Association(AssociationKind.HAS_ONE, class_name=class_name)

def has_many(class_name: str | None = None) -> Association:
	return Association(AssociationKind.HAS_MANY, class_name=class_name)
