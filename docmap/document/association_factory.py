from collections.abc import Mapping
from typing import Any

from .association import AssociationKind
from .document_registry import document_registry
from typing import TYPE_CHECKING
if TYPE_CHECKING:
	from .document import Document


def create_association(kind: AssociationKind, name: str, document: 'Document') -> Any:
	""" Materializes the association `name` of `document`.

	- has_one: the embedded mapping stored under name, as a Document whose parent is `document`. None if nothing is stored.
	- has_many: a list with one Document per embedded mapping stored under name, each with `document` as parent.
	- belongs_to: `document`'s parent when it is of the target type, otherwise a detached copy of the mapping stored under name, or None.

	Embedded Documents share their mapping with the owner's attributes, so writes to them are saved when the root is saved.
	Nothing is cached; every call builds new objects.
	"""
	association = type(document).get_association(name)
	target_cls = document_registry.resolve(association.target_name, name)
	raw = document.read_attribute(name)

	if kind is AssociationKind.HAS_ONE:
		if raw is None:
			return None
		return target_cls.embedded(_require_mapping(raw, name), document)
	
	elif kind is AssociationKind.HAS_MANY:
		if raw is None:
			return []
		if isinstance(raw, Mapping):
			raise TypeError(f"Expected a list of documents under '{name}', got a single mapping.")
		return [target_cls.embedded(_require_mapping(element, name), document) for element in raw]
	
	elif kind is AssociationKind.BELONGS_TO:
		if isinstance(document.parent, target_cls):
			return document.parent
		if raw is None:
			return None
		return target_cls(_require_mapping(raw, name))
	
	raise ValueError(f"Unknown association kind: {kind}")

def _require_mapping(raw: Any, name: str) -> dict:
	if not isinstance(raw, dict):
		raise TypeError(f"Expected a stored document under '{name}', got {type(raw).__name__}.")
	return raw
