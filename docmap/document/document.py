from collections.abc import Mapping
from enum import Enum, StrEnum
from typing import Any, Literal, Self
import time

from .association import Association, AssociationKind
from .attributes import normalize_attributes, normalize_key
from .callbacks import Callback, CallbackHook
from .collection_binder import collection_binder
from .document_id import to_document_id
from .document_meta import DocumentMeta, declare_association, declare_fields
from .paginator import Paginator
from .reducer import AGGREGATE_REDUCE, GROUP_BY_REDUCE
from .storage_collection import StorageCollection
from .write_method import WriteMethod
from .validations import Validator, presence_validator, run_validators
from ..utilities.cascade_error import CascadeDepthError
from ..utilities.setup_error import SetupError
from ..utilities import logger as logger_module
from ..utilities.logger import log_database_usage


MAX_NESTING_DEPTH = 32
""" How many parents save() will walk through looking for the root before giving up. """


class FindMode(StrEnum):
	FIRST = "first"
	ALL = "all"


"""
Saving Behavior:

A Document either has a parent (it is embedded somewhere inside its parent's record) or it doesn't (it is a root, and is stored as its own record).
Only roots are ever written. Saving an embedded Document runs its own validation and save callbacks, then moves on to its parent, and so on until the root is reached and written.
save() therefore returns the root, not self, when called on an embedded Document.

For every Document on the way up:
	before_validation -> valid() -> after_validation -> before_save -> (embedded only) after_save
And at the root:
	(new records only) before_create -> write -> (new records only) after_create -> after_save

A callback returning False, or a failing validation, stops the save and makes it return False. Nothing is written unless the root was reached.
"""

class Document(metaclass=DocumentMeta):
	""" A record in a schemaless collection.

	All persisted state lives in `attributes`, a plain dict. Declared fields and associations are just accessors over it; undeclared keys can be reached through read_attribute() and write_attribute().

		class Person(Document):
			__fields__ = ["title", "first_name", "last_name"]
			addresses = has_many()
			name = has_one()
	"""
	__abstract__ = True
	__fields__: tuple[str, ...] = ()
	__collection_name__: str | None = None
	""" Overrides the collection name derived from the class name. """

	__callbacks__: Any
	__validators__: list[Validator]
	__associations__: dict[str, Association]

	def __init__(self, attributes: Mapping[Any, Any] | None = None, *, parent: 'Document | None' = None) -> None:
		""" If no attributes are provided, they will be initialized with an empty dict. """
		self._attributes: dict[str, Any] = normalize_attributes(attributes)
		self._parent = parent
		self._errors: list[str] = []

	@classmethod
	def embedded(cls, attributes: dict, parent: 'Document') -> Self:
		""" Builds a Document over a mapping stored inside its parent's attributes.
		The mapping is adopted rather than copied, so writes to the new Document land in the parent's record. """
		if any(type(key) is not str for key in attributes):
			normalized = normalize_attributes(attributes)
			attributes.clear()
			attributes.update(normalized)
		document = cls(parent=parent)
		document._attributes = attributes
		return document

	# region: Attribute Store
	@property
	def attributes(self) -> dict[str, Any]:
		return self._attributes

	def read_attribute(self, name: Any) -> Any:
		return self._attributes.get(normalize_key(name))

	def write_attribute(self, name: Any, value: Any) -> None:
		self._attributes[normalize_key(name)] = value

	@property
	def id(self) -> Any:
		""" The _id assigned by the store. This is in essence the primary key. """
		return self._attributes.get("_id")

	def new_record(self) -> bool:
		""" Returns True if the Document has not been persisted to the database. """
		return self._attributes.get("_id") is None

	def to_param(self) -> str:
		return str(self.id)

	def to_bson(self) -> dict[str, Any]:
		""" The storage form of this Document, used when it is assigned to an association. """
		return self._attributes
	# endregion

	@property
	def parent(self) -> 'Document | None':
		return self._parent

	@parent.setter
	def parent(self, document: 'Document | None') -> None:
		self._parent = document

	@property
	def errors(self) -> list[str]:
		""" Messages from the last call to valid(). """
		return self._errors

	# region: Declarations
	@classmethod
	def fields(cls, *names: Any) -> tuple[str, ...]:
		""" Declares the fields of this class, replacing any earlier declaration. Accepts names and nested lists of names. """
		return declare_fields(cls, names)

	@classmethod
	def declare_association(cls, kind: AssociationKind | str, name: str, class_name: str | None = None) -> Association:
		return declare_association(cls, Association(kind, name, class_name), name)

	@classmethod
	def belongs_to(cls, name: str, class_name: str | None = None) -> Association:
		return cls.declare_association(AssociationKind.BELONGS_TO, name, class_name)

	@classmethod
	def has_one(cls, name: str, class_name: str | None = None) -> Association:
		return cls.declare_association(AssociationKind.HAS_ONE, name, class_name)

	@classmethod
	def has_many(cls, name: str, class_name: str | None = None) -> Association:
		return cls.declare_association(AssociationKind.HAS_MANY, name, class_name)

	@classmethod
	def get_association(cls, name: str) -> Association:
		for klass in cls.__mro__:
			association = klass.__dict__.get("__associations__", {}).get(name)
			if association is not None:
				return association
		raise SetupError(f"{cls.__name__} has no association named '{name}'.")

	@classmethod
	def register_callback(cls, hook: CallbackHook | str, handler: Callback) -> Callback:
		""" Adds a handler to the end of the hook's chain. Returns the handler so this can be used as a decorator. """
		return cls.__callbacks__.register(hook, handler)

	@classmethod
	def validates(cls, func: Validator) -> Validator:
		cls.__validators__.append(func)
		return func

	@classmethod
	def validates_presence_of(cls, *names: str) -> None:
		for name in names:
			cls.__validators__.append(presence_validator(name))
	# endregion

	# region: Callbacks & Validation
	def run_callbacks(self, hook: CallbackHook | str) -> bool:
		return type(self).__callbacks__.run(hook, self)

	def valid(self) -> bool:
		""" Runs every validator and stores the messages in errors. """
		self._errors = run_validators(type(self).__validators__, self)
		return not self._errors

	def _prepare_save(self) -> bool:
		if not self.run_callbacks(CallbackHook.BEFORE_VALIDATION):
			return False
		if not self.valid():
			logger_module.logger.debug(f"{type(self).__name__} failed validation: {self.errors}")
			return False
		if not self.run_callbacks(CallbackHook.AFTER_VALIDATION):
			return False
		return self.run_callbacks(CallbackHook.BEFORE_SAVE)
	# endregion

	# region: Persistence
	@classmethod
	def get_collection(cls) -> StorageCollection:
		return collection_binder.collection_for(cls)

	@property
	def collection(self) -> StorageCollection:
		return type(self).get_collection()

	@classmethod
	def create(cls, attributes: Mapping[Any, Any] | None = None) -> 'Document | Literal[False]':
		""" Instantiates a Document with the attributes and saves it. """
		return cls(attributes).save()

	def save(self) -> 'Document | Literal[False]':
		""" Saves the tree this Document belongs to. Returns the root that was written, or False if a callback or validation stopped the save. """
		document: Document = self
		depth = 0
		while True:
			if not document._prepare_save():
				return False
			if document.parent is None:
				break
			if not document.run_callbacks(CallbackHook.AFTER_SAVE):
				return False
			depth += 1
			if depth > MAX_NESTING_DEPTH:
				raise CascadeDepthError(MAX_NESTING_DEPTH)
			document = document.parent
		return document._write()

	def _write(self) -> Self | Literal[False]:
		""" Writes this (root) Document's attributes to its collection. """
		write_method = WriteMethod.for_document(self)
		if write_method.creates and not self.run_callbacks(CallbackHook.BEFORE_CREATE):
			return False

		start_time = time.time()
		self.collection.save(self._attributes)
		log_database_usage(f"Saved ({write_method}) document of type '{type(self).__name__}' with _id: {self.id}", start_time)

		if write_method.creates and not self.run_callbacks(CallbackHook.AFTER_CREATE):
			return False
		if not self.run_callbacks(CallbackHook.AFTER_SAVE):
			return False
		return self

	def update_attributes(self, attributes: Mapping[Any, Any]) -> bool:
		""" Replaces (does not merge) every attribute with the ones given, then saves.
		The dict itself is kept, so an embedded Document stays attached to its parent's record. """
		normalized = normalize_attributes(attributes)
		self._attributes.clear()
		self._attributes.update(normalized)
		return self.save() is not False

	def destroy(self) -> int:
		""" Delete this Document from the database. Returns the number of records removed. """
		return self.collection.remove({ "_id": self.id })
	# endregion

	# region: Queries
	@classmethod
	def find(cls, mode_or_id: Any, selector: dict | None = None) -> Self | list[Self]:
		""" Find Documents in several ways:
			Person.find("first", {"title": "Sir"})
			Person.find("all", {"title": "Sir"})
			Person.find("4a5f...")  # by _id
		"""
		if isinstance(mode_or_id, str) and mode_or_id in tuple(FindMode):
			if FindMode(mode_or_id) is FindMode.ALL:
				return cls.find_all(selector)
			return cls.find_first(selector)
		return cls.find_first({ "_id": to_document_id(mode_or_id) })

	@classmethod
	def find_first(cls, selector: dict | None = None) -> Self:
		""" Returns the first Document matching the selector exactly.
		NOTE: When nothing matches this returns an empty Document (new_record() is True) rather than None. """
		return cls(cls.get_collection().find_one(selector))

	@classmethod
	def find_all(cls, selector: dict | None = None) -> list[Self]:
		return [cls(record) for record in cls.get_collection().find(selector)]

	@classmethod
	def aggregate(cls, fields: str | list[str], selector: dict | None = None) -> list[dict[str, Any]]:
		""" Counts the Documents matching the selector per distinct combination of values of fields. Each group looks like {"status": "open", "count": 2}. """
		return cls.get_collection().group(_field_list(fields), selector, { "count": 0 }, AGGREGATE_REDUCE)

	@classmethod
	def group_by(cls, fields: str | list[str], selector: dict | None = None) -> list[dict[str, Any]]:
		""" Groups the Documents matching the selector by the values of fields. Each group looks like {"status": "open", "group": [Document, ...]}. """
		groups = cls.get_collection().group(_field_list(fields), selector, { "group": [] }, GROUP_BY_REDUCE)
		return [cls._rehydrate_group(group) for group in groups]

	@classmethod
	def _rehydrate_group(cls, group: dict[str, Any]) -> dict[str, Any]:
		""" Swaps the raw records of a group for Documents. """
		group["group"] = [cls(record) for record in group.get("group", [])]
		return group

	@classmethod
	def paginate(cls, selector: dict | None = None, params: Mapping[Any, Any] | None = None) -> list[Self]:
		""" Returns one page of Documents. Without params this is the first 20. """
		options = Paginator(params).options
		return [cls(record) for record in cls.get_collection().find(selector, **options)]
	# endregion

	def __repr__(self) -> str:
		return f"{type(self).__name__}({self._attributes!r})"


def _field_list(fields: Any) -> list[str]:
	""" A single field name or a list of them, as normalized keys. """
	if isinstance(fields, (str, bytes, Enum)):
		return [normalize_key(fields)]
	return [normalize_key(field) for field in fields]
