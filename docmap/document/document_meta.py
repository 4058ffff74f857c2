from abc import ABCMeta
from collections.abc import Iterable
from typing import Any

from .association import Association
from .callbacks import CallbackHook, CallbackRegistry
from .document_registry import document_registry
from .field_accessor import FieldAccessor, HiddenField
from ..utilities.setup_error import SetupError


__callback_hooks__ = "__callback_hooks__"
__is_validator__ = "__is_validator__"

RESERVED_NAMES = ("_attributes", "_parent", "_errors")
""" Instance state of every Document. Fields can't use these names. """


def callback(*hooks: CallbackHook | str):
	""" Marks a method in a Document class body as a handler for one or more hooks.
	Handlers are registered in the order they appear in the class body.

		class Person(Document):
			@callback(CallbackHook.BEFORE_SAVE)
			def stamp(self): ...
	"""
	parsed = tuple(CallbackHook(hook) for hook in hooks)
	def decorator(func):
		setattr(func, __callback_hooks__, getattr(func, __callback_hooks__, ()) + parsed)
		return func
	return decorator

def validator(func):
	""" Marks a method in a Document class body as a validator. It should return an error message, or None if valid. """
	setattr(func, __is_validator__, True)
	return func


def flatten_names(names: Iterable[Any]) -> list[str]:
	""" fields("a", ["b", ["c"]]) declares a, b and c. """
	flat: list[str] = []
	for name in names:
		if isinstance(name, str):
			flat.append(name)
		elif isinstance(name, Iterable):
			flat.extend(flatten_names(name))
		else:
			raise SetupError(f"Field names must be strings, got {type(name).__name__}.")
	return flat

def declare_fields(cls: type, names: Iterable[Any]) -> tuple[str, ...]:
	""" Replaces the declared fields of cls with names, installing an accessor for each.
	Accessors for fields that are no longer declared are removed, and fields inherited from a base class but left out are hidden. """
	new_fields = tuple(dict.fromkeys(flatten_names(names))) # Drops duplicates, keeps order

	for name in new_fields:
		if not name.isidentifier():
			raise SetupError(f"Field name '{name}' is not a valid identifier.", cls.__name__)
		if name in RESERVED_NAMES:
			raise SetupError(f"Field name '{name}' is reserved.", cls.__name__)
		# Refuse to shadow anything that isn't one of our own accessors (save, id, parent, ...)
		for klass in cls.__mro__:
			if name in klass.__dict__:
				if not isinstance(klass.__dict__[name], (FieldAccessor, HiddenField)):
					raise SetupError(f"Field name '{name}' clashes with an existing attribute of {klass.__name__}.", cls.__name__)
				break

	# While the metaclass runs, __fields__ is still the raw class body value
	previous_fields = flatten_names(cls.__dict__.get("__fields__", ()))
	for name in previous_fields:
		if name not in new_fields and isinstance(cls.__dict__.get(name), FieldAccessor):
			delattr(cls, name)

	for klass in cls.__mro__[1:]:
		for name, value in list(klass.__dict__.items()):
			if not isinstance(value, FieldAccessor) or name in new_fields:
				continue
			if name not in cls.__dict__ or isinstance(cls.__dict__[name], FieldAccessor):
				setattr(cls, name, HiddenField(name))

	for name in new_fields:
		setattr(cls, name, FieldAccessor(name))
	type.__setattr__(cls, "__fields__", new_fields)
	return new_fields

def declare_association(cls: type, association: Association, name: str) -> Association:
	""" Installs an association on an already created class. """
	association.__set_name__(cls, name)
	setattr(cls, name, association)
	cls.__associations__[name] = association
	return association


class DocumentMeta(ABCMeta):
	""" Processes a Document class's declarations once, when the class is created:
	1. Callback handlers and validators are inherited from the bases, then extended by methods marked in the class body
	2. Associations are collected from the bases and from Association descriptors in the class body
	3. __fields__ in the class body replaces the inherited field list and gets an accessor per field
	4. The class is registered by name so associations can resolve it
	Classes that set __abstract__ = True in their body are not registered.
	"""

	def __new__(mcs, name, bases, dct, **kwargs):
		new_cls = super().__new__(mcs, name, bases, dct, **kwargs)

		# Callbacks and validators
		inherited_callbacks = next((base.__callbacks__ for base in bases if hasattr(base, "__callbacks__")), None)
		callbacks = CallbackRegistry(inherited_callbacks)
		validators: list = []
		for base in bases:
			validators.extend(getattr(base, "__validators__", []))
		for attr in dct.values():
			for hook in getattr(attr, __callback_hooks__, ()):
				callbacks.register(hook, attr)
			if getattr(attr, __is_validator__, False):
				validators.append(attr)
		new_cls.__callbacks__ = callbacks
		new_cls.__validators__ = validators

		# Associations
		associations: dict[str, Association] = {}
		for base in reversed(bases):
			associations.update(getattr(base, "__associations__", {}))
		for attr in dct.values():
			if isinstance(attr, Association):
				associations[attr.name] = attr
		new_cls.__associations__ = associations

		# Fields
		if "__fields__" in dct:
			declare_fields(new_cls, dct["__fields__"])

		if not dct.get("__abstract__", False):
			document_registry.register(new_cls)
		
		return new_cls
