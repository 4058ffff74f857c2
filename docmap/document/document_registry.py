from threading import Lock
from bidict import bidict

from ..utilities.resolution_error import ResolutionError
from ..utilities.setup_error import SetupError
from ..utilities import logger as logger_module
from typing import Iterator, TYPE_CHECKING
if TYPE_CHECKING:
	from .document import Document


class DocumentRegistry:
	""" Maps Document class names to classes, and classes back to their names.
	Associations bind by name, so a class may be declared as an association target before it exists; it only has to be registered by the time the association is read. """

	def __init__(self) -> None:
		self._classes: bidict[str, type['Document']] = bidict()
		self._lock = Lock()

	def register(self, cls: type['Document']) -> None:
		name = cls.__name__
		with self._lock:
			existing = self._classes.get(name)
			if existing is not None and existing is not cls:
				# Redefining a class in the same module (e.g. on reload) replaces it; two modules defining the same name is a setup error.
				if existing.__module__ != cls.__module__ or existing.__qualname__ != cls.__qualname__:
					raise SetupError(f"Document class name {name} already exists (defined in {existing.__module__}).")
			self._classes.forceput(name, cls)
		logger_module.logger.debug(f"Registered Document class '{name}'")

	def unregister(self, cls: type['Document']) -> None:
		""" Forgets cls. Its name is free again, and associations naming it fail to resolve. """
		with self._lock:
			name = self._classes.inverse.pop(cls, None)
		if name is not None:
			logger_module.logger.debug(f"Unregistered Document class '{name}'")

	def resolve(self, name: str, association_name: str | None = None) -> type['Document']:
		""" Returns the class registered under name. Raises ResolutionError if there is none. """
		cls = self._classes.get(name)
		if cls is None:
			raise ResolutionError(name, association_name)
		return cls

	def __contains__(self, name: str) -> bool:
		return name in self._classes

	def __iter__(self) -> Iterator[type['Document']]:
		with self._lock:
			return iter(list(self._classes.inverse))


# Module-level registry, populated as Document subclasses are defined
document_registry = DocumentRegistry()
