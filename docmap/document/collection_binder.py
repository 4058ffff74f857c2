from threading import Lock
from typing import Any, Callable

import inflection

from .mongo_db import get_database
from .storage_collection import StorageCollection
from ..utilities import logger as logger_module
from typing import TYPE_CHECKING
if TYPE_CHECKING:
	from .document import Document


def collection_name_for(cls: type['Document']) -> str:
	""" An explicit __collection_name__ wins, otherwise the class name is tableized: Person -> people, HomeAddress -> home_addresses. """
	explicit = getattr(cls, "__collection_name__", None)
	if explicit:
		return explicit
	return inflection.tableize(cls.__name__)


class CollectionBinder:
	""" Resolves the collection for each Document class once and keeps it for the life of the process. """

	def __init__(
			self,
			database_factory: Callable[[], Any] = get_database,
			collection_factory: Callable[[Any], Any] = StorageCollection
		) -> None:
		self._database_factory = database_factory
		self._collection_factory = collection_factory
		self._collections: dict[type, Any] = {}
		self._lock = Lock()

	def collection_for(self, cls: type['Document']) -> StorageCollection:
		collection = self._collections.get(cls)
		if collection is not None:
			return collection
		
		with self._lock:
			# Another thread may have bound it while we waited
			collection = self._collections.get(cls)
			if collection is None:
				collection_name = collection_name_for(cls)
				collection = self._collection_factory(self._database_factory()[collection_name])
				self._collections[cls] = collection
				logger_module.logger.debug(f"Bound Document class '{cls.__name__}' to collection '{collection_name}'")
		return collection

	def configure(
			self,
			database_factory: Callable[[], Any] | None = None,
			collection_factory: Callable[[Any], Any] | None = None
		) -> None:
		""" Swap out where collections come from. Clears every binding made so far. """
		with self._lock:
			if database_factory is not None:
				self._database_factory = database_factory
			if collection_factory is not None:
				self._collection_factory = collection_factory
			self._collections.clear()

	def is_bound(self, cls: type['Document']) -> bool:
		return cls in self._collections

	def reset(self) -> None:
		""" Drops every binding and restores the default factories. """
		with self._lock:
			self._database_factory = get_database
			self._collection_factory = StorageCollection
			self._collections.clear()


# Module-level binder shared by all Document classes
collection_binder = CollectionBinder()
