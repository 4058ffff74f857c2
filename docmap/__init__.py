"""
docmap maps Python Document classes onto MongoDB records.

	from docmap import Document, has_many, has_one, belongs_to

	class Person(Document):
		__fields__ = ["title", "first_name", "last_name"]
		addresses = has_many()

	class Address(Document):
		__fields__ = ["street", "city"]
		person = belongs_to()
"""

from .document.association import Association, AssociationKind, Bsonable, belongs_to, has_many, has_one
from .document.callbacks import CallbackHook
from .document.collection_binder import collection_binder
from .document.document import Document, FindMode, MAX_NESTING_DEPTH
from .document.document_meta import callback, validator
from .document.document_registry import document_registry
from .document.mongo_db import configure_database, reset_database
from .document.paginator import Paginator
from .document.reducer import AGGREGATE_REDUCE, GROUP_BY_REDUCE
from .document.storage_collection import StorageCollection
from .utilities.cascade_error import CascadeDepthError
from .utilities.logger import set_log_level, set_logger
from .utilities.resolution_error import ResolutionError
from .utilities.setup_error import SetupError
from .utilities.validation_error import ValidationError
