import copy
import time
from typing import Any

from pymongo.collection import Collection

from .reducer import Reducer
from ..utilities.logger import log_database_usage


class StorageCollection:
	""" Wraps a pymongo Collection with the small set of primitives Documents are persisted through:
	find_one, find, group, save, and remove. """

	def __init__(self, collection: Collection) -> None:
		self._collection = collection

	@property
	def name(self) -> str:
		return self._collection.name

	def find_one(self, selector: dict | None = None) -> dict | None:
		start_time = time.time()
		record = self._collection.find_one(selector or {})
		log_database_usage(f"find_one on '{self.name}'", start_time, query=selector)
		return record

	def find(self, selector: dict | None = None, skip: int = 0, limit: int = 0) -> list[dict]:
		""" Returns every matching record. A limit of 0 means no limit. """
		start_time = time.time()
		records = list(self._collection.find(selector or {}, skip=skip, limit=limit))
		log_database_usage(f"Retrieved {len(records)} records from '{self.name}'", start_time, query=selector, skip=skip, limit=limit)
		return records

	def group(self, fields: list[str], selector: dict | None, initial: dict[str, Any], reducer: Reducer) -> list[dict]:
		""" Groups the records matching selector by the values of fields.
		Each returned record holds the grouped field values, the initial values, and whatever the reducer accumulated (which overrides initial). """
		start_time = time.time()
		pipeline: list[dict] = []
		if selector:
			pipeline.append({ "$match": selector })
		pipeline.append({
			"$group": {
				# A record missing a field groups with the ones holding None for it
				"_id": { field_name: { "$ifNull": [f"${field_name}", None] } for field_name in fields },
				**reducer.accumulators
			}
		})

		groups: list[dict] = []
		for record in self._collection.aggregate(pipeline):
			key = record.pop("_id", None) or {}
			group = copy.deepcopy(initial)
			group.update({ field_name: key.get(field_name) for field_name in fields })
			group.update(record)
			groups.append(group)
		
		log_database_usage(f"Grouped '{self.name}' by {fields} ({reducer.name}) into {len(groups)} groups", start_time, query=selector)
		return groups

	def save(self, record: dict) -> dict:
		""" Inserts the record if it has no _id (writing the generated _id back into it), otherwise replaces the stored record, inserting it if missing. """
		start_time = time.time()
		if record.get("_id") is None:
			record.pop("_id", None)
			result = self._collection.insert_one(record)
			record["_id"] = result.inserted_id
		else:
			self._collection.replace_one({ "_id": record["_id"] }, record, upsert=True)
		log_database_usage(f"Saved record {record['_id']} to '{self.name}'", start_time)
		return record

	def remove(self, selector: dict | None = None) -> int:
		""" Deletes every matching record and returns how many were deleted. """
		start_time = time.time()
		result = self._collection.delete_many(selector or {})
		log_database_usage(f"Removed {result.deleted_count} records from '{self.name}'", start_time, query=selector)
		return result.deleted_count
