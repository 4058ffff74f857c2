from typing import Any

from bson import ObjectId


def to_document_id(value: Any) -> ObjectId:
	""" Converts a primary key value (usually a string from a url) into the identifier type the store uses.
	Raises bson.errors.InvalidId if the value can't be converted. """
	if isinstance(value, ObjectId):
		return value
	return ObjectId(str(value))