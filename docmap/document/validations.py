from typing import Callable, TYPE_CHECKING

from ..utilities.validation_error import ValidationError
if TYPE_CHECKING:
	from .document import Document


Validator = Callable[['Document'], str | None]
""" A validator returns an error message (or raises ValidationError) when the document is invalid, and None when it is valid. """


def presence_validator(name: str) -> Validator:
	""" Builds a validator which fails when the attribute is missing, None, or blank. """
	def validate_presence(document: 'Document') -> str | None:
		value = document.read_attribute(name)
		if value is None or (isinstance(value, (str, list, dict)) and not value):
			return f"{name} can't be blank"
		return None
	validate_presence.__name__ = f"validate_presence_of_{name}"
	return validate_presence

def run_validators(validators: list[Validator], document: 'Document') -> list[str]:
	""" Runs every validator and collects the error messages. A validator raising ValidationError counts as a failure; any other exception propagates. """
	errors: list[str] = []
	for validator in validators:
		try:
			message = validator(document)
		except ValidationError as e:
			message = e.message
		if message:
			errors.append(message)
	return errors
