from enum import StrEnum, auto
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from .document import Document


class WriteMethod(StrEnum):
    """ How a root document's record is written: a new record is inserted, a persisted one is replaced. """
    INSERT = auto()
    UPDATE = auto()

    @classmethod
    def for_document(cls, document: 'Document') -> 'WriteMethod':
        return cls.INSERT if document.new_record() else cls.UPDATE

    @property
    def creates(self) -> bool:
        """ Whether the create callbacks run around this write. """
        return self is WriteMethod.INSERT
