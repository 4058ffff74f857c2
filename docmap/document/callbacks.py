from enum import StrEnum
from typing import Any, Callable, TYPE_CHECKING

from ..utilities import logger as logger_module
if TYPE_CHECKING:
	from .document import Document


class CallbackHook(StrEnum):
	""" The hook points, in the order a root save reaches them. """
	BEFORE_VALIDATION = "before_validation"
	AFTER_VALIDATION = "after_validation"
	BEFORE_SAVE = "before_save"
	BEFORE_CREATE = "before_create"
	AFTER_CREATE = "after_create"
	AFTER_SAVE = "after_save"


Callback = Callable[['Document'], Any]
""" A handler receives the document. Returning False halts the chain, any other return value is ignored. """


class CallbackRegistry:
	""" Ordered handler lists per hook for a single Document class.
	A class's registry is seeded with a copy of its parent class's handlers so that inherited handlers run first. """

	def __init__(self, inherited: 'CallbackRegistry | None' = None) -> None:
		self._handlers: dict[CallbackHook, list[Callback]] = { hook: [] for hook in CallbackHook }
		if inherited is not None:
			for hook, handlers in inherited._handlers.items():
				self._handlers[hook].extend(handlers)

	def register(self, hook: CallbackHook | str, handler: Callback) -> Callback:
		if not callable(handler):
			raise TypeError(f"Callback for '{hook}' must be callable, got {type(handler).__name__}.")
		self._handlers[CallbackHook(hook)].append(handler)
		return handler

	def handlers(self, hook: CallbackHook | str) -> tuple[Callback, ...]:
		return tuple(self._handlers[CallbackHook(hook)])

	def run(self, hook: CallbackHook | str, document: 'Document') -> bool:
		""" Runs every handler for the hook in registration order.
		Returns False as soon as a handler returns False; the remaining handlers are skipped. """
		hook = CallbackHook(hook)
		for handler in self._handlers[hook]:
			if handler(document) is False:
				logger_module.logger.debug(f"{hook} chain halted by {getattr(handler, '__name__', handler)!r} on {type(document).__name__}")
				return False
		return True
