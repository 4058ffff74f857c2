from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, eq=False)
class Reducer:
	""" A per-group reduction handed to StorageCollection.group(), as the $group accumulators the server runs. """
	name: str
	accumulators: dict[str, Any] = field(default_factory=dict)


# Counts the records in each group
AGGREGATE_REDUCE = Reducer(
	name="count",
	accumulators={ "count": { "$sum": 1 } }
)

# Collects the records of each group
GROUP_BY_REDUCE = Reducer(
	name="group",
	accumulators={ "group": { "$push": "$$ROOT" } }
)
