"""Process details for recently processed topics, keyed by topic id.

Held in memory only and bounded; the oldest topic is evicted first.
"""

from collections import OrderedDict
from typing import Optional

from gurus.config import PROCESS_DETAILS_LIMIT
from gurus.comparison.models import ProcessDetails


class ProcessDetailsStore:
    def __init__(self, limit: int = PROCESS_DETAILS_LIMIT):
        self.limit = max(1, limit)
        self._items: "OrderedDict[int, ProcessDetails]" = OrderedDict()

    def put(self, topic_id: int, details: ProcessDetails) -> None:
        self._items[topic_id] = details
        self._items.move_to_end(topic_id)
        while len(self._items) > self.limit:
            self._items.popitem(last=False)

    def get(self, topic_id: int) -> Optional[ProcessDetails]:
        return self._items.get(topic_id)

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)


process_details_store = ProcessDetailsStore()
