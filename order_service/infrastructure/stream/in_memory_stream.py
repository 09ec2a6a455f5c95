"""
Name: In-Memory Order Stream

Responsibilities:
  - Single-partition OrderMessageStream for tests and local runs
  - Track committed offset and rewinds like a consumer group would

Collaborators:
  - domain.services.OrderMessageStream (contract implemented)

Constraints:
  - Thread-safe: the pipeline thread polls while tests publish
"""

import threading
from typing import List, Optional

from ...domain.entities import StreamMessage


class InMemoryOrderStream:
    """
    Append-only log with a read cursor.

    committed_offset is the next offset that would be read after a restart.
    """

    def __init__(self, topic: str = "orders") -> None:
        self.topic = topic
        self._cond = threading.Condition()
        self._log: List[StreamMessage] = []
        self._cursor = 0
        self.committed_offset = 0
        self.commits: List[int] = []
        self.rewinds: List[int] = []
        self.closed = False

    def publish(self, value: bytes, key: Optional[bytes] = None) -> StreamMessage:
        with self._cond:
            message = StreamMessage(
                value=value,
                key=key,
                topic=self.topic,
                partition=0,
                offset=len(self._log),
            )
            self._log.append(message)
            self._cond.notify_all()
            return message

    def poll(self, timeout: float) -> Optional[StreamMessage]:
        with self._cond:
            if self._cursor >= len(self._log) and not self.closed:
                self._cond.wait(timeout)
            if self.closed or self._cursor >= len(self._log):
                return None
            message = self._log[self._cursor]
            self._cursor += 1
            return message

    def commit(self, message: StreamMessage) -> None:
        with self._cond:
            self.committed_offset = max(self.committed_offset, message.offset + 1)
            self.commits.append(message.offset)

    def rewind(self, message: StreamMessage) -> None:
        with self._cond:
            self._cursor = message.offset
            self.rewinds.append(message.offset)

    def close(self) -> None:
        with self._cond:
            self.closed = True
            self._cond.notify_all()

    def pending(self) -> int:
        """R: Records not yet read by the consumer."""
        with self._cond:
            return len(self._log) - self._cursor
