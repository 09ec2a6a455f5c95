"""
Name: Kafka Order Stream

Responsibilities:
  - Implement OrderMessageStream over a confluent-kafka Consumer
  - Manual offset commits (at-least-once)
  - Rewind a partition to redeliver an unacknowledged record

Collaborators:
  - domain.services.OrderMessageStream: Interface implementation
  - confluent_kafka.Consumer

Constraints:
  - enable.auto.commit is off; offsets move only through commit()
  - Partition EOF events are not errors and are swallowed as "no message"

Notes:
  - Committed offset is message.offset + 1 (next record to read)
"""

from typing import List, Optional

from confluent_kafka import Consumer, KafkaError, KafkaException, TopicPartition

from ...domain.entities import StreamMessage
from ...logger import logger


class KafkaOrderStream:
    """R: Consumer-group subscription to the orders topic."""

    def __init__(
        self,
        brokers: List[str],
        topic: str,
        group_id: str,
        *,
        consumer: Optional[Consumer] = None,
    ):
        self.topic = topic
        self.group_id = group_id
        self._consumer = consumer or Consumer(
            {
                "bootstrap.servers": ",".join(brokers),
                "group.id": group_id,
                "enable.auto.commit": False,
                "auto.offset.reset": "earliest",
                "enable.partition.eof": False,
            }
        )
        self._consumer.subscribe([topic])
        self._closed = False
        logger.info(
            "Kafka consumer subscribed",
            extra={"topic": topic, "group_id": group_id, "brokers": brokers},
        )

    def poll(self, timeout: float) -> Optional[StreamMessage]:
        msg = self._consumer.poll(timeout)
        if msg is None:
            return None

        error = msg.error()
        if error is not None:
            if error.code() == KafkaError._PARTITION_EOF:
                return None
            raise KafkaException(error)

        return StreamMessage(
            value=msg.value() or b"",
            key=msg.key(),
            topic=msg.topic(),
            partition=msg.partition(),
            offset=msg.offset(),
        )

    def commit(self, message: StreamMessage) -> None:
        self._consumer.commit(
            offsets=[
                TopicPartition(message.topic, message.partition, message.offset + 1)
            ],
            asynchronous=False,
        )

    def rewind(self, message: StreamMessage) -> None:
        self._consumer.seek(
            TopicPartition(message.topic, message.partition, message.offset)
        )

    def close(self) -> None:
        """Leave the consumer group (idempotent)."""
        if self._closed:
            return
        self._closed = True
        self._consumer.close()
        logger.info("Kafka consumer closed", extra={"topic": self.topic})
