"""Publishing and consuming game messages over AMQP."""

from __future__ import annotations

import json
from enum import Enum, auto
from typing import Any, Callable, Optional, Tuple

import msgpack
import pika
import pika.exceptions
from msgpack.exceptions import UnpackException

DEAD_LETTER_EXCHANGE = "peril_dlx"
PREFETCH_COUNT = 10


class PubSubError(Exception):
    """A message could not be published or a queue could not be set up."""


class AckType(Enum):
    ACK = auto()
    NACK_DISCARD = auto()
    NACK_REQUEUE = auto()


class SimpleQueueType(Enum):
    DURABLE = auto()
    TRANSIENT = auto()


def _payload(value: Any) -> Any:
    to_dict = getattr(value, "to_dict", None)
    return to_dict() if callable(to_dict) else value


def _publish(channel: Any, exchange: str, key: str, body: bytes, content_type: str) -> None:
    try:
        channel.basic_publish(
            exchange=exchange,
            routing_key=key,
            body=body,
            properties=pika.BasicProperties(content_type=content_type),
        )
    except pika.exceptions.AMQPError as err:
        raise PubSubError(f"could not publish message: {err}") from err


def publish_json(channel: Any, exchange: str, key: str, value: Any) -> None:
    """Publish value as JSON."""
    try:
        body = json.dumps(_payload(value)).encode("utf-8")
    except (TypeError, ValueError) as err:
        raise PubSubError(f"could not encode message: {err}") from err
    _publish(channel, exchange, key, body, "application/json")


def publish_gob(channel: Any, exchange: str, key: str, value: Any) -> None:
    """Publish value in the compact binary encoding."""
    try:
        body = msgpack.packb(_payload(value), use_bin_type=True)
    except (TypeError, ValueError) as err:
        raise PubSubError(f"could not encode message: {err}") from err
    _publish(channel, exchange, key, body, "application/msgpack")


def declare_and_bind(
    connection: Any,
    exchange: str,
    queue_name: str,
    key: str,
    queue_type: SimpleQueueType,
) -> Tuple[Any, str]:
    """Open a channel, declare a queue and bind it; return the channel and queue name."""
    durable = queue_type is SimpleQueueType.DURABLE
    try:
        channel = connection.channel()
    except pika.exceptions.AMQPError as err:
        raise PubSubError(f"could not create channel: {err}") from err
    try:
        result = channel.queue_declare(
            queue=queue_name,
            durable=durable,
            auto_delete=not durable,
            exclusive=not durable,
            arguments={"x-dead-letter-exchange": DEAD_LETTER_EXCHANGE},
        )
    except pika.exceptions.AMQPError as err:
        raise PubSubError(f"could not declare queue: {err}") from err
    name = result.method.queue
    try:
        channel.queue_bind(queue=name, exchange=exchange, routing_key=key)
    except pika.exceptions.AMQPError as err:
        raise PubSubError(f"could not bind queue: {err}") from err
    return channel, name


def _subscribe(
    connection: Any,
    exchange: str,
    queue_name: str,
    key: str,
    queue_type: SimpleQueueType,
    handler: Callable[[Any], AckType],
    unmarshal: Callable[[bytes], Any],
) -> Any:
    try:
        channel, name = declare_and_bind(connection, exchange, queue_name, key, queue_type)
    except PubSubError as err:
        raise PubSubError(f"could not declare and bind queue: {err}") from err

    try:
        channel.basic_qos(prefetch_count=PREFETCH_COUNT)
    except pika.exceptions.AMQPError as err:
        raise PubSubError(f"could not set QoS: {err}") from err

    def on_message(ch: Any, method: Any, properties: Any, body: bytes) -> None:
        try:
            target = unmarshal(body)
        except (ValueError, TypeError, KeyError, UnpackException) as err:
            print(f"could not unmarshal message: {err}")
            return
        ack = handler(target)
        if ack is AckType.ACK:
            ch.basic_ack(delivery_tag=method.delivery_tag)
        elif ack is AckType.NACK_DISCARD:
            ch.basic_nack(delivery_tag=method.delivery_tag, requeue=False)
        elif ack is AckType.NACK_REQUEUE:
            ch.basic_nack(delivery_tag=method.delivery_tag, requeue=True)

    try:
        channel.basic_consume(queue=name, on_message_callback=on_message, auto_ack=False)
    except pika.exceptions.AMQPError as err:
        raise PubSubError(f"could not consume messages: {err}") from err
    return channel


def _decoder(
    parse: Callable[[bytes], Any], decode: Optional[Callable[[Any], Any]]
) -> Callable[[bytes], Any]:
    if decode is None:
        return parse
    return lambda body: decode(parse(body))


def subscribe_json(
    connection: Any,
    exchange: str,
    queue_name: str,
    key: str,
    queue_type: SimpleQueueType,
    handler: Callable[[Any], AckType],
    decode: Optional[Callable[[Any], Any]] = None,
) -> Any:
    """Consume JSON messages; decode turns the parsed data into the handler's type."""
    return _subscribe(
        connection, exchange, queue_name, key, queue_type, handler,
        _decoder(json.loads, decode),
    )


def subscribe_gob(
    connection: Any,
    exchange: str,
    queue_name: str,
    key: str,
    queue_type: SimpleQueueType,
    handler: Callable[[Any], AckType],
    decode: Optional[Callable[[Any], Any]] = None,
) -> Any:
    """Consume binary-encoded messages; decode turns the data into the handler's type."""
    return _subscribe(
        connection, exchange, queue_name, key, queue_type, handler,
        _decoder(lambda body: msgpack.unpackb(body, raw=False), decode),
    )