from network_topology.core.event_emitter import ClassificationEvent, EventEmitter, EventType
from network_topology.utils.error_handler import ErrorHandler, ErrorType


def make_event(event_type=EventType.PUBLIC_IP_DETECTED, device_id="AA:00:00:00:00:01"):
    return ClassificationEvent(event_type=event_type, device_id=device_id, message="test")


def test_listeners_receive_only_their_event_type(quiet_logger):
    emitter = EventEmitter(quiet_logger)
    public, skipped = [], []
    emitter.subscribe(EventType.PUBLIC_IP_DETECTED, public.append)
    emitter.subscribe(EventType.DEVICE_SKIPPED, skipped.append)

    event = make_event()
    assert emitter.emit(event) == 1

    assert public == [event]
    assert skipped == []


def test_emit_without_listeners_is_a_no_op(quiet_logger):
    emitter = EventEmitter(quiet_logger)
    assert emitter.has_listeners(EventType.EDGE_DROPPED) is False
    assert emitter.emit(make_event(EventType.EDGE_DROPPED)) == 0


def test_unsubscribe(quiet_logger):
    emitter = EventEmitter(quiet_logger)
    received = []
    emitter.subscribe(EventType.PUBLIC_IP_DETECTED, received.append)
    emitter.unsubscribe(EventType.PUBLIC_IP_DETECTED, received.append)
    emitter.unsubscribe(EventType.PUBLIC_IP_DETECTED, print)

    emitter.emit(make_event())

    assert received == []


def test_failing_listener_is_recorded_and_others_still_run(quiet_logger):
    error_handler = ErrorHandler(quiet_logger)
    emitter = EventEmitter(quiet_logger, error_handler)
    received = []

    def broken(event):
        raise RuntimeError("toast service unavailable")

    emitter.subscribe(EventType.PUBLIC_IP_DETECTED, broken)
    emitter.subscribe(EventType.PUBLIC_IP_DETECTED, received.append)

    delivered = emitter.emit(make_event())

    assert delivered == 1
    assert len(received) == 1
    assert error_handler.error_statistics[ErrorType.LISTENER_ERROR] == 1
    assert error_handler.get_error_summary() == {"listener_error": 1}
