"""
Advisory event delivery for classification outcomes.

The emitter forwards events (public IP detections, skipped devices, dropped
links) to whatever listeners the host attached, typically a UI toast or a
log sink. Listeners are optional and their failures never abort a
transformation.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from .data_models import ClassifiedDevice
from ..utils.error_handler import ErrorContext, ErrorHandler, ErrorSeverity, ErrorType
from ..utils.logger import Logger, get_logger


class EventType(Enum):
    """Enumeration of advisory event types."""
    PUBLIC_IP_DETECTED = "public_ip_detected"
    DEVICE_SKIPPED = "device_skipped"
    EDGE_DROPPED = "edge_dropped"


@dataclass
class ClassificationEvent:
    """
    Advisory event raised while building a topology.

    Attributes:
        event_type: Kind of event
        device_id: MAC address of the device concerned (may be empty for skipped devices)
        message: Human-readable description
        device: Classified device, for public IP detections
        details: Additional context information
    """
    event_type: EventType
    device_id: str
    message: str
    device: Optional[ClassifiedDevice] = None
    details: Dict[str, Any] = field(default_factory=dict)


Listener = Callable[[ClassificationEvent], None]


def public_ip_event(device: ClassifiedDevice) -> ClassificationEvent:
    return ClassificationEvent(
        event_type=EventType.PUBLIC_IP_DETECTED,
        device_id=device.id,
        message=f"Device {device.vendor} ({device.id}) has a public IP address.",
        device=device,
        details={"ip": list(device.ip), "zone": device.zone.value},
    )


class EventEmitter:
    """
    Synchronous publish/subscribe hub for classification events.

    Each pipeline owns its own emitter; nothing is shared between runs.
    """

    def __init__(self, logger: Optional[Logger] = None,
                 error_handler: Optional[ErrorHandler] = None):
        """
        Initialize the emitter.

        Args:
            logger: Logger instance for listener failures
            error_handler: ErrorHandler used to record listener failures
        """
        self.logger = logger or get_logger(__name__)
        self.error_handler = error_handler or ErrorHandler(self.logger)
        self._listeners: Dict[EventType, List[Listener]] = {
            event_type: [] for event_type in EventType
        }

    def subscribe(self, event_type: EventType, listener: Listener) -> None:
        """Register a listener for one event type."""
        self._listeners[event_type].append(listener)

    def unsubscribe(self, event_type: EventType, listener: Listener) -> None:
        """Remove a listener; unknown listeners are ignored."""
        if listener in self._listeners[event_type]:
            self._listeners[event_type].remove(listener)

    def has_listeners(self, event_type: EventType) -> bool:
        return bool(self._listeners[event_type])

    def emit(self, event: ClassificationEvent) -> int:
        """
        Deliver an event to every listener registered for its type.

        Args:
            event: Event to deliver

        Returns:
            Number of listeners that handled the event without raising
        """
        delivered = 0
        for listener in list(self._listeners[event.event_type]):
            try:
                listener(event)
                delivered += 1
            except Exception as e:
                context = ErrorContext(
                    error_type=ErrorType.LISTENER_ERROR,
                    severity=ErrorSeverity.HIGH,
                    operation=f"emit:{event.event_type.value}",
                    component="EventEmitter",
                    additional_info={"device_id": event.device_id},
                )
                self.error_handler.handle_error(e, context)
        return delivered
