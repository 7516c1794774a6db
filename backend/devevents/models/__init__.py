from devevents.models.user import User
from devevents.models.event import Event, EVENT_MODES
from devevents.models.booking import Booking

__all__ = ["User", "Event", "Booking", "EVENT_MODES"]
