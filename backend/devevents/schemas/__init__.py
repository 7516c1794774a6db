from devevents.schemas.user import UserCreate, UserResponse
from devevents.schemas.event import EventCreate, EventUpdate, EventResponse
from devevents.schemas.booking import BookingCreate, BookingUpdate, BookingResponse
from devevents.schemas.envelope import Envelope, ErrorEnvelope

__all__ = [
    "UserCreate", "UserResponse",
    "EventCreate", "EventUpdate", "EventResponse",
    "BookingCreate", "BookingUpdate", "BookingResponse",
    "Envelope", "ErrorEnvelope",
]
