from .event_model import Event
from .slot_model import Slot
from .signup_model import Signup

__all__ = ["Event", "Slot", "Signup"]
