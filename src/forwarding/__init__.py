from .client import EventsForwardingClient, FetchError
from .models import ErrorEvent, ErrorReport
from .regions import Region, resolve
from .window import select_recent
