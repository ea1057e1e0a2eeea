# Imported for side effects: every model must be registered on the metadata
# before relationships are resolved or tables are created.
from rallypoint.api.users.models import Users  # noqa: F401
from rallypoint.api.events.models import Events, Registrations, WaitlistEntries  # noqa: F401
from rallypoint.api.hourlogs.models import HourLogs  # noqa: F401
from rallypoint.api.messages.models import SupportMessages  # noqa: F401
