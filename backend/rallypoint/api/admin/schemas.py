from rallypoint.core.response.base_model import CustomBaseModel


class AdminStats(CustomBaseModel):
    total_volunteers: int
    pending_volunteers: int
    upcoming_events: int
    total_hours_logged: float
