from datetime import date, datetime

from .config import Config
from .errors import ValidationError

CATEGORIES = ('study', 'work', 'sleep', 'leisure', 'exercise', 'social', 'other')

# Every category sits in exactly one of these two sets
PRODUCTIVE_CATEGORIES = frozenset({'study', 'work', 'exercise'})
UNPRODUCTIVE_CATEGORIES = frozenset({'leisure', 'social', 'sleep', 'other'})

ALL_CATEGORIES = "all"


def is_productive(category: str) -> bool:
    return category in PRODUCTIVE_CATEGORIES


class ActivityRecord:
    def __init__(
        self,
        id,
        activity_name,
        category,
        duration_minutes,
        date,
        notes="",
        created_at=None,
    ):
        self.id = id
        self.activity_name = activity_name
        self.category = category
        self.duration_minutes = duration_minutes
        self.date = date  # datetime.date, no time-of-day
        self.notes = notes or ""
        self.created_at = created_at or datetime.now().isoformat()

    @property
    def hours(self):
        return self.duration_minutes // 60

    @property
    def minutes(self):
        return self.duration_minutes % 60

    def to_dict(self):
        # Keys match the blob layout written by the browser version of the dashboard
        return {
            "id": self.id,
            "activityName": self.activity_name,
            "category": self.category,
            "hours": self.hours,
            "minutes": self.minutes,
            "durationMinutes": self.duration_minutes,
            "date": self.date.isoformat(),
            "notes": self.notes,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data):
        """Rebuild a record from its persisted form.

        Older blobs carry only hours + minutes, so the duration is derived
        from them when `durationMinutes` is missing. Raises KeyError,
        TypeError or ValueError on records that cannot be decoded or that
        break the name/category/duration rules. Dates are not checked against
        today, since stored records age.
        """
        if "durationMinutes" in data:
            duration = int(data["durationMinutes"])
        else:
            duration = int(data.get("hours") or 0) * 60 + int(data.get("minutes") or 0)
        if not 1 <= duration <= Config.MAX_DAILY_MINUTES:
            raise ValueError(f"Duration out of range: {duration}")

        name = str(data["activityName"]).strip()
        if len(name) < 2:
            raise ValueError(f"Activity name too short: {name!r}")

        category = data["category"]
        if category not in CATEGORIES:
            raise ValueError(f"Unknown category: {category!r}")

        return cls(
            id=int(data["id"]),
            activity_name=name,
            category=category,
            duration_minutes=duration,
            date=parse_date(data["date"]),
            notes=data.get("notes") or "",
            created_at=data.get("createdAt"),
        )

    def __eq__(self, other):
        if not isinstance(other, ActivityRecord):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return (
            f"<ActivityRecord id={self.id} name={self.activity_name!r} "
            f"category={self.category} minutes={self.duration_minutes} date={self.date}>"
        )


def parse_date(value):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(str(value).strip()[:10], '%Y-%m-%d').date()


def _to_int(value):
    if value is None or value == "":
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def duration_from_input(data) -> int:
    """Total minutes from form-style input (hours + minutes, or durationMinutes)."""
    if data.get("durationMinutes") not in (None, ""):
        return _to_int(data.get("durationMinutes"))
    return _to_int(data.get("hours")) * 60 + _to_int(data.get("minutes"))


def validate_activity(data, today):
    """Return the first user-facing error message for *data*, or None if valid."""
    name = (data.get("activityName") or "").strip()
    if not name or len(name) < 2:
        return "Please enter a valid activity name (at least 2 characters)"

    category = data.get("category")
    if not category:
        return "Please select a category"
    if category not in CATEGORIES:
        return "Please select a valid category"

    total_minutes = duration_from_input(data)
    if total_minutes < 1:
        return "Please enter a valid time (at least 1 minute)"
    if total_minutes > Config.MAX_DAILY_MINUTES:
        return "Time cannot exceed 24 hours"

    raw_date = data.get("date")
    if not raw_date:
        return "Please select a date"
    try:
        activity_date = parse_date(raw_date)
    except ValueError:
        return "Please select a date"

    if activity_date > today:
        return "Cannot add activities for future dates"

    return None


def build_activity(data, today, activity_id, created_at=None):
    """Validate form-style *data* and construct an ActivityRecord.

    Raises ValidationError with the user-facing message when invalid.
    """
    error = validate_activity(data, today)
    if error:
        raise ValidationError(error)

    return ActivityRecord(
        id=activity_id,
        activity_name=data["activityName"].strip(),
        category=data["category"],
        duration_minutes=duration_from_input(data),
        date=parse_date(data["date"]),
        notes=(data.get("notes") or "").strip(),
        created_at=created_at,
    )
