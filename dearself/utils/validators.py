from dearself.core.exceptions import ValidationError
from dearself.models.enums import Mood, TaskPriority
from dearself.utils.datetime_utils import date_str, parse_date

MAX_TITLE_LENGTH = 200

def is_valid_date(value: str) -> bool:
    """A real calendar day written exactly as YYYY-MM-DD"""
    try:
        return date_str(parse_date(value)) == value
    except (TypeError, ValueError):
        return False

def require_text(value, field: str, max_length: int = None) -> str:
    """Non-empty after trimming"""
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} must not be empty", field)
    value = str(value).strip()
    if max_length and len(value) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters", field)
    return value

def require_positive(value, field: str) -> int:
    number = _as_int(value, field)
    if number <= 0:
        raise ValidationError(f"{field} must be positive", field)
    return number

def require_non_negative(value, field: str) -> int:
    number = _as_int(value, field)
    if number < 0:
        raise ValidationError(f"{field} must not be negative", field)
    return number

def require_range(value, field: str, low: int, high: int) -> int:
    number = _as_int(value, field)
    if not low <= number <= high:
        raise ValidationError(f"{field} must be between {low} and {high}", field)
    return number

def require_date(value: str, field: str = "date") -> str:
    if not value or not is_valid_date(value):
        raise ValidationError(f"{field} must be YYYY-MM-DD", field)
    return value

def require_priority(value) -> TaskPriority:
    try:
        return TaskPriority(value)
    except ValueError:
        raise ValidationError(f"Unknown priority: {value}", "priority")

def require_mood(value) -> Mood:
    try:
        return Mood(value)
    except ValueError:
        raise ValidationError(f"Unknown mood: {value}", "mood")

def _as_int(value, field: str) -> int:
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError(f"{field} must be a whole number", field)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a whole number", field)
