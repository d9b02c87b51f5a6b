from datetime import date, datetime, timedelta
import pytz

DEFAULT_TZ = "UTC"

def now_in(tz_name: str = DEFAULT_TZ) -> datetime:
    return datetime.now(pytz.timezone(tz_name))

def date_str(d: date) -> str:
    return d.strftime("%Y-%m-%d")

def week_ago(d: date, days: int = 7) -> date:
    return d - timedelta(days=days)

def parse_date(value: str, fmt: str = "%Y-%m-%d") -> date:
    return datetime.strptime(value, fmt).date()
