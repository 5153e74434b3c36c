from datetime import datetime, timezone


def utcnow() -> datetime:
    # UTC naïf, comme ce qui est stocké dans les colonnes DateTime
    return datetime.now(timezone.utc).replace(tzinfo=None)
