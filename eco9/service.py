# eco9/service.py
# Activity logging on top of the repository, plus the impact dashboard aggregation.
import logging
from collections import defaultdict
from datetime import datetime, timedelta, timezone

from . import schemas
from .errors import InvalidArgumentError, ActivityNotFoundError
from .impact import calculate_impact, validate_value, round2
from .models import gen_id

logger = logging.getLogger(__name__)

# days of history covered by each dashboard range, None = everything
RANGE_DAYS = {"daily": 7, "weekly": 28, "monthly": 30, "all": None}
UPDATABLE_FIELDS = ("category", "value", "unit", "subtype", "timestamp", "notes")


def _as_utc(ts):
    if ts is None:
        return datetime.now(timezone.utc)
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def _require(name, val):
    if val is None or not str(val).strip():
        raise InvalidArgumentError(f"{name} is required", field=name)
    return val


def _impact_for(category, value, unit, subtype):
    res = calculate_impact(category, value, unit, subtype)
    return schemas.ImpactOut(**res.as_dict())


def summarize_impact(activities, range_="monthly", now=None):
    if range_ not in RANGE_DAYS:
        raise InvalidArgumentError(
            f"range must be one of {', '.join(RANGE_DAYS)}", field="range",
        )
    now = _as_utc(now)
    days = RANGE_DAYS[range_]
    cutoff = None if days is None else now - timedelta(days=days)

    co2 = defaultdict(float)
    water = defaultdict(float)
    count = 0
    for a in activities:
        ts = _as_utc(a.timestamp)
        if cutoff is not None and ts < cutoff:
            continue
        day = ts.date().isoformat()
        co2[day] += a.impact.co2_saved
        water[day] += a.impact.water_conserved
        count += 1

    history = [
        schemas.DailyImpact(date=day, co2_saved=round2(co2[day]), water_conserved=round2(water[day]))
        for day in sorted(co2)
    ]
    return schemas.ImpactSummary(
        range=range_,
        co2_saved=round2(sum(co2.values())),
        water_conserved=round2(sum(water.values())),
        activity_count=count,
        historical_data=history,
    )


class ActivityService:

    def __init__(self, repository):
        self.repository = repository

    def log_activity(self, user_id, category, value, unit, subtype=None, timestamp=None, notes=None):
        _require("user_id", user_id)
        _require("category", category)
        _require("unit", unit)
        value = validate_value(value)
        act = schemas.Activity(
            id=gen_id("activity"),
            user_id=user_id,
            category=category,
            subtype=subtype,
            value=value,
            unit=unit,
            timestamp=_as_utc(timestamp),
            notes=notes,
            impact=_impact_for(category, value, unit, subtype),
        )
        saved = self.repository.add(act)
        logger.info(
            "Logged activity",
            extra={"activity_id": saved.id, "category": category, "user_id": user_id},
        )
        return saved

    def get_activity(self, user_id, activity_id):
        act = self.repository.get(activity_id)
        # someone else's activity looks exactly like a missing one
        if act is None or act.user_id != user_id:
            raise ActivityNotFoundError(activity_id)
        return act

    def update_activity(self, user_id, activity_id, **changes):
        current = self.get_activity(user_id, activity_id)
        fields = current.model_dump(exclude={"impact"})
        for key in changes:
            if key not in UPDATABLE_FIELDS:
                raise InvalidArgumentError(f"cannot update {key}", field=key)
        # a subtype belongs to its category
        if "category" in changes and changes["category"] != current.category and "subtype" not in changes:
            fields["subtype"] = None
        for key, val in changes.items():
            if key == "timestamp" and val is None:
                continue
            fields[key] = val
        _require("category", fields["category"])
        _require("unit", fields["unit"])
        fields["value"] = validate_value(fields["value"])
        fields["timestamp"] = _as_utc(fields["timestamp"])
        fields["impact"] = _impact_for(fields["category"], fields["value"], fields["unit"], fields["subtype"])
        updated = self.repository.update(schemas.Activity(**fields))
        if updated is None:
            raise ActivityNotFoundError(activity_id)
        logger.info("Updated activity", extra={"activity_id": activity_id, "user_id": user_id})
        return updated

    def delete_activity(self, user_id, activity_id):
        self.get_activity(user_id, activity_id)
        if not self.repository.delete(activity_id):
            raise ActivityNotFoundError(activity_id)
        logger.info("Deleted activity", extra={"activity_id": activity_id, "user_id": user_id})

    def list_activities(self, user_id, category=None, sort_by="timestamp", sort_order="desc", limit=10, offset=0):
        return self.repository.list(
            user_id, category=category, sort_by=sort_by, sort_order=sort_order,
            limit=limit, offset=offset,
        )

    def impact_summary(self, user_id, range_="monthly", now=None):
        return summarize_impact(self.repository.all_for_user(user_id), range_, now)
