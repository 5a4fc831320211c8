# eco9/crud.py
from datetime import timezone
from sqlalchemy.orm import Session
from . import models, schemas

SORT_COLUMNS = {
    "timestamp": models.Activity.timestamp,
    "value": models.Activity.value,
    "category": models.Activity.category,
}


def to_record(row: models.Activity) -> schemas.Activity:
    ts = row.timestamp
    if ts is not None and ts.tzinfo is None:
        # sqlite drops tzinfo; everything is stored as UTC
        ts = ts.replace(tzinfo=timezone.utc)
    return schemas.Activity(
        id=row.id,
        user_id=row.user_id,
        category=row.category,
        subtype=row.subtype,
        value=row.value,
        unit=row.unit,
        timestamp=ts,
        notes=row.notes,
        impact=schemas.ImpactOut(co2_saved=row.co2_saved, water_conserved=row.water_conserved),
    )


def _apply(row: models.Activity, act: schemas.Activity):
    row.user_id = act.user_id
    row.category = act.category
    row.subtype = act.subtype
    row.value = act.value
    row.unit = act.unit
    row.timestamp = act.timestamp
    row.notes = act.notes
    row.co2_saved = act.impact.co2_saved
    row.water_conserved = act.impact.water_conserved


def create_activity(db: Session, act: schemas.Activity):
    row = models.Activity(id=act.id)
    _apply(row, act)
    db.add(row); db.commit(); db.refresh(row)
    return row


def get_activity(db: Session, activity_id):
    return db.get(models.Activity, activity_id)


def update_activity(db: Session, act: schemas.Activity):
    row = get_activity(db, act.id)
    if row is None:
        return None
    _apply(row, act)
    db.add(row); db.commit(); db.refresh(row)
    return row


def delete_activity(db: Session, activity_id):
    row = get_activity(db, activity_id)
    if row is None:
        return False
    db.delete(row); db.commit()
    return True


def list_activities(db: Session, user_id, category=None, sort_by="timestamp", sort_order="desc", limit=None, offset=0):
    q = db.query(models.Activity).filter(models.Activity.user_id == user_id)
    if category:
        q = q.filter(models.Activity.category == category)
    col = SORT_COLUMNS[sort_by]
    q = q.order_by(col.asc() if sort_order == "asc" else col.desc(), models.Activity.id)
    if offset:
        q = q.offset(offset)
    if limit is not None:
        q = q.limit(limit)
    return q.all()
