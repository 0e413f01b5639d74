"""Staff records service."""

from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from tableside.core.errors import Conflict, NotFound
from tableside.models.staff import StaffMember


def list_staff(
    db: Session,
    department: Optional[str] = None,
    status: Optional[str] = None,
    search: Optional[str] = None,
) -> List[StaffMember]:
    query = db.query(StaffMember)
    if department and department != "all":
        query = query.filter(StaffMember.department == department)
    if status:
        query = query.filter(StaffMember.status == status)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(StaffMember.name.ilike(pattern), StaffMember.email.ilike(pattern)))
    return query.order_by(StaffMember.name, StaffMember.id).all()


def list_departments(db: Session) -> List[str]:
    rows = db.query(StaffMember.department).distinct().order_by(StaffMember.department).all()
    return [row[0] for row in rows]


def get_staff(db: Session, staff_id: int) -> StaffMember:
    member = db.query(StaffMember).filter(StaffMember.id == staff_id).first()
    if not member:
        raise NotFound("Staff member", staff_id)
    return member


def _ensure_unique_email(db: Session, email: str, exclude_id: Optional[int] = None) -> None:
    query = db.query(StaffMember).filter(StaffMember.email == email)
    if exclude_id is not None:
        query = query.filter(StaffMember.id != exclude_id)
    if query.first():
        raise Conflict(f"A staff member with email {email} already exists")


def create_staff(db: Session, data: dict) -> StaffMember:
    _ensure_unique_email(db, data["email"])
    member = StaffMember(**data)
    db.add(member)
    db.commit()
    db.refresh(member)
    return member


def update_staff(db: Session, staff_id: int, data: dict) -> StaffMember:
    member = get_staff(db, staff_id)
    if data.get("email") is not None:
        _ensure_unique_email(db, data["email"], exclude_id=staff_id)
    for field, value in data.items():
        setattr(member, field, value)
    db.commit()
    db.refresh(member)
    return member


def delete_staff(db: Session, staff_id: int) -> None:
    member = get_staff(db, staff_id)
    db.delete(member)
    db.commit()
