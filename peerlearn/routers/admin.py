from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from .. import accounts, courses
from ..database import get_db
from ..errors import ValidationFailed
from ..models import ACCOUNT_TYPES, User
from ..schemas import FeatureRequest
from ..security import get_current_admin
from ..serializers import course_to_dict, user_to_dict

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/users")
def list_users(
    account_type: Optional[str] = Query(None, alias="accountType"),
    admin: User = Depends(get_current_admin), db: Session = Depends(get_db)):
    query = db.query(User)
    if account_type:
        if account_type not in ACCOUNT_TYPES:
            raise ValidationFailed("Invalid account type")
        query = query.filter(User.account_type == account_type)
    users = query.order_by(User.created_at.desc(), User.id.desc()).all()
    return {"users": [user_to_dict(u) for u in users], "count": len(users)}


@router.delete("/users/{user_id}")
def delete_user(user_id: int, admin: User = Depends(get_current_admin), db: Session = Depends(get_db)):
    user = accounts.get_user_or_404(db, user_id)
    if user.is_admin:
        raise ValidationFailed("Cannot delete admin user")
    accounts.delete_user(db, user)
    return {"message": "User deleted"}


@router.post("/users/{user_id}/reset-password")
def reset_user_password(user_id: int, admin: User = Depends(get_current_admin), db: Session = Depends(get_db)):
    temp_password = accounts.admin_reset_password(db, user_id)
    return {"message": "Password reset", "temporaryPassword": temp_password}


@router.put("/courses/{course_id}/feature")
def feature_course(course_id: int, data: FeatureRequest, admin: User = Depends(get_current_admin), db: Session = Depends(get_db)):
    course = courses.set_featured(db, course_id, data.is_featured)
    return course_to_dict(course)
