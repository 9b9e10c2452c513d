from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from .. import accounts
from ..database import get_db
from ..errors import ValidationFailed
from ..models import User
from ..schemas import ProfileUpdate
from ..security import get_current_user
from ..serializers import user_to_dict

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/profile")
def get_profile(user: User = Depends(get_current_user)):
    return user_to_dict(user, expand_courses=True)


@router.put("/profile")
def update_profile(data: ProfileUpdate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    user = accounts.update_profile(db, user, data)
    return user_to_dict(user)


@router.delete("/profile")
def delete_profile(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    accounts.delete_user(db, user)
    return {"message": "User account deleted"}


@router.post("/profile/picture")
def upload_profile_picture(
    profilePicture: UploadFile = File(None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if profilePicture is None:
        raise ValidationFailed("No file uploaded")

    content = profilePicture.file.read()
    path = accounts.save_profile_picture(
        db, user, profilePicture.filename, profilePicture.content_type, content
    )
    return {"profilePicture": path}
