from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from petbook.auth.supabase_auth import get_current_user
from petbook.core.accounts import get_account, upsert_account
from petbook.database import get_db
from petbook.schemas.account_schema import AccountOut, AccountUpdate


router = APIRouter(prefix="/users", tags=["Accounts"])


# --------------------------------------------------
# MY ACCOUNT
# --------------------------------------------------
@router.get("/me", response_model=AccountOut)
def read_my_account(
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    return get_account(db, current_user["sub"])


# --------------------------------------------------
# CREATE / UPDATE MY ACCOUNT (mirrors Supabase Auth)
# --------------------------------------------------
@router.put("/me", response_model=AccountOut)
def update_my_account(
    payload: AccountUpdate,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    return upsert_account(
        db,
        current_user["sub"],
        current_user.get("email"),
        account_type=payload.account_type,
        full_name=payload.full_name,
        avatar_url=payload.avatar_url,
    )
