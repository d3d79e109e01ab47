from fastapi import APIRouter, Request, Depends
from sqlalchemy.orm import Session
from cashdesk.db.get_db import get_db
from cashdesk.models.enums import AppRole
from cashdesk.services.auth_service import login
from cashdesk.utils.auth import Identity, get_current_identity
from cashdesk.utils.helpers import read_json_body, success_response

router = APIRouter()


@router.post("/admin/login")
async def admin_login(request: Request, db: Session = Depends(get_db)):
    body = await read_json_body(request)
    result = login(db, AppRole.admin, body.get("adminId"), body.get("password"))
    return success_response(data=result, message="Login successful")


@router.post("/cashier/login")
async def cashier_login(request: Request, db: Session = Depends(get_db)):
    body = await read_json_body(request)
    result = login(db, AppRole.cashier, body.get("cashierId"), body.get("password"))
    return success_response(data=result, message="Login successful")


@router.get("/me")
def me(identity: Identity = Depends(get_current_identity)):
    return success_response(
        data={
            "id": identity.uid,
            "subject": identity.sub,
            "name": identity.name,
            "role": identity.role.value,
        },
        message="Session is valid"
    )
