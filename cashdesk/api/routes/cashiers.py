from typing import Optional
from fastapi import APIRouter, Query, Request, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from cashdesk.core import config
from cashdesk.db.get_db import get_db
from cashdesk.models.enums import AppRole
from cashdesk.services import cashier_service
from cashdesk.utils.auth import Identity, authorize, get_bearer_token, require_admin
from cashdesk.utils.helpers import read_json_body, success_response

router = APIRouter()


@router.get("")
def list_cashiers(
    search: Optional[str] = Query(None),
    token: Optional[str] = Depends(get_bearer_token),
    db: Session = Depends(get_db)
):
    if not config.PUBLIC_CASHIER_LISTING:
        authorize(token, required_role=AppRole.admin)

    cashiers = cashier_service.list_cashiers(db, search)
    return success_response(
        data=[cashier_service.serialize_cashier(c) for c in cashiers],
        message="Cashiers retrieved successfully"
    )


@router.post("", status_code=201)
async def create_cashier(
    request: Request,
    db: Session = Depends(get_db),
    admin: Identity = Depends(require_admin)
):
    body = await read_json_body(request)
    cashier = cashier_service.create_cashier(db, body)
    return JSONResponse(
        status_code=201,
        content=success_response(
            data=cashier_service.serialize_cashier(cashier),
            message="Cashier added successfully"
        )
    )


@router.get("/{cashier_id}")
def get_cashier(cashier_id: str, db: Session = Depends(get_db), admin: Identity = Depends(require_admin)):
    cashier = cashier_service.get_cashier(db, cashier_id)
    return success_response(data=cashier_service.serialize_cashier(cashier))


@router.put("/{cashier_id}")
async def update_cashier(
    cashier_id: str,
    request: Request,
    db: Session = Depends(get_db),
    admin: Identity = Depends(require_admin)
):
    body = await read_json_body(request)
    cashier = cashier_service.update_cashier(db, cashier_id, body)
    return success_response(
        data=cashier_service.serialize_cashier(cashier),
        message="Cashier updated successfully"
    )


@router.delete("/{cashier_id}")
def delete_cashier(cashier_id: str, db: Session = Depends(get_db), admin: Identity = Depends(require_admin)):
    cashier_service.delete_cashier(db, cashier_id)
    return success_response(message="Cashier deleted successfully")
