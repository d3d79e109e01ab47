from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from cashdesk.core import config
from cashdesk.db.get_db import get_db
from cashdesk.services import transaction_service
from cashdesk.utils.auth import Identity, get_current_identity, require_admin
from cashdesk.utils.helpers import read_json_body, success_response

router = APIRouter()


@router.get("")
def list_transactions(
    page: int = Query(1, ge=1),
    limit: int = Query(config.DEFAULT_PAGE_SIZE, ge=1, le=config.MAX_PAGE_SIZE),
    cashier_id: Optional[str] = Query(None, alias="cashierId"),
    txn_type: Optional[str] = Query(None, alias="type"),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    transactions, pagination = transaction_service.list_transactions(
        db, page=page, limit=limit, cashier_id=cashier_id, txn_type=txn_type
    )
    return success_response(
        data={"transactions": transactions, "pagination": pagination},
        message="Transactions retrieved successfully"
    )


@router.post("", status_code=201)
async def create_transaction(
    request: Request,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity)
):
    body = await read_json_body(request)
    transaction = transaction_service.record_transaction(db, identity, body)
    cashier_name = transaction_service.cashier_name_for(db, transaction.cashier_id)
    return JSONResponse(
        status_code=201,
        content=success_response(
            data=transaction_service.serialize_transaction(transaction, cashier_name),
            message="Transaction added successfully"
        )
    )


@router.get("/stats")
def get_transaction_stats(db: Session = Depends(get_db), identity: Identity = Depends(get_current_identity)):
    return success_response(
        data=transaction_service.get_stats(db),
        message="Statistics retrieved successfully"
    )


@router.delete("/{transaction_id}")
def delete_transaction(transaction_id: str, db: Session = Depends(get_db), admin: Identity = Depends(require_admin)):
    transaction_service.delete_transaction(db, transaction_id)
    return success_response(message="Transaction deleted successfully")
