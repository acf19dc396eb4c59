from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from freshgrupo.crud import order as crud_order
from freshgrupo.db.deps import ensure_owner_or_admin, get_current_user, get_db, get_payment_gateway, require_admin
from freshgrupo.models.order import PaymentStatus
from freshgrupo.models.user import User
from freshgrupo.schemas.payment import (
    GatewayOrderCreate,
    GatewayOrderOut,
    PaymentAdminOut,
    PaymentCreate,
    PaymentOut,
    PaymentVerification,
    PaymentVerificationResult,
)
from freshgrupo.services import payment_service
from freshgrupo.services.payment_gateway import RazorpayGateway

# Mounted under /api: the gateway endpoints sit at the top level, payments under /payments
router = APIRouter()


def _get_order_or_404(db: Session, order_id: int, current_user: User):
    order = crud_order.get_order(db, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    ensure_owner_or_admin(current_user, order.user_id)
    return order


@router.post("/create-razorpay-order", response_model=GatewayOrderOut)
def create_razorpay_order(
    data: GatewayOrderCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    gateway: RazorpayGateway = Depends(get_payment_gateway),
):
    order = _get_order_or_404(db, data.order_id, current_user)
    gateway_order_id, amount = payment_service.create_gateway_order(db, order, gateway, amount=data.amount)
    return GatewayOrderOut(order_id=gateway_order_id, amount=amount, currency=gateway.currency, key_id=gateway.key_id)


@router.post("/verify-payment", response_model=PaymentVerificationResult)
def verify_payment(
    data: PaymentVerification,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    gateway: RazorpayGateway = Depends(get_payment_gateway),
):
    order = _get_order_or_404(db, data.order_id, current_user)
    payment = payment_service.verify_payment(db, order, data, gateway)

    if payment.status == PaymentStatus.failed:
        result = PaymentVerificationResult(
            status="failed",
            message="Payment signature verification failed",
            payment=PaymentOut.model_validate(payment),
        )
        return JSONResponse(status_code=400, content=result.model_dump(mode="json", by_alias=True))

    return PaymentVerificationResult(
        status="success",
        message="Payment verified successfully",
        payment=PaymentOut.model_validate(payment),
    )


@router.get("/payments", response_model=List[PaymentAdminOut])
def list_payments(db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    return payment_service.list_payments(db)


@router.post("/payments", response_model=PaymentOut, status_code=status.HTTP_201_CREATED)
def record_payment(data: PaymentCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    order = _get_order_or_404(db, data.order_id, current_user)
    return payment_service.record_payment(db, order, data)
