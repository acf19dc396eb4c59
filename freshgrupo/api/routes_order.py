from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from freshgrupo.crud import order as crud_order
from freshgrupo.db.deps import ensure_owner_or_admin, get_current_user, get_db, get_payment_gateway, require_admin
from freshgrupo.models.user import User
from freshgrupo.schemas.order import OrderCreate, OrderCreated, OrderDetailOut, OrderStatusUpdate
from freshgrupo.schemas.payment import PaymentUpdate
from freshgrupo.services.order_service import place_order
from freshgrupo.services.payment_gateway import RazorpayGateway

router = APIRouter()


def _get_order_or_404(db: Session, order_id: int, current_user: User):
    order = crud_order.get_order(db, order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    ensure_owner_or_admin(current_user, order.user_id)
    return order


@router.post("/", response_model=OrderCreated, status_code=status.HTTP_201_CREATED)
def create_order(
    order_data: OrderCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    gateway: RazorpayGateway = Depends(get_payment_gateway),
):
    placed = place_order(db, current_user, order_data, gateway)
    order = crud_order.get_order(db, placed.order.id)
    result = OrderCreated.model_validate(order)
    if placed.gateway_order_id:
        result = result.model_copy(
            update={"razorpay_order_id": placed.gateway_order_id, "razorpay_key_id": gateway.key_id}
        )
    return result


@router.get("/", response_model=List[OrderDetailOut])
def list_orders(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    if current_user.is_admin:
        return crud_order.list_orders(db)
    return crud_order.list_orders(db, user_id=current_user.id)


@router.get("/details/{order_id}", response_model=OrderDetailOut)
def get_order_details(order_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return _get_order_or_404(db, order_id, current_user)


@router.get("/{user_id}", response_model=List[OrderDetailOut])
def list_user_orders(user_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    ensure_owner_or_admin(current_user, user_id)
    return crud_order.list_orders(db, user_id=user_id)


@router.patch("/{order_id}/status", response_model=OrderDetailOut)
def update_order_status(
    order_id: int,
    status_data: OrderStatusUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    order = _get_order_or_404(db, order_id, admin)
    return crud_order.update_order_status(db, order, status_data.status)


@router.post("/{order_id}/cancel", response_model=OrderDetailOut)
def cancel_order(order_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    order = _get_order_or_404(db, order_id, current_user)
    return crud_order.cancel_order(db, order)


@router.put("/{order_id}/payment", response_model=OrderDetailOut)
def update_order_payment(
    order_id: int,
    data: PaymentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    order = _get_order_or_404(db, order_id, current_user)
    return crud_order.update_payment(db, order, data)
