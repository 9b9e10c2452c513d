from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import orders
from ..database import get_db
from ..models import User
from ..schemas import OrderCreate
from ..security import get_current_user
from ..serializers import order_to_dict

router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.post("/create", status_code=201)
def create_order(data: OrderCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    order = orders.create_order(db, user, data.course_id, data.payment_method)
    return {"message": "Order created successfully", "order": order_to_dict(order)}


@router.post("/{order_id}/complete")
def complete_order(order_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    order = orders.complete_order(db, user, order_id)
    return {"message": "Payment successful and enrollment completed", "order": order_to_dict(order)}


@router.get("/my-orders")
def get_my_orders(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return [order_to_dict(order, expand=True) for order in orders.my_orders(db, user)]


@router.get("/{order_id}")
def get_order(order_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return order_to_dict(orders.get_own_order(db, user, order_id), expand=True)
