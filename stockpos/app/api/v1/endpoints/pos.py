from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from stockpos.app.core.database import get_db
from stockpos.app.schemas.pos import CartOut, CartRequest, CheckoutRequest
from stockpos.app.schemas.sales import SaleOut
from stockpos.app.services.pos import build_cart, checkout
from stockpos.app.services.sales import sale_to_dict

router = APIRouter()


@router.post("/quote", response_model=CartOut)
def quote_cart(payload: CartRequest, db: Session = Depends(get_db)) -> dict:
    try:
        return build_cart(db, payload).summary()
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/checkout", response_model=SaleOut, status_code=status.HTTP_201_CREATED)
def checkout_cart(payload: CheckoutRequest, db: Session = Depends(get_db)) -> dict:
    try:
        sale = checkout(db, payload)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return sale_to_dict(sale)
