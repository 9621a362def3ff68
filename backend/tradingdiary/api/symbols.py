from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from tradingdiary.api import deps
from tradingdiary.models.symbols import Symbol
from tradingdiary.schemas.symbols import SymbolCreate, SymbolResponse, SymbolUpdate

router = APIRouter(prefix="/symbols", tags=["symbols"])

DUPLICATE_SYMBOL = "A symbol with this ticker already exists"


def _load_symbol(db: Session, symbol_id: int) -> Symbol:
    symbol = db.get(Symbol, symbol_id)
    if symbol is None:
        raise HTTPException(status_code=404, detail="Symbol not found")
    return symbol


@router.get("/", response_model=list[SymbolResponse])
def list_symbols(db: Session = Depends(deps.get_db)) -> list[Symbol]:
    return db.query(Symbol).order_by(Symbol.id.asc()).all()


@router.get("/{symbol_id}", response_model=SymbolResponse)
def get_symbol(symbol_id: int, db: Session = Depends(deps.get_db)) -> Symbol:
    return _load_symbol(db, symbol_id)


@router.post("/", response_model=SymbolResponse, status_code=201)
def create_symbol(payload: SymbolCreate, db: Session = Depends(deps.get_db)) -> Symbol:
    exists = db.query(Symbol).filter(Symbol.symbol == payload.symbol).first()
    if exists is not None:
        raise HTTPException(status_code=400, detail=DUPLICATE_SYMBOL)

    symbol = Symbol(symbol=payload.symbol, name=payload.name)
    db.add(symbol)
    db.commit()
    db.refresh(symbol)
    return symbol


@router.put("/{symbol_id}", response_model=SymbolResponse)
def update_symbol(
    symbol_id: int,
    payload: SymbolUpdate,
    db: Session = Depends(deps.get_db),
) -> Symbol:
    symbol = _load_symbol(db, symbol_id)
    data = {key: value for key, value in payload.model_dump(exclude_unset=True).items() if value is not None}

    if "symbol" in data:
        exists = (
            db.query(Symbol)
            .filter(Symbol.symbol == data["symbol"], Symbol.id != symbol_id)
            .first()
        )
        if exists is not None:
            raise HTTPException(status_code=400, detail=DUPLICATE_SYMBOL)

    for field, value in data.items():
        setattr(symbol, field, value)

    db.add(symbol)
    db.commit()
    db.refresh(symbol)
    return symbol


@router.delete("/{symbol_id}")
def delete_symbol(symbol_id: int, db: Session = Depends(deps.get_db)) -> dict[str, str]:
    symbol = _load_symbol(db, symbol_id)
    db.delete(symbol)
    db.commit()
    return {"message": "Symbol deleted successfully"}
