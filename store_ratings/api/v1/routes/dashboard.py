from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from store_ratings.api.deps import get_db, get_principal
from store_ratings.schemas.dashboard import AdminDashboard, OwnerDashboard
from store_ratings.services.dashboard import build_admin_dashboard, build_owner_dashboard
from store_ratings.services.identity import Principal

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])

@router.get("/admin", response_model=AdminDashboard)
def admin_dashboard(principal: Principal=Depends(get_principal), db: Session=Depends(get_db)):
    return build_admin_dashboard(db, principal)

@router.get("/owner", response_model=OwnerDashboard)
def owner_dashboard(principal: Principal=Depends(get_principal), db: Session=Depends(get_db)):
    return build_owner_dashboard(db, principal)
