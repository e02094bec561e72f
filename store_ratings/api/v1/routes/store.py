from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from store_ratings.api.deps import PageParams, ResourceId, get_db, get_page_params, get_principal
from store_ratings.db.enums import SortOrder
from store_ratings.schemas.common import MessageResponse
from store_ratings.schemas.store import StoreCreate, StoreList, StoreMutationResponse, StoreRead, StoreUpdate
from store_ratings.services import stores as store_service
from store_ratings.services.identity import Principal
from store_ratings.services.query import ListQuery

router = APIRouter(prefix="/stores", tags=["Store"])

@router.get("/", response_model=StoreList)
def list_stores(
    name: str | None = None,
    email: str | None = None,
    address: str | None = None,
    sort_by: str = "name",
    sort_order: SortOrder = SortOrder.ASC,
    paging: PageParams=Depends(get_page_params),
    principal: Principal=Depends(get_principal),
    db: Session=Depends(get_db),
):
    query = ListQuery(
        filters={"name": name, "email": email, "address": address},
        sort_by=sort_by,
        sort_order=sort_order,
        page=paging.page,
        limit=paging.limit,
    )
    page = store_service.list_stores(db, principal, query)
    return StoreList(items=page.items, pagination=page.pagination())

@router.get("/{id}", response_model=StoreRead)
def get_store(id: ResourceId, principal: Principal=Depends(get_principal), db: Session=Depends(get_db)):
    return store_service.get_store_detail(db, principal, id)

@router.post("/", response_model=StoreMutationResponse, status_code=status.HTTP_201_CREATED)
def create_store(payload: StoreCreate, principal: Principal=Depends(get_principal), db: Session=Depends(get_db)):
    store = store_service.create_store(db, principal, payload)
    return StoreMutationResponse(message="Store created successfully", store=store)

@router.put("/{id}", response_model=StoreMutationResponse)
def update_store(
    id: ResourceId,
    payload: StoreUpdate,
    principal: Principal=Depends(get_principal),
    db: Session=Depends(get_db),
):
    store = store_service.update_store(db, principal, id, payload)
    return StoreMutationResponse(message="Store updated successfully", store=store)

@router.delete("/{id}", response_model=MessageResponse)
def delete_store(id: ResourceId, principal: Principal=Depends(get_principal), db: Session=Depends(get_db)):
    store_service.delete_store(db, principal, id)
    return MessageResponse(message="Store deleted successfully")
