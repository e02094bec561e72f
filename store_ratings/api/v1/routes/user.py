from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from store_ratings.api.deps import PageParams, ResourceId, get_db, get_page_params, get_principal
from store_ratings.db.enums import Role, SortOrder
from store_ratings.schemas.common import MessageResponse
from store_ratings.schemas.user import UserCreate, UserList, UserMutationResponse, UserRead, UserUpdate
from store_ratings.services import users as user_service
from store_ratings.services.identity import Principal
from store_ratings.services.query import ListQuery

router = APIRouter(prefix="/users", tags=["User"])

@router.get("/", response_model=UserList)
def list_users(
    name: str | None = None,
    email: str | None = None,
    address: str | None = None,
    role: Role | None = None,
    sort_by: str = "name",
    sort_order: SortOrder = SortOrder.ASC,
    paging: PageParams=Depends(get_page_params),
    principal: Principal=Depends(get_principal),
    db: Session=Depends(get_db),
):
    query = ListQuery(
        filters={"name": name, "email": email, "address": address, "role": role},
        sort_by=sort_by,
        sort_order=sort_order,
        page=paging.page,
        limit=paging.limit,
    )
    page = user_service.list_users(db, principal, query)
    return UserList(items=page.items, pagination=page.pagination())

@router.get("/{id}", response_model=UserRead)
def get_user(id: ResourceId, principal: Principal=Depends(get_principal), db: Session=Depends(get_db)):
    return user_service.get_user_detail(db, principal, id)

@router.post("/", response_model=UserMutationResponse, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, principal: Principal=Depends(get_principal), db: Session=Depends(get_db)):
    user = user_service.create_user(db, principal, payload)
    return UserMutationResponse(message="User created successfully", user=user)

@router.put("/{id}", response_model=UserMutationResponse)
def update_user(
    id: ResourceId,
    payload: UserUpdate,
    principal: Principal=Depends(get_principal),
    db: Session=Depends(get_db),
):
    user = user_service.update_user(db, principal, id, payload)
    return UserMutationResponse(message="User updated successfully", user=user)

@router.delete("/{id}", response_model=MessageResponse)
def delete_user(id: ResourceId, principal: Principal=Depends(get_principal), db: Session=Depends(get_db)):
    user_service.delete_user(db, principal, id)
    return MessageResponse(message="User deleted successfully")
