from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from store_ratings.api.deps import PageParams, ResourceId, get_db, get_page_params, get_principal
from store_ratings.schemas.common import MessageResponse
from store_ratings.schemas.rating import (
    RatingRead,
    RatingSubmit,
    RatingSubmitResponse,
    StoreRatingList,
    UserRatingList,
)
from store_ratings.services import ratings as ledger
from store_ratings.services.identity import Principal

router = APIRouter(prefix="/ratings", tags=["Rating"])

@router.post("/", response_model=RatingSubmitResponse, status_code=status.HTTP_201_CREATED)
def submit_rating(
    payload: RatingSubmit,
    response: Response,
    principal: Principal=Depends(get_principal),
    db: Session=Depends(get_db),
):
    result = ledger.submit(db, principal, payload.store_id, payload.value)
    if result.was_update:
        response.status_code = status.HTTP_200_OK
        message = "Rating updated successfully"
    else:
        message = "Rating submitted successfully"
    return RatingSubmitResponse(message=message, rating=RatingRead.model_validate(result.rating))

@router.get("/user/{user_id}", response_model=UserRatingList)
def list_user_ratings(user_id: ResourceId, principal: Principal=Depends(get_principal), db: Session=Depends(get_db)):
    return UserRatingList(items=ledger.list_for_user(db, principal, user_id))

@router.get("/store/{store_id}", response_model=StoreRatingList)
def list_store_ratings(
    store_id: ResourceId,
    paging: PageParams=Depends(get_page_params),
    principal: Principal=Depends(get_principal),
    db: Session=Depends(get_db),
):
    return ledger.list_for_store(db, principal, store_id, page=paging.page, limit=paging.limit)

@router.delete("/{id}", response_model=MessageResponse)
def delete_rating(id: ResourceId, principal: Principal=Depends(get_principal), db: Session=Depends(get_db)):
    ledger.delete_by_id(db, principal, id)
    return MessageResponse(message="Rating deleted successfully")
