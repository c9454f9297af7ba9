from fastapi import APIRouter, Depends, status

from loyalty.models import (
    AddPointsRequest,
    ClaimedReward,
    EnrollRequest,
    LoyaltyReward,
    LoyaltyUser,
    PointsHistoryResponse,
    PointsTransaction,
    RedeemRequest,
    RedemptionResult,
)

from ..container import ServiceContainer
from . import get_services

router = APIRouter(prefix="/loyalty", tags=["Loyalty"])


@router.get("/rewards", response_model=list[LoyaltyReward])
def list_available_rewards(services: ServiceContainer = Depends(get_services)):
    return services.loyalty.catalog.list_available()


@router.put("/users/{user_id}", response_model=LoyaltyUser)
def enroll_user(user_id: str, request: EnrollRequest, services: ServiceContainer = Depends(get_services)):
    return services.loyalty.enroll(user_id, request.email, request.name)


@router.get("/users/{user_id}", response_model=LoyaltyUser)
def get_account(user_id: str, services: ServiceContainer = Depends(get_services)):
    return services.loyalty.get_account(user_id)


@router.get("/users/{user_id}/history", response_model=PointsHistoryResponse)
def get_points_history(
    user_id: str, limit: int = 50, offset: int = 0, services: ServiceContainer = Depends(get_services)
):
    return services.loyalty.get_points_history(user_id, limit, offset)


@router.post("/users/{user_id}/points", response_model=PointsTransaction, status_code=status.HTTP_201_CREATED)
def add_points(user_id: str, request: AddPointsRequest, services: ServiceContainer = Depends(get_services)):
    return services.loyalty.add_points(user_id, request.points, request.description, request.reference_id)


@router.get("/users/{user_id}/claims", response_model=list[ClaimedReward])
def get_user_claims(user_id: str, services: ServiceContainer = Depends(get_services)):
    return services.loyalty.get_user_claims(user_id)


@router.post("/redeem", response_model=RedemptionResult, status_code=status.HTTP_201_CREATED)
def redeem_reward(request: RedeemRequest, services: ServiceContainer = Depends(get_services)):
    return services.loyalty.redeem(request.user_id, request.reward_id)
