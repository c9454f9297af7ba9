from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status

from seller.models import (
    AddPayoutRequest,
    AddProductRequest,
    BadgeProgress,
    ListingStatus,
    Payout,
    PayoutSummary,
    PriceBand,
    RecordSaleRequest,
    RegisterSellerRequest,
    SaleResult,
    SellerProduct,
    SellerProfile,
    UpdateListingStatusRequest,
    UpdatePayoutStatusRequest,
)

from ..container import ServiceContainer
from . import get_services

router = APIRouter(prefix="/sellers", tags=["Sellers"])


@router.post("", response_model=SellerProfile, status_code=status.HTTP_201_CREATED)
def register_seller(request: RegisterSellerRequest, services: ServiceContainer = Depends(get_services)):
    return services.sellers.register_seller(request.seller_id, request.name, request.email)


@router.get("/{seller_id}", response_model=SellerProfile)
def get_seller(seller_id: str, services: ServiceContainer = Depends(get_services)):
    return services.sellers.get_seller(seller_id)


@router.post("/{seller_id}/sales", response_model=SaleResult)
def record_sale(seller_id: str, request: RecordSaleRequest, services: ServiceContainer = Depends(get_services)):
    return services.sellers.record_sale(seller_id, request.amount)


@router.get("/{seller_id}/badge", response_model=BadgeProgress)
def get_badge_progress(seller_id: str, services: ServiceContainer = Depends(get_services)):
    return services.sellers.get_badge_progress(seller_id)


# Listings

@router.post("/{seller_id}/listings", response_model=SellerProduct, status_code=status.HTTP_201_CREATED)
def add_listing(seller_id: str, request: AddProductRequest, services: ServiceContainer = Depends(get_services)):
    return services.sellers.add_product(
        seller_id,
        request.title,
        request.brand,
        request.price,
        request.condition,
        request.category,
        request.image,
        request.tags,
    )


@router.get("/{seller_id}/listings", response_model=list[SellerProduct])
def list_listings(
    seller_id: str,
    category: Optional[str] = None,
    brand: Optional[str] = None,
    listing_status: Optional[ListingStatus] = None,
    condition: Optional[str] = None,
    price_band: Optional[PriceBand] = None,
    services: ServiceContainer = Depends(get_services),
):
    return services.sellers.filter_products(seller_id, category, brand, listing_status, condition, price_band)


@router.post("/listings/{product_id}/status", response_model=SellerProduct)
def update_listing_status(
    product_id: UUID, request: UpdateListingStatusRequest, services: ServiceContainer = Depends(get_services)
):
    return services.sellers.update_listing_status(product_id, request.status)


# Payouts

@router.post("/{seller_id}/payouts", response_model=Payout, status_code=status.HTTP_201_CREATED)
def add_payout(seller_id: str, request: AddPayoutRequest, services: ServiceContainer = Depends(get_services)):
    return services.sellers.add_payout(seller_id, request.order_id, request.item, request.buyer, request.amount)


@router.get("/{seller_id}/payouts", response_model=list[Payout])
def list_payouts(
    seller_id: str,
    search: Optional[str] = None,
    payout_status: Optional[str] = None,
    services: ServiceContainer = Depends(get_services),
):
    return services.sellers.filter_payouts(seller_id, search, payout_status)


@router.get("/{seller_id}/payouts/summary", response_model=PayoutSummary)
def get_payout_summary(seller_id: str, services: ServiceContainer = Depends(get_services)):
    return services.sellers.get_payout_summary(seller_id)


@router.post("/payouts/{payout_id}/status", response_model=Payout)
def update_payout_status(
    payout_id: UUID, request: UpdatePayoutStatusRequest, services: ServiceContainer = Depends(get_services)
):
    return services.sellers.update_payout_status(payout_id, request.status)
