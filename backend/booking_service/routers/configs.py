# backend/booking_service/routers/configs.py

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.configs import (
    EffectiveConfigRead,
    SlotsConfigCreate,
    SlotsConfigRead,
    SlotsConfigUpdate,
)
from ..services.configs import ConfigManagement, ConfigValues
from ..services.slots import ConfigKey
from .deps import current_user, get_config_management

router = APIRouter(tags=["configs"])


@router.post("/configs", response_model=SlotsConfigRead, status_code=status.HTTP_201_CREATED)
def create_config(
    data: SlotsConfigCreate,
    user_id: int = Depends(current_user),
    configs: ConfigManagement = Depends(get_config_management),
    db: Session = Depends(get_db),
):
    key = ConfigKey(data.company_id, data.address_id, data.service_id)
    values = ConfigValues(
        slot_duration_minutes=data.slot_duration_minutes,
        max_concurrent_bookings=data.max_concurrent_bookings,
        advance_booking_days=data.advance_booking_days,
        min_booking_notice_minutes=data.min_booking_notice_minutes,
    )
    return configs.create(db, user_id, key, values)


@router.get("/configs/resolve", response_model=EffectiveConfigRead)
def resolve_config(
    company_id: int = Query(..., gt=0),
    address_id: int | None = Query(None, gt=0),
    service_id: int | None = Query(None, gt=0),
    configs: ConfigManagement = Depends(get_config_management),
    db: Session = Depends(get_db),
):
    config = configs.get_with_hierarchy(db, ConfigKey(company_id, address_id, service_id))
    return EffectiveConfigRead(
        id=config.id,
        company_id=config.company_id,
        address_id=config.address_id,
        service_id=config.service_id,
        level=config.level.value,
        slot_duration_minutes=config.slot_duration_minutes,
        max_concurrent_bookings=config.max_concurrent_bookings,
        advance_booking_days=config.advance_booking_days,
        min_booking_notice_minutes=config.min_booking_notice_minutes,
        has_advance_limit=config.has_advance_limit,
        supports_parallel_bookings=config.supports_parallel_bookings,
    )


@router.get("/configs/{id}", response_model=SlotsConfigRead)
def get_config(
    id: int,
    configs: ConfigManagement = Depends(get_config_management),
    db: Session = Depends(get_db),
):
    return configs.get_by_id(db, id)


@router.patch("/configs/{id}", response_model=SlotsConfigRead)
def update_config(
    id: int,
    data: SlotsConfigUpdate,
    user_id: int = Depends(current_user),
    configs: ConfigManagement = Depends(get_config_management),
    db: Session = Depends(get_db),
):
    return configs.update(db, id, user_id, data.model_dump(exclude_unset=True))


@router.delete("/configs/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_config(
    id: int,
    user_id: int = Depends(current_user),
    configs: ConfigManagement = Depends(get_config_management),
    db: Session = Depends(get_db),
):
    configs.delete(db, id, user_id)


@router.delete("/configs", status_code=status.HTTP_204_NO_CONTENT)
def delete_config_by_key(
    company_id: int = Query(..., gt=0),
    address_id: int | None = Query(None, gt=0),
    service_id: int | None = Query(None, gt=0),
    user_id: int = Depends(current_user),
    configs: ConfigManagement = Depends(get_config_management),
    db: Session = Depends(get_db),
):
    configs.delete_by_key(db, ConfigKey(company_id, address_id, service_id), user_id)


@router.get("/companies/{company_id}/configs", response_model=list[SlotsConfigRead])
def list_company_configs(
    company_id: int,
    user_id: int = Depends(current_user),
    configs: ConfigManagement = Depends(get_config_management),
    db: Session = Depends(get_db),
):
    return configs.get_all_by_company(db, company_id, user_id)
