from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from barbershop.services.service_crud import barber_crud, service_crud, service_response
from barbershop.schemas.service_schema import BarberListResponse, BarberResponse, ServiceListResponse
from barbershop.database import get_db
from barbershop.logger import get_logger

service_router = APIRouter()
logger = get_logger(__name__)

# PUBLIC ENDPOINTS - booking wizard catalog


@service_router.get(
    "/services", response_model=ServiceListResponse, status_code=status.HTTP_200_OK
)
def get_services(db: Session = Depends(get_db)):
    """Active services ordered by name"""
    try:
        logger.info("Fetching active services")
        services = service_crud.get_active_services(db)
        return ServiceListResponse(services=[service_response(s) for s in services])

    except Exception as e:
        logger.error(f"Error fetching services: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch services",
        )


@service_router.get(
    "/barbers", response_model=BarberListResponse, status_code=status.HTTP_200_OK
)
def get_barbers(db: Session = Depends(get_db)):
    """Active barbers ordered by id"""
    try:
        logger.info("Fetching active barbers")
        barbers = barber_crud.get_active_barbers(db)
        return BarberListResponse(barbers=[BarberResponse.model_validate(b) for b in barbers])

    except Exception as e:
        logger.error(f"Error fetching barbers: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch barbers",
        )
