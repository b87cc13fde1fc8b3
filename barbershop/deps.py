from fastapi import Depends

from barbershop.config import Settings, get_settings
from barbershop.services.availability_engine import AvailabilityPolicy


def get_policy(settings: Settings = Depends(get_settings)) -> AvailabilityPolicy:
    return AvailabilityPolicy.from_settings(settings)
