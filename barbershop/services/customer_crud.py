from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from typing import Optional, Tuple
from barbershop.models.customer_model import Customer
from barbershop.logger import get_logger

logger = get_logger(__name__)

CUSTOMER_NOT_SAVED_WARNING = (
    "Customer record could not be saved; the reservation was created without it"
)


class CustomerCRUD:
    @staticmethod
    def get_by_phone(db: Session, phone: int) -> Optional[Customer]:
        return db.query(Customer).filter(Customer.phone == phone).first()

    @staticmethod
    def create_customer(db: Session, name: str, phone: int, email: Optional[str] = None) -> Customer:
        try:
            customer = Customer(name=name, phone=phone, email=email)
            db.add(customer)
            db.commit()
            db.refresh(customer)
            logger.info(f"Customer created: {customer.id}")
            return customer
        except SQLAlchemyError:
            db.rollback()
            raise

    @staticmethod
    def resolve_customer(
            db: Session, name: str, phone: int, email: Optional[str] = None
    ) -> Tuple[Optional[int], Optional[str]]:
        """Customer id for a phone number, creating the record when new.

        Returns (customer_id, warning). A failed insert is not fatal for the
        booking: the id comes back as None with a warning.
        """
        existing = CustomerCRUD.get_by_phone(db, phone)
        if existing:
            logger.debug(f"Returning customer found: {existing.id}")
            return existing.id, None

        try:
            return CustomerCRUD.create_customer(db, name, phone, email).id, None
        except IntegrityError as e:
            # another booking with this phone got there first
            winner = CustomerCRUD.get_by_phone(db, phone)
            if winner:
                return winner.id, None
            logger.warning(f"Customer insert rejected, continuing without link: {str(e)}")
        except SQLAlchemyError as e:
            logger.warning(f"Customer insert failed, continuing without link: {str(e)}")
        return None, CUSTOMER_NOT_SAVED_WARNING


customer_crud = CustomerCRUD()
