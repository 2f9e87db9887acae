"""
Enquiries Service Layer

Students enquire about admissions and teachers about vacancies. The owner
of the admission or vacancy receives the enquiry, can filter and read the
enquiries addressed to them, and records a decision on each one.

Rules:
- Only open admissions and vacancies accept enquiries
- One pending enquiry per enquirer and target
- Owners only ever see enquiries addressed to them; anything else is 404
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from eduportal.core.exceptions import ConflictError, NotFoundError, ValidationError
from eduportal.modules.admissions import service as admissions_service
from eduportal.modules.enquiries import repository
from eduportal.modules.enquiries.models import Enquiry, EnquiryStatus, EnquiryType
from eduportal.modules.enquiries.schemas import EnquiryCreate
from eduportal.modules.users.models import User
from eduportal.modules.vacancies import service as vacancies_service

logger = logging.getLogger(__name__)


async def create_admission_enquiry(
    db: AsyncSession,
    student: User,
    admission_id: str,
    data: EnquiryCreate,
) -> Enquiry:
    """
    Send an enquiry about an admission to the institution that posted it.

    Raises:
        NotFoundError: If the admission does not exist
        ValidationError: If the admission is closed
        ConflictError: If the student already has a pending enquiry for it
    """
    admission = await admissions_service.get_admission(db, admission_id)
    if not admission.is_open:
        raise ValidationError("This admission is not accepting enquiries")

    if await repository.has_pending(db, student.id, admission_id=admission.id):
        raise ConflictError("You already have a pending enquiry for this admission")

    enquiry = await repository.create(
        db,
        enquiry_type=EnquiryType.ADMISSION,
        admission_id=admission.id,
        owner_id=admission.institution_id,
        enquirer_id=student.id,
        message=data.message,
    )
    logger.info(f"Student {student.id} sent enquiry {enquiry.id} for admission {admission.id}")
    return enquiry


async def create_vacancy_enquiry(
    db: AsyncSession,
    teacher: User,
    vacancy_id: str,
    data: EnquiryCreate,
) -> Enquiry:
    """
    Send an enquiry about a vacancy to the institution or center that posted it.

    Raises:
        NotFoundError: If the vacancy does not exist
        ValidationError: If the vacancy is closed
        ConflictError: If the teacher already has a pending enquiry for it
    """
    vacancy = await vacancies_service.get_vacancy(db, vacancy_id)
    if not vacancy.is_open:
        raise ValidationError("This vacancy is not accepting enquiries")

    if await repository.has_pending(db, teacher.id, vacancy_id=vacancy.id):
        raise ConflictError("You already have a pending enquiry for this vacancy")

    enquiry = await repository.create(
        db,
        enquiry_type=EnquiryType.VACANCY,
        vacancy_id=vacancy.id,
        owner_id=vacancy.posted_by_id,
        enquirer_id=teacher.id,
        message=data.message,
    )
    logger.info(f"Teacher {teacher.id} sent enquiry {enquiry.id} for vacancy {vacancy.id}")
    return enquiry


async def list_received(
    db: AsyncSession,
    owner: User,
    *,
    enquiry_type: EnquiryType | None = None,
    status: EnquiryStatus | None = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[Enquiry], int]:
    """List enquiries addressed to the owner, optionally by type and status."""
    return await repository.list_enquiries(
        db,
        owner_id=owner.id,
        enquiry_type=enquiry_type,
        status=status,
        skip=skip,
        limit=limit,
    )


async def get_received(
    db: AsyncSession,
    owner: User,
    enquiry_id: str,
    enquiry_type: EnquiryType | None = None,
) -> Enquiry:
    """
    Get one enquiry addressed to the owner.

    Raises:
        NotFoundError: If the enquiry does not exist, is addressed to someone
            else, or is of a different type than requested
    """
    enquiry = await repository.get_for_owner(db, enquiry_id, owner.id, enquiry_type)
    if enquiry is None:
        raise NotFoundError("Enquiry", enquiry_id)
    return enquiry


async def change_status(
    db: AsyncSession,
    owner: User,
    enquiry_id: str,
    status: EnquiryStatus,
    enquiry_type: EnquiryType | None = None,
) -> Enquiry:
    """
    Record the owner's decision on an enquiry.

    Raises:
        NotFoundError: If the enquiry is not addressed to the owner
    """
    enquiry = await get_received(db, owner, enquiry_id, enquiry_type)
    if enquiry.status == status:
        return enquiry

    previous = enquiry.status
    enquiry = await repository.update_status(db, enquiry, status)
    logger.info(
        f"Owner {owner.id} moved enquiry {enquiry.id} from {previous.value} to {status.value}"
    )
    return enquiry


async def list_sent(
    db: AsyncSession,
    enquirer: User,
    *,
    status: EnquiryStatus | None = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[Enquiry], int]:
    """List the enquiries a student or teacher has sent."""
    return await repository.list_enquiries(
        db,
        enquirer_id=enquirer.id,
        status=status,
        skip=skip,
        limit=limit,
    )
