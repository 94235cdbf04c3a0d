"""Invoice API Routes

FastAPI routes for subscription, case and payment plan invoice generation.
"""

from typing import Type, TypeVar

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, ValidationError
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from libs.result import Error, Result
from invoice_engine.adapter.repositories import (
    SqlAlchemyInvoiceRepository,
    SqlAlchemyMatterRepository,
    SqlAlchemyPaymentPlanRepository,
    SqlAlchemySubscriptionRepository,
    SqlAlchemyTimeEntryRepository,
)
from invoice_engine.adapter.services import (
    SqlAlchemyInvoiceNumberAllocator,
    SqlAlchemyUnitOfWork,
    SystemClock,
)
from invoice_engine.api.error import ClientError
from invoice_engine.api.schemas.invoice_request import (
    CaseBatchRequestSchema,
    CaseInvoiceRequestSchema,
    PaymentPlanInvoiceRequestSchema,
    RemainingInstallmentsRequestSchema,
    SubscriptionBatchRequestSchema,
    SubscriptionInvoiceRequestSchema,
)
from invoice_engine.app.use_cases.invoicing import (
    BatchInvoiceResultDTO,
    GenerateCaseBatchCommandDTO,
    GenerateCaseInvoice,
    GenerateCaseInvoiceBatch,
    GenerateCaseInvoiceCommandDTO,
    GeneratePaymentPlanInvoice,
    GeneratePaymentPlanInvoiceCommandDTO,
    GenerateRemainingInstallments,
    GenerateRemainingInstallmentsCommandDTO,
    GenerateSubscriptionBatchCommandDTO,
    GenerateSubscriptionInvoice,
    GenerateSubscriptionInvoiceBatch,
    GenerateSubscriptionInvoiceCommandDTO,
    GetInvoice,
    InvoiceErrorCode,
    InvoiceResponseDTO,
)
from invoice_engine.depends import get_session

router = APIRouter(prefix="/billing/invoices", tags=["Invoices"])

CommandT = TypeVar("CommandT", bound=BaseModel)

STATUS_BY_ERROR_CODE = {
    InvoiceErrorCode.NOT_FOUND.value: status.HTTP_404_NOT_FOUND,
    InvoiceErrorCode.DUPLICATE_INVOICE.value: status.HTTP_409_CONFLICT,
    InvoiceErrorCode.SUBJECT_NOT_ACTIVE_IN_PERIOD.value: 422,
    InvoiceErrorCode.MISSING_BILLING_CONFIG.value: 422,
    InvoiceErrorCode.MISSING_OUTCOME_DATA.value: 422,
    InvoiceErrorCode.INSTALLMENT_OUT_OF_RANGE.value: 422,
    InvoiceErrorCode.PERSISTENCE_ERROR.value: status.HTTP_503_SERVICE_UNAVAILABLE,
}

ERROR_RESPONSES = {
    404: {
        "description": "Billing subject not found",
        "content": {
            "application/json": {
                "example": {
                    "error": {
                        "code": "NOT_FOUND",
                        "message": "subscription 5b0f7a52 not found"
                    }
                }
            }
        }
    },
    409: {
        "description": "Invoice already exists",
        "content": {
            "application/json": {
                "example": {
                    "error": {
                        "code": "DUPLICATE_INVOICE",
                        "message": "Invoice SUB-2025-000001 already exists for subscription "
                                   "5b0f7a52 for period 2025-01-01 - 2025-01-31"
                    }
                }
            }
        }
    },
    422: {"description": "Billing configuration or data error"},
    503: {"description": "Invoice could not be persisted"},
}


def _unwrap(result: Result):
    if result.is_err():
        raise ClientError(
            result.error,
            status_code=STATUS_BY_ERROR_CODE.get(result.error.code, status.HTTP_400_BAD_REQUEST),
        )
    return result.value


def _to_command(command_cls: Type[CommandT], **data) -> CommandT:
    try:
        return command_cls(**data)
    except ValidationError as e:
        raise ClientError(
            Error(code="VALIDATION_ERROR", message=str(e.errors()[0]["msg"])),
            status_code=422,
        )


def build_subscription_generator(session: AsyncSession) -> GenerateSubscriptionInvoice:
    return GenerateSubscriptionInvoice(
        uow=SqlAlchemyUnitOfWork(session),
        subscription_repo=SqlAlchemySubscriptionRepository(session),
        time_entry_repo=SqlAlchemyTimeEntryRepository(session),
        invoice_repo=SqlAlchemyInvoiceRepository(session),
        number_allocator=SqlAlchemyInvoiceNumberAllocator(session),
        clock=SystemClock(),
        currency=ApplicationConfig.DEFAULT_CURRENCY,
    )


def build_case_generator(session: AsyncSession) -> GenerateCaseInvoice:
    return GenerateCaseInvoice(
        uow=SqlAlchemyUnitOfWork(session),
        matter_repo=SqlAlchemyMatterRepository(session),
        time_entry_repo=SqlAlchemyTimeEntryRepository(session),
        invoice_repo=SqlAlchemyInvoiceRepository(session),
        number_allocator=SqlAlchemyInvoiceNumberAllocator(session),
        clock=SystemClock(),
        currency=ApplicationConfig.DEFAULT_CURRENCY,
    )


def build_payment_plan_generator(session: AsyncSession) -> GeneratePaymentPlanInvoice:
    return GeneratePaymentPlanInvoice(
        uow=SqlAlchemyUnitOfWork(session),
        payment_plan_repo=SqlAlchemyPaymentPlanRepository(session),
        invoice_repo=SqlAlchemyInvoiceRepository(session),
        number_allocator=SqlAlchemyInvoiceNumberAllocator(session),
        clock=SystemClock(),
        currency=ApplicationConfig.DEFAULT_CURRENCY,
    )


@router.post(
    "/subscription",
    response_model=InvoiceResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
async def generate_subscription_invoice(
    request: SubscriptionInvoiceRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Generate the invoice of a client subscription for one billing period.

    The base fee is prorated when the subscription starts or ends inside the
    period; usage beyond each included service quantity is billed as overage.

    **Returns:**
    - 201: Draft invoice created
    - 404: Subscription not found
    - 409: The subscription is already invoiced for this period
    - 422: Subscription not active in the period
    """
    command = _to_command(GenerateSubscriptionInvoiceCommandDTO, **request.model_dump())
    use_case = build_subscription_generator(session)
    return _unwrap(await use_case.execute(command))


@router.post(
    "/subscription/batch",
    response_model=BatchInvoiceResultDTO,
    status_code=status.HTTP_200_OK,
)
async def generate_subscription_invoice_batch(
    request: SubscriptionBatchRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Generate subscription invoices for every billable subscription of a law firm.

    Individual failures are reported in `errors`; they never fail the batch.
    """
    command = _to_command(GenerateSubscriptionBatchCommandDTO, **request.model_dump())
    use_case = GenerateSubscriptionInvoiceBatch(
        SqlAlchemySubscriptionRepository(session),
        build_subscription_generator(session),
    )
    return _unwrap(await use_case.execute(command))


@router.post(
    "/case",
    response_model=InvoiceResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
async def generate_case_invoice(
    request: CaseInvoiceRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Generate a case billing invoice for a matter.

    **Returns:**
    - 201: Draft invoice created
    - 404: Matter not found
    - 409: The matter is already invoiced for this period
    - 422: Billing configuration or case outcome missing
    """
    command = _to_command(GenerateCaseInvoiceCommandDTO, **request.model_dump())
    use_case = build_case_generator(session)
    return _unwrap(await use_case.execute(command))


@router.post(
    "/case/batch",
    response_model=BatchInvoiceResultDTO,
    status_code=status.HTTP_200_OK,
)
async def generate_case_invoice_batch(
    request: CaseBatchRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """Generate one case invoice per requested matter."""
    command = _to_command(GenerateCaseBatchCommandDTO, **request.model_dump())
    use_case = GenerateCaseInvoiceBatch(build_case_generator(session))
    return _unwrap(await use_case.execute(command))


@router.post(
    "/payment-plan",
    response_model=InvoiceResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses=ERROR_RESPONSES,
)
async def generate_payment_plan_invoice(
    request: PaymentPlanInvoiceRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Generate the invoice of one payment plan installment.

    A late fee is added when `scheduled_date` (today when omitted) is more
    than the plan's grace period past the installment due date.

    **Returns:**
    - 201: Draft invoice created
    - 404: Payment plan not found
    - 409: The installment is already invoiced
    - 422: Installment out of range or plan cancelled
    """
    command = _to_command(GeneratePaymentPlanInvoiceCommandDTO, **request.model_dump())
    use_case = build_payment_plan_generator(session)
    return _unwrap(await use_case.execute(command))


@router.post(
    "/payment-plan/{payment_plan_id}/remaining",
    response_model=BatchInvoiceResultDTO,
    status_code=status.HTTP_200_OK,
    responses={404: ERROR_RESPONSES[404]},
)
async def generate_remaining_installments(
    payment_plan_id: str,
    request: RemainingInstallmentsRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Generate invoices for all remaining installments of a payment plan.

    Each installment succeeds or fails on its own; results are listed in
    installment order.
    """
    command = _to_command(
        GenerateRemainingInstallmentsCommandDTO,
        payment_plan_id=payment_plan_id,
        **request.model_dump(),
    )
    use_case = GenerateRemainingInstallments(
        SqlAlchemyPaymentPlanRepository(session),
        SqlAlchemyInvoiceRepository(session),
        build_payment_plan_generator(session),
    )
    return _unwrap(await use_case.execute(command))


@router.get(
    "/{invoice_id}",
    response_model=InvoiceResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={404: {"description": "Invoice not found"}},
)
async def get_invoice(
    invoice_id: str,
    law_firm_id: str = Query(..., min_length=1),
    session: AsyncSession = Depends(get_session)
):
    """Retrieve a generated invoice with its line items."""
    use_case = GetInvoice(SqlAlchemyInvoiceRepository(session))
    return _unwrap(await use_case.execute(law_firm_id, invoice_id))
