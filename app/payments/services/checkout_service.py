"""
Checkout service: authorize and start a hosted checkout for a charge.

The service is the only place a Payment is created. It:
- Checks that the caller is the charge's tenant
- Checks that the charge is still due
- Refuses a second in-flight checkout for the same charge
- Creates the pending Payment and the provider session in one transaction

Usage:
    from payments.services import CheckoutService

    result = CheckoutService.create_checkout_session(request.user, charge_id)
    return Response({"url": result.url, "payment_id": str(result.payment.id)})
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from django.conf import settings
from django.db import IntegrityError, transaction

from authentication.models import UserRole
from core.helpers import validate_uuid
from core.services import BaseService
from payments.adapters import (
    CheckoutSessionParams,
    IdempotencyKeyGenerator,
    StripeAdapter,
)
from payments.exceptions import (
    ChargeNotPayableError,
    DuplicateCheckoutError,
    PaymentNotFoundError,
    StripeError,
)
from payments.models import Payment
from payments.state_machines import PaymentProviderName, PaymentStatus
from rentals.models import Charge, ChargeStatus

if TYPE_CHECKING:
    from authentication.models import User
    from payments.protocols import PaymentProvider


@dataclass
class CheckoutResult:
    """
    Result of starting a checkout.

    Attributes:
        payment: The pending Payment, with provider_payment_id set to the session id
        url: Hosted checkout page to redirect the tenant to
    """

    payment: Payment
    url: str


class CheckoutService(BaseService):
    """
    Checkout authorizer for tenant rent payments.

    The provider can be injected for testing; any object satisfying
    payments.protocols.PaymentProvider works. Defaults to StripeAdapter.

    Usage:
        # Production
        CheckoutService.create_checkout_session(tenant, charge_id)

        # Testing with a fake provider
        CheckoutService.create_checkout_session(tenant, charge_id, provider=fake)
    """

    @classmethod
    def create_checkout_session(
        cls,
        tenant: User,
        charge_id,
        provider: PaymentProvider | None = None,
    ) -> CheckoutResult:
        """
        Start a hosted checkout for one charge.

        Checks run in a fixed order: caller, charge status, in-flight
        payment. The charge row is locked for the whole transaction, so
        two concurrent requests for the same charge are serialized and the
        second sees the first one's pending Payment.

        Args:
            tenant: User paying the charge
            charge_id: Charge to pay
            provider: Optional payment provider (default: StripeAdapter)

        Returns:
            CheckoutResult with the pending Payment and redirect URL

        Raises:
            PaymentNotFoundError: Charge does not exist
            ChargeNotPayableError: Caller is not the lease's tenant, or the
                charge is not due
            DuplicateCheckoutError: A pending payment already exists
            StripeError: The provider call failed (nothing is persisted)
        """
        provider = provider or StripeAdapter
        logger = cls.get_logger()

        with cls.atomic():
            charge = None
            if validate_uuid(charge_id):
                charge = (
                    Charge.objects.select_for_update()
                    .select_related("lease")
                    .filter(id=charge_id)
                    .first()
                )
            if charge is None:
                raise PaymentNotFoundError(
                    "Charge not found",
                    error_code="CHARGE_NOT_FOUND",
                )

            if tenant.role != UserRole.TENANT or charge.lease.tenant_id != tenant.id:
                logger.warning(
                    "Checkout refused: caller is not the charge's tenant",
                    extra={"charge_id": str(charge.id), "user_id": str(tenant.id)},
                )
                raise ChargeNotPayableError(
                    "Not allowed to pay this charge",
                    error_code="CHARGE_NOT_OWNED",
                )

            if charge.status != ChargeStatus.DUE:
                raise ChargeNotPayableError(
                    "Charge is not payable",
                    details={"charge_id": str(charge.id), "status": charge.status},
                )

            if charge.payments.filter(status=PaymentStatus.PENDING).exists():
                raise DuplicateCheckoutError(
                    "A checkout is already in progress for this charge",
                    details={"charge_id": str(charge.id)},
                )

            try:
                with transaction.atomic():
                    payment = Payment.objects.create(
                        charge=charge,
                        provider=PaymentProviderName.STRIPE,
                        amount=charge.amount,
                        currency=settings.PAYMENT_CURRENCY,
                    )
            except IntegrityError as e:
                # Partial unique index on pending payments
                raise DuplicateCheckoutError(
                    "A checkout is already in progress for this charge",
                    details={"charge_id": str(charge.id)},
                ) from e

            params = CheckoutSessionParams(
                amount_cents=payment.amount,
                currency=payment.currency,
                product_name=settings.CHECKOUT_PRODUCT_NAME,
                success_url=settings.STRIPE_CHECKOUT_SUCCESS_URL,
                cancel_url=settings.STRIPE_CHECKOUT_CANCEL_URL,
                client_reference_id=str(payment.id),
                idempotency_key=IdempotencyKeyGenerator.generate(
                    operation="checkout",
                    entity_id=payment.id,
                ),
                metadata={
                    "payment_id": str(payment.id),
                    "charge_id": str(charge.id),
                },
            )

            try:
                session = provider.create_checkout_session(params)
            except StripeError as e:
                logger.error(
                    "Checkout session creation failed",
                    extra={
                        "charge_id": str(charge.id),
                        "payment_id": str(payment.id),
                        "error_code": e.error_code,
                        "is_retryable": e.is_retryable,
                    },
                )
                raise

            payment.provider_payment_id = session.id
            payment.save(update_fields=["provider_payment_id", "updated_at"])

        logger.info(
            "Checkout session created",
            extra={
                "charge_id": str(charge.id),
                "payment_id": str(payment.id),
                "checkout_session_id": session.id,
                "amount_cents": payment.amount,
            },
        )
        return CheckoutResult(payment=payment, url=session.url)
