"""
Payments app for rent collection through Stripe Checkout.

This app handles:
- Checkout session creation for due charges
- Idempotent webhook reconciliation of provider events
- Tenant payment history

Related apps:
    - rentals: Charge model that payments settle
    - authentication: User model (tenant role)

Usage:
    from payments.services import CheckoutService, WebhookService

    # Start a hosted checkout
    result = CheckoutService.create_checkout_session(tenant, charge_id)

    # Apply a verified webhook event
    WebhookService.handle_provider_webhook(event)
"""
