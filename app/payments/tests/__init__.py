"""
Tests for payments app.

This package contains test modules for:
- test_models.py: Payment and PaymentEvent model tests
- test_checkout_service.py: CheckoutService tests
- test_webhook_service.py: WebhookService idempotency and reconciliation
- test_views.py: API endpoint tests
- test_end_to_end.py: Lease to paid charge over HTTP

Usage:
    pytest payments/tests/
    pytest payments/tests/test_checkout_service.py
"""
