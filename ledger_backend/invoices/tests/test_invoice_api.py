# invoices/tests/test_invoice_api.py

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from invoices.models import Invoice

User = get_user_model()


class InvoiceAPITests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(username="clerk", password="pass1234")
        self.list_url = reverse("invoices")

    def _create(self, **overrides):
        payload = {
            "invoice_number": "F-100",
            "invoice_type": "sale",
            "invoice_date": "2024-03-01",
            "counterparty_name": "Acme",
            "net_amount": "1000.00",
            "tax_rate": "22.00",
        }
        payload.update(overrides)
        return self.client.post(self.list_url, payload, format="json")

    def test_unauthenticated_requests_are_rejected(self):
        response = self.client.get(self.list_url)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_create_draft(self):
        self.client.force_authenticate(self.user)

        response = self._create()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["status"], "draft")
        self.assertEqual(response.data["total_amount"], "1220.00")
        self.assertEqual(Invoice.objects.get().created_by, self.user)

    def test_create_rejects_negative_net(self):
        self.client.force_authenticate(self.user)

        response = self._create(net_amount="-5.00")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Invoice.objects.exists())

    def test_duplicate_number_is_bad_request(self):
        self.client.force_authenticate(self.user)
        self._create()

        response = self._create()

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "LedgerValidationError")

    def test_register_returns_ids(self):
        self.client.force_authenticate(self.user)
        invoice_id = self._create().data["id"]

        response = self.client.post(
            reverse("invoice-register", args=[invoice_id]), {}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        invoice = Invoice.objects.get(id=invoice_id)
        self.assertEqual(response.data["accountingEntryId"], invoice.accounting_entry_id)
        self.assertEqual(response.data["journalId"], invoice.journal_id)
        self.assertEqual(response.data["settlementId"], str(invoice.settlement_id))
        self.assertEqual(invoice.registered_by, self.user)

    def test_register_twice_is_conflict(self):
        self.client.force_authenticate(self.user)
        invoice_id = self._create().data["id"]
        url = reverse("invoice-register", args=[invoice_id])
        self.client.post(url, {}, format="json")

        response = self.client.post(url, {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_register_unknown_invoice_is_not_found(self):
        self.client.force_authenticate(self.user)

        response = self.client.post(
            reverse("invoice-register", args=["00000000-0000-0000-0000-000000000000"]),
            {},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_list_filters_and_search(self):
        self.client.force_authenticate(self.user)
        self._create(invoice_number="F-1")
        self._create(invoice_number="P-1", invoice_type="purchase", counterparty_name="Globex")

        response = self.client.get(self.list_url, {"invoice_type": "purchase"})
        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["results"][0]["invoice_number"], "P-1")

        response = self.client.get(self.list_url, {"search": "acm"})
        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["results"][0]["counterparty_name"], "Acme")

    def test_stats(self):
        self.client.force_authenticate(self.user)
        invoice_id = self._create().data["id"]
        self._create(invoice_number="F-2")
        self.client.post(reverse("invoice-register", args=[invoice_id]), {}, format="json")

        response = self.client.get(reverse("invoice-stats"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["draftCount"], 1)
        self.assertEqual(response.data["registeredCount"], 1)
        self.assertEqual(response.data["toCollectTotal"], "1220.00")
