import uuid
from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("accounting", "0001_initial"),
        ("settlements", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Invoice",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("invoice_number", models.CharField(max_length=64)),
                ("invoice_date", models.DateField(default=django.utils.timezone.localdate)),
                ("invoice_type", models.CharField(choices=[("sale", "Sale"), ("purchase", "Purchase"), ("credit_note", "Credit note")], max_length=12)),
                ("counterparty_type", models.CharField(choices=[("customer", "Customer"), ("supplier", "Supplier")], max_length=10)),
                ("counterparty_name", models.CharField(max_length=200)),
                ("counterparty_id", models.CharField(blank=True, default="", help_text="Id in the external customer/supplier directory (optional)", max_length=64)),
                ("vat_regime", models.CharField(choices=[("domestic_taxable", "Domestic taxable"), ("eu_exempt", "EU non-taxable"), ("extra_eu", "Extra-EU"), ("reverse_charge", "Reverse charge")], default="domestic_taxable", max_length=20)),
                ("net_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("tax_rate", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=5)),
                ("tax_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), editable=False, max_digits=14)),
                ("total_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), editable=False, max_digits=14)),
                ("status", models.CharField(choices=[("draft", "Draft"), ("registered", "Registered")], default="draft", max_length=12)),
                ("financial_status", models.CharField(choices=[("to_collect", "To collect"), ("to_pay", "To pay"), ("collected", "Collected"), ("paid", "Paid")], max_length=12)),
                ("due_date", models.DateField(blank=True, null=True)),
                ("payment_date", models.DateField(blank=True, null=True)),
                ("notes", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("registered_at", models.DateTimeField(blank=True, null=True)),
                ("accounting_entry", models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="invoice", to="accounting.accountingentry")),
                ("journal", models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="invoice", to="accounting.journalheader")),
                ("settlement", models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="invoice", to="settlements.settlement")),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="invoices_created", to=settings.AUTH_USER_MODEL)),
                ("registered_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="invoices_registered", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "db_table": "invoices",
                "ordering": ["-invoice_date", "-created_at"],
                "indexes": [
                    models.Index(fields=["invoice_type", "status"], name="invoice_type_status_idx"),
                    models.Index(fields=["financial_status"], name="invoice_fin_status_idx"),
                    models.Index(fields=["counterparty_name"], name="invoice_cp_name_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("counterparty_type", "counterparty_name", "invoice_number"), name="uniq_counterparty_invoice_number"),
                    models.CheckConstraint(
                        condition=models.Q(("net_amount__gte", Decimal("0.00"))),
                        name="invoice_net_nonnegative",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("tax_rate__gte", Decimal("0.00"))),
                        name="invoice_tax_rate_nonnegative",
                    ),
                ],
            },
        ),
    ]
