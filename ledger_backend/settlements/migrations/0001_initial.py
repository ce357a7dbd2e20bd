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
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Settlement",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("obligation_type", models.CharField(choices=[("receivable", "Receivable"), ("payable", "Payable")], max_length=12)),
                ("counterparty_type", models.CharField(choices=[("customer", "Customer"), ("supplier", "Supplier")], max_length=10)),
                ("counterparty_name", models.CharField(max_length=200)),
                ("counterparty_id", models.CharField(blank=True, default="", max_length=64)),
                ("total_amount", models.DecimalField(decimal_places=2, max_digits=14)),
                ("residual_amount", models.DecimalField(decimal_places=2, max_digits=14)),
                ("document_date", models.DateField(default=django.utils.timezone.localdate)),
                ("due_date", models.DateField()),
                ("status", models.CharField(choices=[("open", "Open"), ("partial", "Partial"), ("closed", "Closed"), ("voided", "Voided")], default="open", editable=False, max_length=10)),
                ("voided_at", models.DateTimeField(blank=True, null=True)),
                ("void_reason", models.CharField(blank=True, default="", max_length=255)),
                ("notes", models.CharField(blank=True, default="", max_length=255)),
                ("version", models.PositiveIntegerField(default=0, editable=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("accounting_entry", models.ForeignKey(blank=True, help_text="Originating accounting entry (invoice recognition)", null=True, on_delete=django.db.models.deletion.PROTECT, related_name="settlements", to="accounting.accountingentry")),
                ("journal_header", models.ForeignKey(blank=True, help_text="Originating journal", null=True, on_delete=django.db.models.deletion.PROTECT, related_name="settlements", to="accounting.journalheader")),
                ("voided_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="settlements_voided", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "db_table": "settlements",
                "ordering": ["due_date", "created_at"],
                "permissions": [("void_settlement", "Can void settlements")],
                "indexes": [
                    models.Index(fields=["obligation_type", "status"], name="settlement_type_status_idx"),
                    models.Index(fields=["counterparty_name", "obligation_type"], name="settlement_cp_type_idx"),
                    models.Index(fields=["due_date"], name="settlement_due_date_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("total_amount__gt", Decimal("0.00"))),
                        name="chk_settlement_total_positive",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("residual_amount__gte", Decimal("0.00")), ("residual_amount__lte", models.F("total_amount"))),
                        name="chk_settlement_residual_in_range",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="SettlementMovement",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=14)),
                ("movement_date", models.DateField(default=django.utils.timezone.localdate)),
                ("payment_method", models.CharField(blank=True, default="", max_length=30)),
                ("notes", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("accounting_entry", models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name="settlement_movement", to="accounting.accountingentry")),
                ("journal_header", models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name="settlement_movement", to="accounting.journalheader")),
                ("settlement", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="movements", to="settlements.settlement")),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="settlement_movements_created", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "db_table": "settlement_movements",
                "ordering": ["-movement_date", "-created_at"],
                "indexes": [
                    models.Index(fields=["settlement", "movement_date"], name="movement_settlement_date_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("amount__gt", Decimal("0.00"))),
                        name="chk_settlement_movement_amount_positive",
                    ),
                ],
            },
        ),
    ]
