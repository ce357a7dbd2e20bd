from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="AccountingEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("document_date", models.DateField(default=django.utils.timezone.localdate)),
                ("document_type", models.CharField(choices=[("invoice", "Invoice"), ("internal_document", "Internal document")], max_length=20)),
                ("direction", models.CharField(choices=[("inflow", "Inflow"), ("outflow", "Outflow")], max_length=8)),
                ("net_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("tax_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("tax_rate", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=5)),
                ("total_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("financial_status", models.CharField(choices=[("to_collect", "To collect"), ("to_pay", "To pay"), ("collected", "Collected"), ("paid", "Paid")], max_length=12)),
                ("payment_method", models.CharField(blank=True, default="", max_length=30)),
                ("payment_date", models.DateField(blank=True, null=True)),
                ("description", models.CharField(blank=True, default="", max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "verbose_name": "Accounting Entry",
                "verbose_name_plural": "Accounting Entries",
                "db_table": "accounting_entries",
                "ordering": ["-document_date", "-created_at"],
                "indexes": [
                    models.Index(fields=["document_date"], name="acct_entry_doc_date_idx"),
                    models.Index(fields=["direction", "financial_status"], name="acct_entry_dir_fin_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("net_amount__gte", Decimal("0.00")), ("tax_amount__gte", Decimal("0.00"))),
                        name="chk_entry_amounts_nonnegative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="JournalHeader",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("competence_date", models.DateField(default=django.utils.timezone.localdate)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=14)),
                ("description", models.TextField(help_text="Narrative description of the journal")),
                ("status", models.CharField(choices=[("pending", "Pending"), ("confirmed", "Confirmed"), ("registered", "Registered")], default="registered", max_length=12)),
                ("payment_method", models.CharField(blank=True, default="", max_length=30)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("accounting_entry", models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name="journal", to="accounting.accountingentry")),
            ],
            options={
                "verbose_name": "Journal Header",
                "verbose_name_plural": "Journal Headers",
                "db_table": "journal_headers",
                "ordering": ["-competence_date", "-created_at"],
                "indexes": [
                    models.Index(fields=["competence_date"], name="journal_competence_idx"),
                    models.Index(fields=["status"], name="journal_status_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("amount__gt", Decimal("0.00"))),
                        name="chk_journal_amount_positive",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="JournalLine",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("line_order", models.PositiveSmallIntegerField()),
                ("account_key", models.CharField(choices=[("BANK", "Bank"), ("RECEIVABLES", "Customer receivables"), ("PAYABLES", "Supplier payables")], max_length=16)),
                ("debit_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("credit_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("description", models.CharField(blank=True, default="", max_length=255)),
                ("journal_header", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="lines", to="accounting.journalheader")),
            ],
            options={
                "verbose_name": "Journal Line",
                "verbose_name_plural": "Journal Lines",
                "db_table": "journal_lines",
                "ordering": ["journal_header", "line_order"],
                "indexes": [
                    models.Index(fields=["account_key"], name="journal_line_account_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("journal_header", "line_order"), name="uniq_journal_line_order"),
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("credit_amount", Decimal("0.00")), ("debit_amount__gt", Decimal("0.00"))),
                            models.Q(("credit_amount__gt", Decimal("0.00")), ("debit_amount", Decimal("0.00"))),
                            _connector="OR",
                        ),
                        name="chk_journal_line_one_side",
                    ),
                ],
            },
        ),
    ]
