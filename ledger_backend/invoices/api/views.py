# invoices/api/views.py

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.api.errors import error_response
from accounting.services.exceptions import LedgerServiceError
from invoices.api.filters import InvoiceFilter
from invoices.api.serializers import (
    InvoiceCreateSerializer,
    InvoiceSerializer,
    InvoiceStatsSerializer,
    RegistrationResultSerializer,
)
from invoices.models import Invoice
from invoices.services.registry_service import (
    create_draft,
    get_invoice,
    invoice_stats,
    register,
)


class InvoiceListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = InvoiceSerializer
    filterset_class = InvoiceFilter
    queryset = Invoice.objects.select_related("settlement").order_by(
        "-invoice_date", "-created_at"
    )

    @extend_schema(tags=["invoices"], responses=InvoiceSerializer(many=True))
    def get(self, request):
        qs = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(InvoiceSerializer(page, many=True).data)
        return Response(InvoiceSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["invoices"],
        request=InvoiceCreateSerializer,
        responses={201: InvoiceSerializer},
    )
    def post(self, request):
        s = InvoiceCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            invoice = create_draft(**s.validated_data, user=request.user)
        except LedgerServiceError as exc:
            return error_response(exc)

        return Response(InvoiceSerializer(invoice).data, status=status.HTTP_201_CREATED)


class InvoiceDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = InvoiceSerializer

    @extend_schema(tags=["invoices"], responses=InvoiceSerializer)
    def get(self, request, invoice_id):
        try:
            invoice = get_invoice(invoice_id)
        except LedgerServiceError as exc:
            return error_response(exc)
        return Response(InvoiceSerializer(invoice).data, status=status.HTTP_200_OK)


class InvoiceRegisterView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = RegistrationResultSerializer

    @extend_schema(tags=["invoices"], request=None, responses=RegistrationResultSerializer)
    def post(self, request, invoice_id):
        try:
            result = register(invoice_id, user=request.user)
        except LedgerServiceError as exc:
            return error_response(exc)
        return Response(result.as_dict(), status=status.HTTP_200_OK)


class InvoiceStatsView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = InvoiceStatsSerializer
    filterset_class = InvoiceFilter
    queryset = Invoice.objects.all()

    @extend_schema(tags=["invoices"], responses=InvoiceStatsSerializer)
    def get(self, request):
        qs = self.filter_queryset(self.get_queryset())
        return Response(invoice_stats(qs), status=status.HTTP_200_OK)
