# settlements/api/views.py

from django.utils import timezone
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.api.errors import error_response
from accounting.services.exceptions import LedgerServiceError
from settlements.api.filters import SettlementFilter
from settlements.api.serializers import (
    ApplyMovementSerializer,
    CounterpartyGroupSerializer,
    SettlementMovementSerializer,
    SettlementSerializer,
    SettlementSummarySerializer,
    VoidSettlementSerializer,
)
from settlements.models import Settlement
from settlements.services.rollup import group_by_counterparty, settlement_totals
from settlements.services.settlement_service import (
    apply_movement,
    get_settlement,
    list_movements,
    void_settlement,
)


def _base_queryset():
    return Settlement.objects.select_related("invoice").order_by("due_date", "created_at")


class SettlementListView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = SettlementSerializer
    filterset_class = SettlementFilter

    def get_queryset(self):
        return _base_queryset()

    def get_serializer_context(self):
        ctx = super().get_serializer_context()
        ctx["today"] = timezone.localdate()
        return ctx

    @extend_schema(tags=["settlements"], responses=SettlementSerializer(many=True))
    def get(self, request):
        qs = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(qs)
        if page is not None:
            return self.get_paginated_response(self.get_serializer(page, many=True).data)
        return Response(self.get_serializer(qs, many=True).data, status=status.HTTP_200_OK)


class SettlementDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = SettlementSerializer

    @extend_schema(tags=["settlements"], responses=SettlementSerializer)
    def get(self, request, settlement_id):
        try:
            settlement = get_settlement(settlement_id)
        except LedgerServiceError as exc:
            return error_response(exc)
        return Response(self.get_serializer(settlement).data, status=status.HTTP_200_OK)


class SettlementSummaryView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = SettlementSummarySerializer
    filterset_class = SettlementFilter

    def get_queryset(self):
        return _base_queryset()

    @extend_schema(tags=["settlements"], responses=SettlementSummarySerializer)
    def get(self, request):
        qs = self.filter_queryset(self.get_queryset())
        return Response(settlement_totals(qs), status=status.HTTP_200_OK)


class SettlementMovementsView(GenericAPIView):
    """
    GET:  movement history, most recent first
    POST: apply a collection / payment
    """

    permission_classes = [IsAuthenticated]
    serializer_class = ApplyMovementSerializer

    @extend_schema(tags=["settlements"], responses=SettlementMovementSerializer(many=True))
    def get(self, request, settlement_id):
        try:
            movements = list_movements(settlement_id)
        except LedgerServiceError as exc:
            return error_response(exc)
        return Response(
            SettlementMovementSerializer(movements, many=True).data,
            status=status.HTTP_200_OK,
        )

    @extend_schema(tags=["settlements"], request=ApplyMovementSerializer)
    def post(self, request, settlement_id):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            result = apply_movement(
                settlement_id=settlement_id,
                amount=data["amount"],
                movement_date=data.get("date"),
                payment_method=data.get("paymentMethod", ""),
                notes=data.get("notes", ""),
                user=request.user,
            )
        except LedgerServiceError as exc:
            response = error_response(exc)
            current = Settlement.objects.filter(id=settlement_id).first()
            if current is not None:
                response.data["residualAmount"] = str(current.residual_amount)
                response.data["status"] = current.status
            return response

        return Response(
            {
                "settlement": SettlementSerializer(result.settlement).data,
                "movementId": str(result.movement.id),
            },
            status=status.HTTP_201_CREATED,
        )


class SettlementVoidView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = VoidSettlementSerializer

    @extend_schema(tags=["settlements"], request=VoidSettlementSerializer, responses=SettlementSerializer)
    def post(self, request, settlement_id):
        if not request.user.has_perm("settlements.void_settlement"):
            return Response(
                {"detail": "You do not have permission to void settlements."},
                status=status.HTTP_403_FORBIDDEN,
            )

        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            settlement = void_settlement(
                settlement_id=settlement_id,
                reason=s.validated_data.get("reason", ""),
                user=request.user,
            )
        except LedgerServiceError as exc:
            return error_response(exc)

        return Response(SettlementSerializer(settlement).data, status=status.HTTP_200_OK)


class CounterpartyRollupView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = CounterpartyGroupSerializer

    @extend_schema(
        tags=["settlements"],
        parameters=[
            OpenApiParameter(
                name="type",
                type=str,
                required=False,
                description="receivable | payable | all (default: all)",
            ),
        ],
        responses=CounterpartyGroupSerializer(many=True),
    )
    def get(self, request):
        obligation_type = (request.query_params.get("type") or "all").strip().lower()
        if obligation_type not in ("all", Settlement.RECEIVABLE, Settlement.PAYABLE):
            return Response(
                {"detail": "type must be receivable, payable or all"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        qs = Settlement.objects.all()
        if obligation_type != "all":
            qs = qs.filter(obligation_type=obligation_type)

        groups = group_by_counterparty(qs, today=timezone.localdate())
        return Response([g.as_dict() for g in groups], status=status.HTTP_200_OK)
