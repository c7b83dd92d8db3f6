from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsAdminRole, IsAffiliator
from core.pagination import StandardPagination
from referrals.models import ReferralCode
from referrals.serializers import (
    ApplyReferralCodeSerializer,
    CommissionPaymentRequestSerializer,
    CommissionPaymentSerializer,
    CommissionPaymentStatusSerializer,
    ReferralCodeCreateSerializer,
    ReferralCodeSerializer,
    ReferralCodeUpdateSerializer,
    ReferralCommissionSerializer,
    ReferralUsageSerializer,
)
from referrals.services import ledger
from referrals.services.codes import (
    apply_referral_code,
    create_referral_code,
    delete_referral_code,
    update_referral_code,
)
from referrals.services.withdrawals import request_commission_payment, update_commission_payment_status


def _date_params(request):
    return {
        "start_date": request.query_params.get("start_date"),
        "end_date": request.query_params.get("end_date"),
    }


class ApplyReferralCodeView(APIView):
    """Claim a referral code for a later booking or practice purchase."""

    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, *args, **kwargs):
        serializer = ApplyReferralCodeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        usage, discount = apply_referral_code(
            request.user,
            serializer.validated_data["code"],
            serializer.validated_data["context"],
        )
        return Response(
            {"referral_usage_id": usage.pk, "discount_percentage": str(discount)},
            status=status.HTTP_201_CREATED,
        )


class AffiliatorReferralCodeViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = ReferralCodeSerializer
    permission_classes = [permissions.IsAuthenticated, IsAffiliator]
    pagination_class = StandardPagination

    def get_queryset(self):
        return ledger.codes_for_owner(self.request.user).select_related("owner")

    @action(detail=True, methods=["get"], url_path="commissions")
    def commissions(self, request, pk=None):
        referral_code = self.get_object()
        queryset = ledger.commissions_for(referral_code_id=referral_code.pk, **_date_params(request))
        page = self.paginate_queryset(queryset)
        response = self.get_paginated_response(ReferralCommissionSerializer(page, many=True).data)
        response.data["total_earned"] = str(ledger.total_earned(referral_code.pk))
        response.data["available_balance"] = str(ledger.available_balance(referral_code.pk))
        return response

    @action(detail=True, methods=["get"], url_path="usages")
    def usages(self, request, pk=None):
        referral_code = self.get_object()
        queryset = ledger.usages_for_code(referral_code.pk, **_date_params(request))
        page = self.paginate_queryset(queryset)
        return self.get_paginated_response(ReferralUsageSerializer(page, many=True).data)


class CommissionPaymentViewSet(viewsets.ReadOnlyModelViewSet):
    """An affiliator's withdrawal requests."""

    serializer_class = CommissionPaymentSerializer
    permission_classes = [permissions.IsAuthenticated, IsAffiliator]
    pagination_class = StandardPagination

    def get_queryset(self):
        return ledger.commission_payments_for(
            owner=self.request.user,
            referral_code_id=self.request.query_params.get("referral_code"),
            status=self.request.query_params.get("status"),
        )

    def create(self, request, *args, **kwargs):
        serializer = CommissionPaymentRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        withdrawal = request_commission_payment(
            serializer.validated_data["referral_code_id"],
            request.user,
            serializer.validated_data["amount"],
        )
        return Response(CommissionPaymentSerializer(withdrawal).data, status=status.HTTP_201_CREATED)


class AdminReferralCodeViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = ReferralCodeSerializer
    permission_classes = [permissions.IsAuthenticated, IsAdminRole]
    pagination_class = StandardPagination
    queryset = ReferralCode.objects.select_related("owner")
    filterset_fields = ["owner", "is_active"]
    search_fields = ["code", "owner__email", "owner__full_name"]
    ordering_fields = ["created_at", "code"]

    def create(self, request, *args, **kwargs):
        serializer = ReferralCodeCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        referral_code = create_referral_code(**serializer.validated_data)
        return Response(ReferralCodeSerializer(referral_code).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, *args, **kwargs):
        serializer = ReferralCodeUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        referral_code = update_referral_code(kwargs["pk"], **serializer.validated_data)
        return Response(ReferralCodeSerializer(referral_code).data)

    def destroy(self, request, *args, **kwargs):
        delete_referral_code(kwargs["pk"])
        return Response(status=status.HTTP_204_NO_CONTENT)


class AdminReferralCommissionViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = ReferralCommissionSerializer
    permission_classes = [permissions.IsAuthenticated, IsAdminRole]
    pagination_class = StandardPagination

    def get_queryset(self):
        return ledger.commissions_for(
            referral_code_id=self.request.query_params.get("referral_code"),
            **_date_params(self.request),
        )


class AdminCommissionPaymentViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = CommissionPaymentSerializer
    permission_classes = [permissions.IsAuthenticated, IsAdminRole]
    pagination_class = StandardPagination

    def get_queryset(self):
        return ledger.commission_payments_for(
            referral_code_id=self.request.query_params.get("referral_code"),
            status=self.request.query_params.get("status"),
        )

    @action(detail=True, methods=["patch"], url_path="status")
    def set_status(self, request, pk=None):
        serializer = CommissionPaymentStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        withdrawal = update_commission_payment_status(
            pk,
            serializer.validated_data["status"],
            notes=serializer.validated_data.get("notes"),
            transaction_id=serializer.validated_data.get("transaction_id") or None,
            admin=request.user,
        )
        return Response(CommissionPaymentSerializer(withdrawal).data)
