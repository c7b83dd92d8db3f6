from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from core.pagination import StandardPagination
from practices.models import PracticePurchase
from practices.serializers import PracticePurchaseCreateSerializer, PracticePurchaseSerializer
from practices.services.purchases import cancel_practice_purchase, create_practice_purchase


class PracticePurchaseViewSet(viewsets.ReadOnlyModelViewSet):
    serializer_class = PracticePurchaseSerializer
    permission_classes = [permissions.IsAuthenticated]
    pagination_class = StandardPagination
    filterset_fields = ["status"]

    def get_queryset(self):
        return PracticePurchase.objects.filter(user=self.request.user).select_related("practice", "payment")

    def create(self, request, *args, **kwargs):
        serializer = PracticePurchaseCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = create_practice_purchase(
            request.user,
            serializer.validated_data["practice_id"],
            referral_usage_id=serializer.validated_data.get("referral_usage_id"),
        )
        payload = dict(PracticePurchaseSerializer(self.get_queryset().get(pk=result.purchase.pk)).data)
        payload["original_price"] = str(result.original_price)
        payload["final_price"] = str(result.final_price)
        return Response(payload, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"], url_path="cancel")
    def cancel(self, request, pk=None):
        purchase = cancel_practice_purchase(request.user, pk)
        return Response(PracticePurchaseSerializer(self.get_queryset().get(pk=purchase.pk)).data)
