from django.contrib import admin
from django.urls import include, path
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from accounts.api import MeView
from bookings.api import AdminBookingViewSet, BookingViewSet
from mentoring.api import MentorSessionUpdateView
from payments.api import AdminPaymentViewSet, GatewayCallbackView, PaymentViewSet
from practices.api import PracticePurchaseViewSet
from referrals.api import (
    AdminCommissionPaymentViewSet,
    AdminReferralCodeViewSet,
    AdminReferralCommissionViewSet,
    AffiliatorReferralCodeViewSet,
    ApplyReferralCodeView,
    CommissionPaymentViewSet,
)

router = DefaultRouter()
router.register(r"bookings", BookingViewSet, basename="booking")
router.register(r"payments", PaymentViewSet, basename="payment")
router.register(r"practice-purchases", PracticePurchaseViewSet, basename="practice-purchase")
router.register(r"referrals/codes", AffiliatorReferralCodeViewSet, basename="referral-code")
router.register(
    r"referrals/commission-payments",
    CommissionPaymentViewSet,
    basename="commission-payment",
)
router.register(r"admin/bookings", AdminBookingViewSet, basename="admin-booking")
router.register(r"admin/payments", AdminPaymentViewSet, basename="admin-payment")
router.register(r"admin/referral-codes", AdminReferralCodeViewSet, basename="admin-referral-code")
router.register(
    r"admin/referral-commissions",
    AdminReferralCommissionViewSet,
    basename="admin-referral-commission",
)
router.register(
    r"admin/commission-payments",
    AdminCommissionPaymentViewSet,
    basename="admin-commission-payment",
)

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/auth/token/", TokenObtainPairView.as_view(), name="auth-token"),
    path("api/auth/refresh/", TokenRefreshView.as_view(), name="auth-refresh"),
    path("api/auth/me/", MeView.as_view(), name="auth-me"),
    path("api/referrals/apply/", ApplyReferralCodeView.as_view(), name="referral-apply"),
    path(
        "api/payments/duitku/callback/",
        GatewayCallbackView.as_view(),
        name="duitku-callback",
    ),
    path(
        "api/mentoring-sessions/<int:session_id>/mentor-update/",
        MentorSessionUpdateView.as_view(),
        name="mentoring-session-mentor-update",
    ),
    path("api/", include(router.urls)),
]
