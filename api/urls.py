"""
API URLs for the PG occupancy service
"""
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from rooms.views import RoomViewSet
from residents.views import ResidentViewSet, VacationViewSet, PublicRegistrationView
from payments.views import PaymentViewSet

# Create router
router = DefaultRouter()
router.register(r'rooms', RoomViewSet, basename='room')
router.register(r'residents', ResidentViewSet, basename='resident')
router.register(r'vacations', VacationViewSet, basename='vacation')
router.register(r'payments', PaymentViewSet, basename='payment')

urlpatterns = [
    # JWT Authentication
    path('auth/login/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/refresh/', TokenRefreshView.as_view(), name='token_refresh'),

    # Resident self-registration
    path('public/register/', PublicRegistrationView.as_view(), name='public_register'),

    # Audit logs
    path('audit/', include('audit.urls')),

    # API routes
    path('', include(router.urls)),
]
