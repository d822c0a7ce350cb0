from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from api.filters import BranchFilterBackend, get_branch_id
from api.permissions import IsManagerRole
from core.constants import ResidentStatus
from core.exceptions import ValidationError
from .models import Resident
from .repositories import ResidentRepository
from .serializers import (
    ResidentSerializer, ResidentListSerializer, ResidentCreateSerializer, PublicRegistrationSerializer,
    AllocateSerializer, SwitchRoomSerializer, VacateSerializer, RoomSwitchSerializer,
)
from .services import ResidentStore, AllocationManager, LifecycleService, VacationScheduler


class ResidentViewSet(viewsets.GenericViewSet):
    """
    ViewSet for residents.
    MOST IMPORTANT - allocation, room switches and vacations go through here.
    """
    permission_classes = [IsAuthenticated, IsManagerRole]
    filter_backends = [BranchFilterBackend]
    lookup_value_regex = r'\d+'

    def get_serializer_class(self):
        if self.action == 'list':
            return ResidentListSerializer
        return ResidentSerializer

    def get_queryset(self):
        queryset = Resident.objects.select_related('room', 'branch')

        status_filter = self.request.query_params.get('status')
        if status_filter:
            if status_filter not in dict(ResidentStatus.CHOICES):
                raise ValidationError(message=f"Unknown status: {status_filter}", code="INVALID_STATUS")
            queryset = queryset.filter(status=status_filter)

        search = self.request.query_params.get('search')
        if search:
            matches = ResidentRepository().search(get_branch_id(self.request), search)
            queryset = queryset.filter(id__in=matches.values('id'))

        return queryset

    def list(self, request):
        """Residents of a branch; ?branch= required, optional ?status= and ?search="""
        get_branch_id(request)
        residents = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(residents)
        if page is not None:
            return self.get_paginated_response(self.get_serializer(page, many=True).data)
        return Response(self.get_serializer(residents, many=True).data)

    def retrieve(self, request, pk=None):
        resident = ResidentStore().get(int(pk))
        return Response(ResidentSerializer(resident).data)

    def create(self, request):
        """Register a pending resident"""
        branch_id = get_branch_id(request)
        serializer = ResidentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        resident = ResidentStore().create_pending(branch_id, dict(serializer.validated_data), created_by=request.user)
        return Response(ResidentSerializer(resident).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'])
    def allocate(self, request, pk=None):
        """Assign a bed to a pending resident"""
        serializer = AllocateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        resident = AllocationManager().allocate(
            int(pk),
            serializer.validated_data['room'],
            serializer.validated_data['bed_number'],
            user=request.user,
        )
        return Response(ResidentSerializer(resident).data)

    @action(detail=True, methods=['post'], url_path='switch-room')
    def switch_room(self, request, pk=None):
        """Move a resident to another bed"""
        serializer = SwitchRoomSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = AllocationManager().switch_room(
            int(pk),
            serializer.validated_data['room'],
            serializer.validated_data['bed_number'],
            serializer.validated_data['reason'],
            user=request.user,
        )
        return Response({
            'previous': result.previous,
            'current': result.current,
            'resident': ResidentSerializer(result.resident).data,
            'history': RoomSwitchSerializer(result.history).data,
        })

    @action(detail=True, methods=['get'], url_path='switch-history')
    def switch_history(self, request, pk=None):
        history = AllocationManager().switch_history(int(pk))
        return Response(RoomSwitchSerializer(history, many=True).data)

    @action(detail=True, methods=['post'])
    def vacate(self, request, pk=None):
        """Give notice or vacate immediately"""
        serializer = VacateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        resident = LifecycleService().vacate(
            int(pk),
            vacation_type=serializer.validated_data['vacation_type'],
            notice_days=serializer.validated_data.get('notice_days'),
            vacation_date=serializer.validated_data.get('vacation_date'),
            user=request.user,
        )
        return Response(ResidentSerializer(resident).data)

    @action(detail=True, methods=['post'], url_path='finalize-vacation')
    def finalize_vacation(self, request, pk=None):
        result = LifecycleService().finalize_vacation(int(pk), user=request.user)
        data = ResidentSerializer(result.resident).data
        data['changed'] = result.changed
        return Response(data)

    @action(detail=True, methods=['post'], url_path='cancel-notice')
    def cancel_notice(self, request, pk=None):
        resident = LifecycleService().cancel_notice(int(pk), user=request.user)
        return Response(ResidentSerializer(resident).data)

    @action(detail=True, methods=['get'], url_path='payment-summary')
    def payment_summary(self, request, pk=None):
        from payments.services import PaymentService
        return Response(PaymentService().get_summary(int(pk)))

    @action(detail=True, methods=['get'])
    def payments(self, request, pk=None):
        from payments.serializers import PaymentSerializer
        from payments.services import PaymentService
        return Response(PaymentSerializer(PaymentService().payment_history(int(pk)), many=True).data)


class VacationViewSet(viewsets.ViewSet):
    """Admin access to the vacation sweep"""
    permission_classes = [IsAuthenticated, IsManagerRole]

    @action(detail=False, methods=['get'])
    def overdue(self, request):
        """Preview of residents the next sweep would finalize"""
        residents = VacationScheduler().list_overdue(branch_id=get_branch_id(request, required=False))
        return Response(ResidentListSerializer(residents, many=True).data)

    @action(detail=False, methods=['post'])
    def process(self, request):
        """Run a sweep now"""
        result = VacationScheduler().process_overdue_vacations(branch_id=get_branch_id(request, required=False))
        code = status.HTTP_207_MULTI_STATUS if result.failures else status.HTTP_200_OK
        return Response(result.as_dict(), status=code)


class PublicRegistrationView(APIView):
    """
    Public self-registration (QR code on the branch notice board).
    Creates a pending resident; staff allocate the bed afterwards.
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = PublicRegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        branch_id = data.pop('branch')
        resident = ResidentStore().create_pending(branch_id, data)
        return Response(
            {'id': resident.id, 'full_name': resident.full_name, 'status': resident.status},
            status=status.HTTP_201_CREATED
        )
