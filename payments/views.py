from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.parsers import JSONParser, MultiPartParser, FormParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from api.filters import BranchFilterBackend, get_branch_id
from api.permissions import IsManagerRole
from core.exceptions import ValidationError
from .models import Payment
from .serializers import PaymentSerializer, MarkPaidSerializer, VoidPaymentSerializer, CorrectPaymentSerializer
from .services import PaymentService


class PaymentViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for rent payments.
    Payments are marked manually; UPI payments need a receipt image.
    """
    permission_classes = [IsAuthenticated, IsManagerRole]
    filter_backends = [BranchFilterBackend]
    serializer_class = PaymentSerializer
    parser_classes = [JSONParser, MultiPartParser, FormParser]
    lookup_value_regex = r'\d+'

    def get_queryset(self):
        queryset = Payment.objects.select_related('resident', 'room', 'marked_by')
        params = self.request.query_params

        resident_id = params.get('resident')
        if resident_id:
            queryset = queryset.filter(resident_id=resident_id)

        month = params.get('month')
        if month:
            queryset = queryset.filter(month=month)

        year = params.get('year')
        if year:
            queryset = queryset.filter(year=year)

        if params.get('include_inactive') not in ('1', 'true', 'True'):
            queryset = queryset.filter(is_active=True)

        return queryset

    @action(detail=False, methods=['post'], url_path='mark-paid')
    def mark_paid(self, request):
        """Mark a month's rent as paid"""
        serializer = MarkPaidSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        payment = PaymentService().mark_paid(
            data['resident'],
            payment_date=data.get('payment_date'),
            payment_method=data['payment_method'],
            receipt_image=data.get('receipt_image'),
            amount=data.get('amount'),
            notes=data['notes'],
            user=request.user,
        )
        return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'])
    def void(self, request, pk=None):
        serializer = VoidPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payment = PaymentService().void_payment(int(pk), user=request.user, reason=serializer.validated_data['reason'])
        return Response(PaymentSerializer(payment).data)

    @action(detail=True, methods=['post'])
    def correct(self, request, pk=None):
        serializer = CorrectPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        if not serializer.validated_data:
            raise ValidationError(message="Nothing to correct", code="INVALID_CORRECTION")
        payment = PaymentService().correct_payment(int(pk), user=request.user, **serializer.validated_data)
        return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['post'], url_path='refresh-status')
    def refresh_status(self, request):
        """Recompute cached payment status for a branch, or for one resident"""
        service = PaymentService()
        resident_id = request.data.get('resident')
        if resident_id not in (None, ''):
            try:
                resident_id = int(resident_id)
            except (TypeError, ValueError):
                raise ValidationError(message="resident must be an integer id", code="INVALID_RESIDENT")
            return Response({'resident': resident_id, 'payment_status': service.refresh_status(resident_id)})
        branch_id = get_branch_id(request)
        return Response({'branch': branch_id, 'changed': service.refresh_all_for_branch(branch_id)})

    @action(detail=False, methods=['get'], url_path='monthly-stats')
    def monthly_stats(self, request):
        """Collection figures for ?branch=&month=&year="""
        month = request.query_params.get('month')
        year = request.query_params.get('year')
        if not month or not year or not year.isdigit():
            raise ValidationError(message="month and year are required", code="MONTH_REQUIRED")
        return Response(PaymentService().monthly_stats(get_branch_id(request), month, int(year)))
