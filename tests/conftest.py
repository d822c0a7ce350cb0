import itertools
from datetime import date
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from branches.models import Branch
from core.constants import UserRole
from residents.services import ResidentStore, AllocationManager
from rooms.models import Room
from users.models import User

JAN_1 = date(2024, 1, 1)

_phones = itertools.count(9000000001)


@pytest.fixture(autouse=True)
def media_root(settings, tmp_path):
    settings.MEDIA_ROOT = tmp_path


@pytest.fixture
def branch(db):
    return Branch.objects.create(name='Koramangala', address='5th Block', notice_period_days=30)


@pytest.fixture
def other_branch(db):
    return Branch.objects.create(name='Indiranagar', address='100ft Road')


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(username='admin', password='secret-pass-1', role=UserRole.ADMIN)


@pytest.fixture
def support_user(db):
    return User.objects.create_user(username='support', password='secret-pass-2', role=UserRole.SUPPORT)


@pytest.fixture
def make_room(branch):
    def _make(room_number='101', sharing_type=2, cost='8000.00', **extra):
        extra.setdefault('branch', branch)
        return Room.objects.create(
            room_number=room_number,
            sharing_type=sharing_type,
            cost_per_bed=Decimal(cost),
            **extra
        )
    return _make


@pytest.fixture
def room_101(make_room):
    return make_room('101', sharing_type=2)


@pytest.fixture
def room_202(make_room):
    return make_room('202', sharing_type=3, cost='6500.00')


@pytest.fixture
def make_resident(branch):
    def _make(first_name='Ravi', last_name='Kumar', target_branch=None, **fields):
        data = {'first_name': first_name, 'last_name': last_name, 'phone': str(next(_phones))}
        data.update(fields)
        return ResidentStore().create_pending((target_branch or branch).id, data)
    return _make


@pytest.fixture
def allocated_resident(make_resident, room_101):
    """Active resident on room 101, bed 2, checked in on 2024-01-01"""
    resident = make_resident()
    return AllocationManager().allocate(resident.id, room_101.id, 2, today=JAN_1)


@pytest.fixture
def api_client(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client
