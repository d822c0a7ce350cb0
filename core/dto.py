"""
Data Transfer Objects (DTOs).
Used for passing data between layers without exposing domain models.
"""
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any
from decimal import Decimal
from datetime import date, datetime


@dataclass
class ResidentDTO:
    """Data Transfer Object for a resident registration"""
    first_name: str = ""
    last_name: str = ""
    phone: str = ""
    email: str = ""
    rent_amount: Optional[Decimal] = None
    advance_amount: Decimal = Decimal('0')
    advance_date: Optional[date] = None
    advance_receipt_number: str = ""
    security_deposit: Decimal = Decimal('0')
    check_in_date: Optional[date] = None
    notes: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ResidentDTO':
        """Build from request data, ignoring unknown keys"""
        known = {name for name in cls.__dataclass_fields__}
        values = {key: value for key, value in data.items() if key in known and value is not None}
        return cls(**values)


@dataclass
class BedAvailability:
    """Derived bed occupancy for one room"""
    room_id: int
    room_number: str
    sharing_type: int
    sharing_label: str
    cost: Decimal
    bed_count: int
    available_bed_numbers: List[int] = field(default_factory=list)
    occupied_bed_numbers: List[int] = field(default_factory=list)

    @property
    def available_count(self) -> int:
        return len(self.available_bed_numbers)

    @property
    def occupied_count(self) -> int:
        return len(self.occupied_bed_numbers)

    def as_dict(self) -> Dict[str, Any]:
        return {
            'room_id': self.room_id,
            'room_number': self.room_number,
            'sharing_type': self.sharing_type,
            'sharing_label': self.sharing_label,
            'cost': self.cost,
            'bed_count': self.bed_count,
            'available_bed_numbers': self.available_bed_numbers,
            'occupied_bed_numbers': self.occupied_bed_numbers,
            'available_count': self.available_count,
            'occupied_count': self.occupied_count,
        }


@dataclass
class RoomOccupancy:
    """Occupancy of a single room"""
    room_id: int
    bed_count: int
    occupied_count: int
    available_beds: List[int] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return {
            'room_id': self.room_id,
            'bed_count': self.bed_count,
            'occupied_count': self.occupied_count,
            'available_beds': self.available_beds,
        }


@dataclass
class SwitchResult:
    """Outcome of a room switch"""
    previous: Dict[str, Any]
    current: Dict[str, Any]
    resident: Any = None
    history: Any = None


@dataclass
class TransitionResult:
    """Outcome of a lifecycle transition; changed is False for a no-op"""
    resident: Any
    changed: bool = True


@dataclass
class SweepResult:
    """Outcome of one vacation sweep"""
    run_date: date
    residents: List[int] = field(default_factory=list)
    skipped: List[int] = field(default_factory=list)
    failures: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def processed_count(self) -> int:
        return len(self.residents)

    @property
    def failed_count(self) -> int:
        return len(self.failures)

    def raise_for_failures(self):
        """Raise SchedulerPartialFailure if any resident failed"""
        if self.failures:
            from core.exceptions import SchedulerPartialFailure
            raise SchedulerPartialFailure(failures=self.failures)

    def as_dict(self) -> Dict[str, Any]:
        return {
            'run_date': self.run_date.isoformat(),
            'processed_count': self.processed_count,
            'residents': self.residents,
            'skipped': self.skipped,
            'failed_count': self.failed_count,
            'failures': self.failures,
        }


@dataclass
class ActivityEvent:
    """Structured activity event emitted by core operations"""
    type: str
    entity_id: int
    entity_type: str
    user_id: Optional[int] = None
    branch_id: Optional[int] = None
    timestamp: Optional[datetime] = None
    description: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)
