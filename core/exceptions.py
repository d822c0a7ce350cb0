"""
Custom exceptions for the application.
Following domain-driven design principles with specific exception types.
"""


class BaseApplicationException(Exception):
    """Base exception for all application-specific exceptions"""
    default_message = "An application error occurred"
    default_code = None

    def __init__(self, message=None, code=None, details=None):
        self.message = message or self.default_message
        self.code = code or self.default_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(BaseApplicationException):
    """Raised when validation fails"""
    default_message = "Validation failed"
    default_code = "VALIDATION_ERROR"


class NotFoundError(BaseApplicationException):
    """Raised when a resource is not found"""
    default_message = "Resource not found"
    default_code = "NOT_FOUND"

    def __init__(self, resource_type=None, resource_id=None, **kwargs):
        self.resource_type = resource_type
        self.resource_id = resource_id
        if 'message' not in kwargs and resource_type:
            kwargs['message'] = f"{resource_type} {resource_id} not found"
        super().__init__(**kwargs)


class RoomNotFound(NotFoundError):
    default_code = "ROOM_NOT_FOUND"

    def __init__(self, resource_id=None, **kwargs):
        super().__init__(resource_type="Room", resource_id=resource_id, **kwargs)


class ResidentNotFound(NotFoundError):
    default_code = "RESIDENT_NOT_FOUND"

    def __init__(self, resource_id=None, **kwargs):
        super().__init__(resource_type="Resident", resource_id=resource_id, **kwargs)


class PaymentNotFound(NotFoundError):
    default_code = "PAYMENT_NOT_FOUND"

    def __init__(self, resource_id=None, **kwargs):
        super().__init__(resource_type="Payment", resource_id=resource_id, **kwargs)


class BusinessLogicError(BaseApplicationException):
    """Raised when business rule is violated"""
    default_message = "Business rule violation"
    default_code = "BUSINESS_RULE"


class InvalidTransition(BusinessLogicError):
    """Raised when a lifecycle transition is attempted from the wrong state"""
    default_message = "This action is not allowed for the resident's current status"
    default_code = "INVALID_TRANSITION"


class InvalidAssignmentState(BusinessLogicError):
    """Raised when room and bed are not both set or both cleared"""
    default_message = "Room and bed must be assigned together"
    default_code = "INVALID_ASSIGNMENT_STATE"


class ResidentNotAllocated(BusinessLogicError):
    """Raised when an operation needs a resident that holds a bed"""
    default_message = "Resident is not assigned to any room"
    default_code = "RESIDENT_NOT_ALLOCATED"


class RoomInUseError(BusinessLogicError):
    """Raised when deleting a room that still has residents"""
    default_message = "Room still has residents assigned"
    default_code = "ROOM_IN_USE"


class ConflictError(BusinessLogicError):
    """Raised when the request conflicts with state written by another caller"""
    default_message = "Resource was modified by another user, reload and retry"
    default_code = "CONFLICT"


class ConcurrentModificationError(ConflictError):
    """Raised when concurrent modification is detected"""
    default_message = "Resource is being modified by another user"
    default_code = "CONCURRENT_MODIFICATION"


class BedAlreadyOccupied(ConflictError):
    default_message = "This bed was just taken, please pick another bed"
    default_code = "BED_ALREADY_OCCUPIED"


class DuplicatePayment(ConflictError):
    default_message = "Rent for this month is already marked as paid"
    default_code = "DUPLICATE_PAYMENT"


class SameAssignmentError(BusinessLogicError):
    default_message = "Resident is already in this room and bed"
    default_code = "SAME_ASSIGNMENT"


class SchedulerPartialFailure(BaseApplicationException):
    """Raised when one or more residents in a vacation sweep failed"""
    default_message = "Some residents could not be processed"
    default_code = "SCHEDULER_PARTIAL_FAILURE"

    def __init__(self, failures=None, **kwargs):
        self.failures = failures or []
        kwargs.setdefault('details', {'failures': self.failures})
        if 'message' not in kwargs:
            kwargs['message'] = f"{len(self.failures)} resident(s) could not be processed"
        super().__init__(**kwargs)
