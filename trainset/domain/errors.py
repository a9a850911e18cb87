# File: trainset/domain/errors.py
"""
Domain Errors for Train Composition

Closed set of error kinds per concern:
1. Train-level errors - movement state and composition rules
2. Locomotive-level errors - usage of a locomotive
3. Wagon-level errors - usage of a wagon

All errors are raised before any mutation happens, so a failed operation
leaves the train exactly as it was.
"""


class TrainsetError(Exception):
    """Base exception for the train domain"""
    pass


# ============================================================================
# TRAIN ERRORS
# ============================================================================

class TrainError(TrainsetError):
    """Raised for train-level rule violations"""
    pass


class AlreadyStartedError(TrainError):
    """Raised when starting a train that is already moving"""
    pass


class AlreadyStoppedError(TrainError):
    """Raised when stopping a train that is already stopped"""
    pass


class LackPullingForceError(TrainError):
    """Raised when locomotives cannot pull the maximum overall weight"""

    def __init__(self, pulling_force: float, required: float):
        self.pulling_force = pulling_force
        self.required = required
        super().__init__(
            f"Pulling force {pulling_force} is less than max overall weight {required}"
        )


class ChangesProhibitedInMoveError(TrainError):
    """Raised on any composition change while the train is moving"""
    pass


class RemovingLonelyLocomotiveProhibitedError(TrainError):
    """Raised when removing the only locomotive of a train"""
    pass


class TrainConsistencyError(TrainError):
    """
    Raised when a part is marked used but is missing from the train
    Signals an invariant violation, e.g. the part belongs to another train
    """
    pass


# ============================================================================
# TRAIN PART ERRORS
# ============================================================================

class TrainPartError(TrainsetError):
    """Raised for part usage violations"""

    def __init__(self, part_id: str, message: str = ""):
        self.part_id = part_id
        super().__init__(message or f"{self.__class__.__name__}: {part_id}")


class PartAlreadyUsedError(TrainPartError):
    """Raised when attaching a part that already belongs to a train"""
    pass


class PartNotUsedError(TrainPartError):
    """Raised when detaching a part that belongs to no train"""
    pass


class LocomotiveError(TrainPartError):
    pass


class LocomotiveAlreadyUsedError(LocomotiveError, PartAlreadyUsedError):
    pass


class LocomotiveNotUsedError(LocomotiveError, PartNotUsedError):
    pass


class WagonError(TrainPartError):
    pass


class WagonAlreadyUsedError(WagonError, PartAlreadyUsedError):
    pass


class WagonNotUsedError(WagonError, PartNotUsedError):
    pass
