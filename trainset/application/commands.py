# File: trainset/application/commands.py
"""
Command Pattern Implementation for Train Composition

This module encapsulates train operations as first-class objects. Each
command can be validated, executed, undone, and logged.

Key Benefits:
- Decouple operation invocation from execution
- Support undo of composition changes
- Group several changes into one all-or-nothing unit
- Provide audit trail for all operations

Command Types:
1. Composition Commands - attach and detach locomotives or wagons
2. Movement Commands - start and stop a train
3. Composite Command - several commands with rollback on failure
"""

from abc import ABC, abstractmethod
from collections import deque
from typing import Deque, Dict, List, Optional, Any, Tuple, Union
from datetime import datetime
import logging
import uuid

from ..domain.models import Locomotive, Wagon
from ..domain.errors import TrainsetError
from .train_service import TrainService, TrainServiceError


# ============================================================================
# COMMAND INTERFACES AND BASE CLASSES
# ============================================================================

class Command(ABC):
    """
    Abstract base class for all commands

    A command represents an intent to change a train.
    Commands are named in the imperative (e.g., AttachPartCommand).
    """

    def __init__(self, train_id: str, command_id: Optional[str] = None):
        self.train_id = train_id
        self.command_id = command_id or str(uuid.uuid4())
        self.executed_at: Optional[datetime] = None
        self.logger = logging.getLogger(self.__class__.__name__)

    def execute(self, service: TrainService) -> Dict[str, Any]:
        """
        Execute the command using the provided service
        Domain and service errors are reported in the result, not raised.

        Returns: Execution result dictionary
        """
        is_valid, errors = self.validate()
        if not is_valid:
            return self._failure(f"Command validation failed: {errors}", "ValidationError")

        try:
            data = self._perform(service)
        except (TrainsetError, TrainServiceError) as e:
            self.logger.warning(f"{self.get_description()} failed: {e}")
            return self._failure(str(e), type(e).__name__)

        self.executed_at = datetime.now()
        return {
            "success": True,
            "command_id": self.command_id,
            "train_id": self.train_id,
            "data": data
        }

    @abstractmethod
    def _perform(self, service: TrainService) -> Dict[str, Any]:
        pass

    def validate(self) -> Tuple[bool, List[str]]:
        """
        Validate command parameters before execution

        Returns: (is_valid, error_messages)
        """
        if not self.train_id:
            return False, ["Train id is required"]
        return True, []

    def can_undo(self) -> bool:
        return False

    def undo(self, service: TrainService) -> Dict[str, Any]:
        """Undo the effects of this command"""
        if not self.can_undo():
            return {
                "success": False,
                "error": f"{self.__class__.__name__} does not support undo"
            }
        if self.executed_at is None:
            return {"success": False, "error": "Command was not executed"}

        try:
            self._revert(service)
        except (TrainsetError, TrainServiceError) as e:
            self.logger.warning(f"Undo of {self.get_description()} failed: {e}")
            return self._failure(str(e), type(e).__name__)

        self.executed_at = None
        return {"success": True, "command_id": self.command_id}

    def _revert(self, service: TrainService) -> None:
        raise NotImplementedError

    def get_description(self) -> str:
        """Get human-readable command description"""
        return self.__class__.__name__.replace("Command", "")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "command_id": self.command_id,
            "command_type": self.__class__.__name__,
            "train_id": self.train_id,
            "executed_at": self.executed_at.isoformat() if self.executed_at else None
        }

    def _failure(self, error: str, error_type: str) -> Dict[str, Any]:
        return {
            "success": False,
            "command_id": self.command_id,
            "train_id": self.train_id,
            "error": error,
            "error_type": error_type
        }


# ============================================================================
# COMPOSITION COMMANDS
# ============================================================================

class PartCommand(Command):
    """Base for commands acting on one locomotive or wagon"""

    def __init__(
        self,
        train_id: str,
        part: Union[Locomotive, Wagon],
        command_id: Optional[str] = None
    ):
        super().__init__(train_id, command_id)
        self.part = part

    def validate(self) -> Tuple[bool, List[str]]:
        is_valid, errors = super().validate()
        if not isinstance(self.part, (Locomotive, Wagon)):
            errors.append(f"Unsupported part: {type(self.part).__name__}")
        return len(errors) == 0, errors

    def can_undo(self) -> bool:
        return True


class AttachPartCommand(PartCommand):
    """Attach a locomotive or wagon, optionally at a position"""

    def __init__(
        self,
        train_id: str,
        part: Union[Locomotive, Wagon],
        at: Optional[int] = None,
        command_id: Optional[str] = None
    ):
        super().__init__(train_id, part, command_id)
        self.at = at

    def _perform(self, service: TrainService) -> Dict[str, Any]:
        position = service.attach(self.train_id, self.part, self.at)
        return {"part_id": self.part.id, "position": position}

    def _revert(self, service: TrainService) -> None:
        service.detach(self.train_id, self.part)

    def get_description(self) -> str:
        return f"Attach {self.part}"


class DetachPartCommand(PartCommand):
    """Detach a locomotive or wagon; undo restores its former position"""

    def __init__(
        self,
        train_id: str,
        part: Union[Locomotive, Wagon],
        command_id: Optional[str] = None
    ):
        super().__init__(train_id, part, command_id)
        self.position: Optional[int] = None

    def _perform(self, service: TrainService) -> Dict[str, Any]:
        self.position = service.detach(self.train_id, self.part)
        return {"part_id": self.part.id, "position": self.position}

    def _revert(self, service: TrainService) -> None:
        service.attach(self.train_id, self.part, self.position)

    def get_description(self) -> str:
        return f"Detach {self.part}"


# ============================================================================
# MOVEMENT COMMANDS
# ============================================================================

class StartTrainCommand(Command):

    def _perform(self, service: TrainService) -> Dict[str, Any]:
        return service.start(self.train_id).to_dict()

    def can_undo(self) -> bool:
        return True

    def _revert(self, service: TrainService) -> None:
        service.stop(self.train_id)


class StopTrainCommand(Command):

    def _perform(self, service: TrainService) -> Dict[str, Any]:
        return service.stop(self.train_id).to_dict()

    def can_undo(self) -> bool:
        return True

    def _revert(self, service: TrainService) -> None:
        service.start(self.train_id)


# ============================================================================
# COMPOSITE COMMAND
# ============================================================================

class CompositeCommand(Command):
    """
    Several commands on one train applied as a single unit

    The whole unit runs under the train's lock, so no other use case can
    interleave. When a step fails, the steps already applied are undone
    in reverse order and the train is left as it was.
    """

    def __init__(
        self,
        train_id: str,
        commands: Optional[List[Command]] = None,
        command_id: Optional[str] = None
    ):
        super().__init__(train_id, command_id)
        self.commands: List[Command] = list(commands or [])

    def add_command(self, command: Command) -> None:
        self.commands.append(command)

    def validate(self) -> Tuple[bool, List[str]]:
        is_valid, errors = super().validate()
        if not self.commands:
            errors.append("No commands to run")
        for command in self.commands:
            if command.train_id != self.train_id:
                errors.append(f"{command.get_description()} targets train {command.train_id}")
            step_valid, step_errors = command.validate()
            if not step_valid:
                errors.extend(f"{command.get_description()}: {err}" for err in step_errors)
            if not command.can_undo():
                errors.append(f"{command.get_description()} cannot be rolled back")
        return len(errors) == 0, errors

    def _perform(self, service: TrainService) -> Dict[str, Any]:
        results: List[Dict[str, Any]] = []
        with service.lock(self.train_id):
            for step, command in enumerate(self.commands):
                result = command.execute(service)
                results.append(result)
                if not result["success"]:
                    self._roll_back(self.commands[:step], service)
                    raise CompositeStepError(command, result, results)
        return {"results": results, "total_commands": len(results)}

    def execute(self, service: TrainService) -> Dict[str, Any]:
        try:
            return super().execute(service)
        except CompositeStepError as e:
            failure = self._failure(
                f"Step '{e.command.get_description()}' failed: {e.result.get('error')}",
                e.result.get("error_type", "CommandError")
            )
            failure["failed_command_id"] = e.command.command_id
            failure["partial_results"] = e.results
            return failure

    def _roll_back(self, applied: List[Command], service: TrainService) -> None:
        self.logger.info(f"Rolling back {len(applied)} steps on train {self.train_id}")
        for command in reversed(applied):
            result = command.undo(service)
            if not result["success"]:
                self.logger.error(
                    f"Rollback of {command.get_description()} failed: {result.get('error')}"
                )

    def can_undo(self) -> bool:
        return all(command.can_undo() for command in self.commands)

    def _revert(self, service: TrainService) -> None:
        with service.lock(self.train_id):
            for command in reversed(self.commands):
                command._revert(service)
                command.executed_at = None

    def get_description(self) -> str:
        steps = ", ".join(command.get_description() for command in self.commands)
        return f"Composite[{steps}]"

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["commands"] = [command.to_dict() for command in self.commands]
        return data


class CompositeStepError(Exception):
    """Raised inside CompositeCommand when one of its steps fails"""

    def __init__(self, command: Command, result: Dict[str, Any], results: List[Dict[str, Any]]):
        super().__init__(result.get("error"))
        self.command = command
        self.result = result
        self.results = results


# ============================================================================
# COMMAND PROCESSOR
# ============================================================================

class CommandProcessor:
    """
    Runs commands against one TrainService and remembers the successful
    ones, newest last, so they can be undone one by one
    """

    def __init__(self, service: TrainService, max_history_size: int = 1000):
        self.service = service
        self.logger = logging.getLogger(self.__class__.__name__)
        self.command_history: Deque[Command] = deque(maxlen=max_history_size)

    def process(self, command: Command) -> Dict[str, Any]:
        self.logger.info(f"Processing {command.get_description()} on train {command.train_id}")
        result = command.execute(self.service)
        if result["success"]:
            self.command_history.append(command)
        return result

    def undo_last(self) -> Dict[str, Any]:
        """Undo the newest remembered command; it stays remembered if undo fails"""
        if not self.command_history:
            return {"success": False, "error": "No commands to undo"}

        command = self.command_history[-1]
        result = command.undo(self.service)
        if result["success"]:
            self.command_history.pop()
            self.logger.info(f"Undone {command.get_description()}")
        return result

    def get_history(self) -> List[Dict[str, Any]]:
        return [command.to_dict() for command in self.command_history]
