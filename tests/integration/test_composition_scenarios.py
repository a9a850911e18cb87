#!/usr/bin/env python3
"""
Integration Tests for Train Composition Scenarios

These tests wire the service, command processor and event bus together
and replay complete composition workflows end to end.
"""

import io
import logging
import unittest

from trainset.application.commands import (
    AttachPartCommand, DetachPartCommand, StartTrainCommand, StopTrainCommand,
    CompositeCommand, CommandProcessor
)
from trainset.application.dtos import LocomotiveSpecDTO, WagonSpecDTO
from trainset.application.train_service import TrainService
from trainset.domain.errors import (
    LocomotiveAlreadyUsedError, ChangesProhibitedInMoveError, RemovingLonelyLocomotiveProhibitedError
)
from trainset.domain.models import Locomotive, Wagon, LocomotiveType, WagonType
from trainset.infrastructure.messaging import (
    EventBus, EventType, ConsoleNotificationHandler
)
from trainset.main import run_demo
from tests.builders import RecordingEventHandler


class CompositionScenarioBase(unittest.TestCase):
    """Service with console notifications written to a buffer"""

    def setUp(self):
        self.stream = io.StringIO()
        self.recorder = RecordingEventHandler()
        self.event_bus = EventBus()
        notifier = ConsoleNotificationHandler(self.stream)
        self.event_bus.subscribe(EventType.TRAIN_STARTED, notifier)
        self.event_bus.subscribe(EventType.TRAIN_STOPPED, notifier)
        self.event_bus.subscribe_all(self.recorder)
        self.service = TrainService(event_bus=self.event_bus)
        self.processor = CommandProcessor(self.service)

    @staticmethod
    def heavy_locomotive():
        return Locomotive(
            weight=132.5, length=10, max_persons_count=1, max_goods_weight=32,
            pulling_force=1231243, type=LocomotiveType.DIESEL
        )

    @staticmethod
    def freight_wagon():
        return Wagon(
            weight=234, length=25, max_persons_count=10, max_goods_weight=123,
            manufacturer_name="Some Name", production_year=2007, type=WagonType.FREIGHT
        )


class TestDepotScenario(CompositionScenarioBase):
    """Compose, run, stop and recompose a single train"""

    def test_full_journey(self):
        locomotive = self.heavy_locomotive()
        wagon = self.freight_wagon()
        second_wagon = self.freight_wagon()
        train = self.service.compose(locomotive)

        with self.assertRaises(LocomotiveAlreadyUsedError):
            self.service.attach(train.id, locomotive)

        self.service.attach(train.id, wagon)
        self.service.start(train.id)

        with self.assertRaises(ChangesProhibitedInMoveError):
            self.service.attach(train.id, second_wagon)
        self.assertFalse(second_wagon.is_used)

        self.service.stop(train.id)
        self.service.attach(train.id, second_wagon)

        self.assertEqual(
            train.describe_parts(),
            [f"Locomotive №{locomotive.id}", f"Wagon №{wagon.id}", f"Wagon №{second_wagon.id}"]
        )
        summary = self.service.summary(train.id)
        self.assertEqual(summary.empty_weight, 600.5)
        self.assertEqual(summary.max_persons_count, 21)
        self.assertEqual(summary.conductors_count, 1)
        self.assertEqual(summary.max_overall_weight, 2528.5)
        self.assertEqual(
            self.stream.getvalue().splitlines(),
            [f"Train {train.id}: we started!", f"Train {train.id}: we stopped"]
        )

    def test_demo_runs_end_to_end(self):
        logger = logging.getLogger("trainset.demo")
        with self.assertLogs(logger, level="INFO") as logs:
            run_demo(self.service, logger)

        messages = "\n".join(logs.output)
        self.assertIn("LocomotiveAlreadyUsedError", messages)
        self.assertIn("ChangesProhibitedInMoveError", messages)
        self.assertIn("Max overall weight: 2528.5", messages)
        self.assertIn("Max persons count: 21", messages)
        self.assertEqual(len(self.stream.getvalue().splitlines()), 2)


class TestCommandWorkflow(CompositionScenarioBase):
    """Commands driving trains built from specification DTOs"""

    def setUp(self):
        super().setUp()
        self.train = self.service.compose(
            LocomotiveSpecDTO(weight=100, length=20, pulling_force=50000, type="electrical")
        )

    def test_build_train_atomically(self):
        wagons = [
            WagonSpecDTO(weight=40, length=26, max_persons_count=80,
                         manufacturer_name="Siemens", production_year=2015, type="passenger").to_domain()
            for _ in range(2)
        ]
        composite = CompositeCommand(self.train.id, [
            AttachPartCommand(self.train.id, wagons[0]),
            AttachPartCommand(self.train.id, wagons[1]),
            StartTrainCommand(self.train.id)
        ])

        result = self.processor.process(composite)

        self.assertTrue(result["success"])
        self.assertTrue(self.train.is_moving)
        self.assertEqual(self.train.conductors_count, 4)

        self.processor.process(StopTrainCommand(self.train.id))
        self.assertEqual(len(self.processor.get_history()), 2)

    def test_overloaded_composition_is_rolled_back(self):
        """Test a failed start leaves no wagon attached and no stale events"""
        wagons = [
            Wagon(weight=20000, length=20, max_persons_count=0, max_goods_weight=1000,
                  manufacturer_name="Talgo", production_year=2001, type=WagonType.FREIGHT)
            for _ in range(3)
        ]
        composite = CompositeCommand(
            self.train.id,
            [AttachPartCommand(self.train.id, w) for w in wagons] + [StartTrainCommand(self.train.id)]
        )

        result = self.processor.process(composite)

        self.assertFalse(result["success"])
        self.assertEqual(result["error_type"], "LackPullingForceError")
        self.assertEqual(self.train.wagons, ())
        self.assertTrue(all(not w.is_used for w in wagons))
        self.assertFalse(self.train.has_changes)
        self.assertEqual(self.stream.getvalue(), "")

    def test_last_locomotive_stays(self):
        second = self.heavy_locomotive()
        self.processor.process(AttachPartCommand(self.train.id, second, at=0))
        self.assertIs(self.train.locomotives[0], second)

        first = self.train.locomotives[1]
        self.assertTrue(self.processor.process(DetachPartCommand(self.train.id, first))["success"])

        result = self.processor.process(DetachPartCommand(self.train.id, second))
        self.assertFalse(result["success"])
        self.assertEqual(result["error_type"], RemovingLonelyLocomotiveProhibitedError.__name__)

        self.processor.undo_last()
        self.assertEqual(self.train.locomotives, (second, first))


if __name__ == '__main__':
    unittest.main()
