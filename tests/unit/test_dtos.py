#!/usr/bin/env python3
"""
DTO Unit Tests

Tests for part specification DTOs and train read models.
"""

import unittest

from pydantic import ValidationError

from trainset.application.dtos import (
    LocomotiveSpecDTO, WagonSpecDTO, TrainSummaryDTO, TrainPartDTO
)
from trainset.domain.aggregates import Train
from trainset.domain.models import Locomotive, Wagon, LocomotiveType, WagonType
from tests.builders import make_locomotive, make_wagon


class TestSpecDTOs(unittest.TestCase):

    def test_locomotive_spec_to_domain(self):
        spec = LocomotiveSpecDTO(weight=120, length=19, pulling_force=4000, type="electrical")
        locomotive = spec.to_domain()

        self.assertIsInstance(locomotive, Locomotive)
        self.assertEqual(locomotive.type, LocomotiveType.ELECTRICAL)
        self.assertEqual(locomotive.max_persons_count, 0)
        self.assertFalse(locomotive.is_used)

    def test_locomotive_spec_default_type(self):
        locomotive = LocomotiveSpecDTO(weight=1, length=1, pulling_force=1).to_domain()
        self.assertEqual(locomotive.type, LocomotiveType.DIESEL)

    def test_wagon_spec_to_domain(self):
        spec = WagonSpecDTO.from_dict({
            "weight": 45, "length": 26, "max_persons_count": 64,
            "manufacturer_name": "Alstom", "production_year": 2012,
            "type": "restaurant"
        })
        wagon = spec.to_domain()

        self.assertIsInstance(wagon, Wagon)
        self.assertEqual(wagon.type, WagonType.RESTAURANT)
        self.assertEqual(wagon.max_goods_weight, 0.0)

    def test_each_spec_builds_a_new_part(self):
        spec = WagonSpecDTO(weight=1, length=1, manufacturer_name="X", production_year=2000)
        self.assertNotEqual(spec.to_domain(), spec.to_domain())

    def test_invalid_spec(self):
        with self.assertRaises(ValidationError):
            LocomotiveSpecDTO(weight=1, length=1, pulling_force=1, type="nuclear")
        with self.assertRaises(ValidationError):
            WagonSpecDTO(weight=1, length=1, production_year=2000)

    def test_negative_values_allowed(self):
        """Test specs do not range check physical values"""
        spec = LocomotiveSpecDTO(weight=-1, length=-1, pulling_force=-10)
        self.assertEqual(spec.to_domain().pulling_force, -10)

    def test_json_round_trip(self):
        spec = WagonSpecDTO(weight=1, length=2, manufacturer_name="X", production_year=2000)
        self.assertEqual(WagonSpecDTO.from_json(spec.to_json()).to_dict(), spec.to_dict())


class TestTrainSummaryDTO(unittest.TestCase):

    def setUp(self):
        self.locomotive = make_locomotive(weight=10, max_persons_count=1, max_goods_weight=10, pulling_force=1000)
        self.wagon = make_wagon(weight=20, max_persons_count=2, max_goods_weight=20)
        self.train = Train(self.locomotive)
        self.train.add_wagon(self.wagon)

    def test_summary_reflects_train(self):
        summary = TrainSummaryDTO.from_train(self.train)

        self.assertEqual(summary.train_id, self.train.id)
        self.assertEqual(summary.state, "stopped")
        self.assertEqual(summary.version, 2)
        self.assertEqual(summary.empty_weight, 30)
        self.assertEqual(summary.conductors_count, 1)
        self.assertEqual(summary.max_payload, 330)
        self.assertEqual(summary.max_overall_weight, 360)
        self.assertEqual(summary.total_pulling_force, 1000)
        self.assertTrue(summary.can_start)

    def test_summary_parts(self):
        summary = TrainSummaryDTO.from_train(self.train)

        self.assertEqual([p.id for p in summary.locomotives], [self.locomotive.id])
        self.assertEqual(summary.wagons[0].description, f"Wagon №{self.wagon.id}")
        self.assertEqual(summary.wagons[0].type, "freight")
        self.assertEqual(summary.wagons[0].position, 0)

    def test_summary_of_moving_train_cannot_start(self):
        self.train.start()
        summary = TrainSummaryDTO.from_train(self.train)

        self.assertEqual(summary.state, "moving")
        self.assertFalse(summary.can_start)

    def test_part_dto_to_dict(self):
        data = TrainPartDTO.from_part(self.locomotive, 0).to_dict()
        self.assertEqual(data["kind"], "Locomotive")
        self.assertEqual(data["type"], "diesel")


if __name__ == '__main__':
    unittest.main()
