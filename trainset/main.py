# File: trainset/main.py
"""
Demo entry point for train composition
Walks through composing, starting and recomposing a train
"""

import logging

from .config import TrainSettings, setup_logging
from .domain.models import LocomotiveType, WagonType, Locomotive, Wagon
from .domain.errors import TrainsetError
from .application.train_service import TrainService
from .infrastructure.messaging import EventBus, EventType, ConsoleNotificationHandler


def build_service(settings: TrainSettings) -> TrainService:
    """Wire the event bus and console notifications into a service"""
    event_bus = EventBus()
    notifier = ConsoleNotificationHandler()
    event_bus.subscribe(EventType.TRAIN_STARTED, notifier)
    event_bus.subscribe(EventType.TRAIN_STOPPED, notifier)
    return TrainService(event_bus=event_bus, settings=settings)


def run_demo(service: TrainService, logger: logging.Logger) -> None:
    locomotive = Locomotive(
        weight=132.5, length=10, max_persons_count=1, max_goods_weight=32,
        pulling_force=1231243, type=LocomotiveType.DIESEL
    )
    wagon = Wagon(
        weight=234, length=25, max_persons_count=10, max_goods_weight=123,
        manufacturer_name="Some Name", production_year=2007, type=WagonType.FREIGHT
    )
    second_wagon = Wagon(
        weight=234, length=25, max_persons_count=10, max_goods_weight=123,
        manufacturer_name="Some Name", production_year=2007, type=WagonType.FREIGHT
    )

    train = service.compose(locomotive)
    steps = [
        ("attach the leading locomotive again", lambda: service.attach(train.id, locomotive)),
        ("attach wagon", lambda: service.attach(train.id, wagon)),
        ("start", lambda: service.start(train.id)),
        ("attach wagon while moving", lambda: service.attach(train.id, second_wagon)),
        ("stop", lambda: service.stop(train.id)),
        ("attach second wagon", lambda: service.attach(train.id, second_wagon)),
    ]
    for name, step in steps:
        try:
            step()
        except TrainsetError as e:
            logger.info(f"Step '{name}' rejected: {type(e).__name__}")

    for description in train.describe_parts():
        logger.info(description)

    summary = service.summary(train.id)
    logger.info(f"Max overall weight: {summary.max_overall_weight}")
    logger.info(f"Max persons count: {summary.max_persons_count}")


def main() -> None:
    settings = TrainSettings.from_env()
    logger = setup_logging(settings.log_level)
    logger.info("Starting train composition demo...")
    run_demo(build_service(settings), logger)


if __name__ == "__main__":
    main()
