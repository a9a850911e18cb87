"""Domain layer: entities, aggregates and errors of a train"""
