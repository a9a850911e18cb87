"""Test suite for trainset"""
