"""Kernel building blocks: settings, logging, errors and runtime helpers."""
