# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

"""
Core infrastructure for zipd.

This module collects the foundational classes, utilities, and helpers used
across the zipd codebase: configuration, error types, structured logging,
and per-item execution with error handlers.
"""
