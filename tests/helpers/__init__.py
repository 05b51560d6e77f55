"""Test helper utilities for the repostate test suite."""

from tests.helpers.cli_assertions import (
    assert_command_failed,
    assert_command_success,
    assert_output_contains,
)

__all__ = [
    "assert_command_success",
    "assert_command_failed",
    "assert_output_contains",
]
