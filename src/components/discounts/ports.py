"""
Discounts component ports.

External interfaces for moving function payloads in and out of the
evaluation.
"""

from __future__ import annotations

from typing import Any, Protocol


class FunctionInputPort(Protocol):
    """
    Port supplying the deserialized function input payload.

    Implementations:
    - JsonStreamAdapter: reads JSON from a text stream (stdin, file)
    """

    def read_input(self) -> dict[str, Any]:
        """
        Read one function input payload.

        Returns:
            Decoded JSON object in the function input wire schema

        Raises:
            FunctionInputError: If the payload is not a JSON object
        """
        ...


class FunctionOutputPort(Protocol):
    """Port receiving the serialized function result."""

    def write_result(self, result: dict[str, Any]) -> None:
        """
        Write one function result.

        Args:
            result: JSON-ready function output (`{"operations": [...]}`)
        """
        ...
