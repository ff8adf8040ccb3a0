"""
JSON stream adapter.

Reads a function input payload from a text stream and writes the result
to another. Used by the CLI with stdin/stdout or files.

This adapter satisfies FunctionInputPort and FunctionOutputPort.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, TextIO

from src.adapters.function_io import FunctionInputError, InputError

logger = logging.getLogger(__name__)


@dataclass
class JsonStreamAdapter:
    """Function payload I/O over text streams."""

    source: TextIO
    sink: TextIO
    indent: int | None = 2

    def read_input(self) -> dict[str, Any]:
        try:
            payload = json.load(self.source)
        except json.JSONDecodeError as e:
            raise FunctionInputError(
                [InputError(code="invalid_json", message=f"Input is not valid JSON: {e}")]
            ) from e

        if not isinstance(payload, dict):
            raise FunctionInputError(
                [InputError(code="invalid_payload", message="Input must be a JSON object")]
            )

        logger.debug("Read function input with keys: %s", sorted(payload))
        return payload

    def write_result(self, result: dict[str, Any]) -> None:
        json.dump(result, self.sink, indent=self.indent)
        self.sink.write("\n")
