# imageflow/services/transform_pipeline/utils/operation_parser.py
"""
Operation Parser

Converts the transform mini-language into typed operation records:

    pipeline := fragment ('|' fragment)*
    fragment := funcName (',' param)*
    funcName := "resize" | "resizeCrop" | "crop" | "format"

Parameters are passed through as raw strings; unit resolution happens at
execution time against the live image dimensions.
"""

import re
from dataclasses import dataclass, replace
from typing import Dict, Iterable, Tuple

from ....enums import CropMode, OperationName
from ..exceptions import InvalidOperationError
from .constants import (
    CROP_POSITION_PARAM_INDEX,
    OPERATION_SEPARATOR,
    PARAM_SEPARATOR,
)

_WHITESPACE = re.compile(r"\s+")

_VALID_OPERATIONS: Dict[str, OperationName] = {op.value: op for op in OperationName}

# (min, max) positional parameters per operation
OPERATION_ARITY: Dict[OperationName, Tuple[int, int]] = {
    OperationName.RESIZE: (1, 4),
    OperationName.RESIZE_CROP: (2, 5),
    OperationName.CROP: (2, 4),
    OperationName.FORMAT: (1, 1),
}

CROP_MODE_TOKENS: Dict[str, CropMode] = {
    "CROP_ENTROPY": CropMode.ENTROPY,
    "CROP_BALANCED": CropMode.BALANCED,
}


@dataclass(frozen=True)
class Operation:
    """A single parsed pipeline step."""

    name: OperationName
    params: Tuple[str, ...] = ()

    def __str__(self) -> str:
        return PARAM_SEPARATOR.join((self.name.value, *self.params))


def parse_operations(operations: str) -> Tuple[Operation, ...]:
    """
    Parse an operations string into an ordered pipeline.

    Args:
        operations: e.g. ``"resizeCrop,400,300,CROP_ENTROPY|format,webp"``

    Returns:
        Tuple of operations in execution order (empty fragments are skipped)

    Raises:
        InvalidOperationError: for an unknown function name or a parameter
            count outside the accepted range; nothing is returned partially
    """
    compact = _WHITESPACE.sub("", operations or "")
    pipeline = []

    for fragment in compact.split(OPERATION_SEPARATOR):
        if not fragment:
            continue

        function, *params = fragment.split(PARAM_SEPARATOR)
        name = _VALID_OPERATIONS.get(function)
        if name is None:
            raise InvalidOperationError(
                f"The transform function '{function}' is not valid", token=function
            )

        min_params, max_params = OPERATION_ARITY[name]
        if not min_params <= len(params) <= max_params:
            raise InvalidOperationError(
                f"The transform function '{function}' expects "
                f"{min_params}-{max_params} parameters, got {len(params)}",
                token=function,
            )

        pipeline.append(Operation(name=name, params=tuple(params)))

    return tuple(pipeline)


def substitute_crop_tokens(operation: Operation) -> Operation:
    """
    Replace ``CROP_ENTROPY`` / ``CROP_BALANCED`` in the x position of crop
    operations with the matching smart-crop mode tag.
    """
    if operation.name not in (OperationName.CROP, OperationName.RESIZE_CROP):
        return operation
    if len(operation.params) <= CROP_POSITION_PARAM_INDEX:
        return operation

    mode = CROP_MODE_TOKENS.get(operation.params[CROP_POSITION_PARAM_INDEX])
    if mode is None:
        return operation

    params = list(operation.params)
    params[CROP_POSITION_PARAM_INDEX] = mode.value
    return replace(operation, params=tuple(params))


def format_operations(pipeline: Iterable[Operation]) -> str:
    """Serialise a pipeline back into the mini-language."""
    return OPERATION_SEPARATOR.join(str(operation) for operation in pipeline)
