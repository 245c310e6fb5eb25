# imageflow/services/transform_pipeline/utils/responsive.py
"""
Responsive Operation Selector

Filters a stored, rule-tagged operations string down to the fragments that
apply to one client:

    entries    := entry (';' entry)*
    entry      := [rule ':'] fragment
    rule       := constraint (',' constraint)*
    constraint := key '=' integer

Client metrics arrive as ``"width,height,speed"`` (typically from a cookie
set by a small client-side script). Rule parsing is permissive: unknown
keys and malformed values never raise.
"""

import re
from dataclasses import dataclass
from typing import Optional, Union

from ....enums import LoggerName, LogSource, ResponsiveRuleKey
from ...logger import get_service_logger
from .constants import (
    CLIENT_METRICS_SEPARATOR,
    OPERATION_SEPARATOR,
    RESPONSIVE_CONSTRAINT_SEPARATOR,
    RESPONSIVE_ENTRY_SEPARATOR,
    RESPONSIVE_KEY_VALUE_SEPARATOR,
    RESPONSIVE_RULE_SEPARATOR,
)

logger = get_service_logger(LoggerName.RESPONSIVE_FILTER, LogSource.PIPELINE)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

_RULE_KEYS = {key.value: key for key in ResponsiveRuleKey}


def lenient_int(value: Optional[str]) -> int:
    """Parse the leading integer of ``value``; anything else is 0."""
    if value is None:
        return 0
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else 0


@dataclass(frozen=True)
class ClientMetrics:
    """Viewport size and connection speed reported by a client."""

    width: int = 0
    height: int = 0
    speed: str = ""

    @classmethod
    def parse(cls, value: Optional[str]) -> "ClientMetrics":
        """
        Parse a ``"width,height,speed"`` string.

        Missing fields default to 0 / empty string, non-numeric sizes to 0.
        """
        parts = (value or "").split(CLIENT_METRICS_SEPARATOR, 2)
        parts += [""] * (3 - len(parts))
        return cls(
            width=lenient_int(parts[0]),
            height=lenient_int(parts[1]),
            speed=parts[2].strip(),
        )


def rule_matches(rule: str, width: int, height: int, speed: str = "") -> bool:
    """
    Check whether a client matches a rule selector.

    Every recognized constraint must pass; unrecognized keys are ignored,
    so an empty rule (or one made only of unknown keys) always matches.

    Args:
        rule: e.g. ``"min-width=500,max-width=1000"``
        width: Client width in pixels
        height: Client height in pixels
        speed: Client speed tag (accepted for completeness, not matched on)

    Returns:
        True if the client satisfies the rule
    """
    for constraint in rule.split(RESPONSIVE_CONSTRAINT_SEPARATOR):
        raw_key, _, raw_value = constraint.partition(RESPONSIVE_KEY_VALUE_SEPARATOR)
        key = _RULE_KEYS.get(raw_key.strip())
        if key is None:
            continue

        value = lenient_int(raw_value)

        match key:
            case ResponsiveRuleKey.MAX_WIDTH:
                passed = width <= value
            case ResponsiveRuleKey.MIN_WIDTH:
                passed = width >= value
            case ResponsiveRuleKey.WIDTH:
                passed = width == value
            case ResponsiveRuleKey.MAX_HEIGHT:
                passed = height <= value
            case ResponsiveRuleKey.MIN_HEIGHT:
                passed = height >= value
            case ResponsiveRuleKey.HEIGHT:
                passed = height == value

        if not passed:
            return False

    return True


def get_responsive_operations(
    client_metrics: Union[str, ClientMetrics, None], operations: str
) -> str:
    """
    Select the operations that apply to a client.

    Args:
        client_metrics: ``"width,height,speed"`` string or parsed ClientMetrics
        operations: Rule-tagged operations, e.g.
            ``"max-width=480:resize,320;min-width=481:resize,1024|format,webp"``

    Returns:
        Matching fragments joined with ``|`` in their original order
    """
    if not isinstance(client_metrics, ClientMetrics):
        client_metrics = ClientMetrics.parse(client_metrics)

    selected = []
    for entry in (operations or "").split(RESPONSIVE_ENTRY_SEPARATOR):
        entry = entry.strip()
        if not entry:
            continue

        rule, separator, fragment = entry.partition(RESPONSIVE_RULE_SEPARATOR)
        if not separator:
            selected.append(entry)
            continue

        if not fragment:
            continue

        if rule_matches(
            rule, client_metrics.width, client_metrics.height, client_metrics.speed
        ):
            selected.append(fragment)
        else:
            logger.debug(
                f"Responsive rule '{rule}' rejected client",
                extra_context={
                    "width": client_metrics.width,
                    "height": client_metrics.height,
                },
            )

    return OPERATION_SEPARATOR.join(selected)
