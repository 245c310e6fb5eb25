# imageflow/services/transform_pipeline/engines/registry.py
"""
Engine Registry

Maps engine names to implementations and selects the engine a pipeline
runs on, either by explicit name or by probing availability in a fixed
preference order.
"""

from typing import Dict, Iterable, List, Optional, Type

from ....constants import DEFAULT_ENGINE_PREFERENCE
from ....enums import EngineName, LogEmoji, LoggerName, LogSource
from ...logger import get_service_logger
from ..exceptions import (
    EngineUnavailableError,
    NoEngineAvailableError,
    UnknownEngineError,
)
from .base_engine import ImageEngine
from .opencv_engine import OpenCVEngine
from .pillow_engine import PillowEngine

logger = get_service_logger(LoggerName.ENGINE_REGISTRY, LogSource.ENGINE)

ENGINE_REGISTRY: Dict[str, Type[ImageEngine]] = {
    EngineName.PILLOW.value: PillowEngine,
    EngineName.OPENCV.value: OpenCVEngine,
}


def get_engine_class(
    name: Optional[str] = None, preference: Optional[Iterable[str]] = None
) -> Type[ImageEngine]:
    """
    Select an image engine class.

    Args:
        name: Explicit engine name (case-insensitive). When given, only that
            engine is considered.
        preference: Engine names probed in order when no name is given;
            defaults to pillow then opencv

    Returns:
        The selected engine class

    Raises:
        UnknownEngineError: If ``name`` is not a registered engine
        EngineUnavailableError: If ``name`` is registered but cannot run here
        NoEngineAvailableError: If no engine in the preference list is available
    """
    if name:
        key = name.strip().lower()
        engine_class = ENGINE_REGISTRY.get(key)
        if engine_class is None:
            raise UnknownEngineError(
                f"The image engine '{name}' is not valid. "
                f"Known engines: {', '.join(ENGINE_REGISTRY)}"
            )
        if not engine_class.is_available():
            raise EngineUnavailableError(f"The image engine '{name}' is not installed")
        return engine_class

    candidates = list(preference) if preference else list(DEFAULT_ENGINE_PREFERENCE)
    for candidate in candidates:
        engine_class = ENGINE_REGISTRY.get(candidate.strip().lower())
        if engine_class is None:
            logger.warning(
                f"Ignoring unknown engine '{candidate}' in preference list",
                emoji=LogEmoji.SKIPPED,
            )
            continue
        if engine_class.is_available():
            return engine_class

    raise NoEngineAvailableError(
        f"No image engine available (tried: {', '.join(candidates)})"
    )


def available_engines() -> List[str]:
    """Names of the registered engines that can run on this system."""
    return [
        name for name, engine_class in ENGINE_REGISTRY.items() if engine_class.is_available()
    ]
