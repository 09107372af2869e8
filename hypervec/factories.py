"""
Factory patterns for HyperVec components.

This module provides factory classes for creating curvature learners,
vector algebras, configurations and a fully wired set of components in
a flexible and maintainable way.
"""

import copy
import logging
from enum import Enum
from typing import Any, Dict, Optional, Type, Union

from .config import HyperVecConfig
from .core.base import SpaceType, VectorOperations
from .core.euclidean import EuclideanOperations
from .core.hyperbolic import PoincareOperations
from .exceptions import ConfigurationError, UnsupportedSpaceError
from .learning.base import CurvatureLearner
from .learning.gradient_descent import GradientDescentCurvatureLearner
from .learning.grid_search import GridSearchCurvatureLearner
from .storage.records import CollectionConfig, StorageFormat


logger = logging.getLogger(__name__)


class LearnerType(Enum):
    """Available curvature learning strategies."""
    GRID_SEARCH = "grid_search"
    GRADIENT_DESCENT = "gradient_descent"


class CurvatureLearnerFactory:
    """Factory for creating curvature learners."""

    _learner_registry: Dict[str, Type[CurvatureLearner]] = {
        LearnerType.GRID_SEARCH.value: GridSearchCurvatureLearner,
        LearnerType.GRADIENT_DESCENT.value: GradientDescentCurvatureLearner,
    }

    @classmethod
    def register_learner(cls, name: str, learner_class: Type[CurvatureLearner]) -> None:
        """Register a new curvature learner type."""
        if not (isinstance(learner_class, type) and issubclass(learner_class, CurvatureLearner)):
            raise ConfigurationError("Learner class must inherit from CurvatureLearner")

        cls._learner_registry[name] = learner_class
        logger.debug(f"Registered curvature learner: {name}")

    @classmethod
    def create_learner(cls, learner_type: Union[LearnerType, str], **kwargs) -> CurvatureLearner:
        """Create a curvature learner by type or registered name."""
        name = learner_type.value if isinstance(learner_type, LearnerType) else learner_type
        if name not in cls._learner_registry:
            available_learners = list(cls._learner_registry.keys())
            raise ConfigurationError(
                f"Unknown learner type: {name}. "
                f"Available learners: {available_learners}"
            )

        learner_class = cls._learner_registry[name]

        try:
            return learner_class(**kwargs)
        except TypeError as e:
            raise ConfigurationError(f"Failed to create learner '{name}': {e}") from e

    @classmethod
    def create_default_learner(cls) -> CurvatureLearner:
        """Create the default (grid search) learner."""
        return cls.create_learner(LearnerType.GRID_SEARCH)

    @classmethod
    def create_from_config(cls, config: HyperVecConfig) -> CurvatureLearner:
        """
        Create the learner named by ``config.learning.strategy``.

        The remaining learning settings become the learner's default
        options, so per-call options still take precedence.
        """
        options = config.learning.to_options()
        if config.learning.strategy == LearnerType.GRADIENT_DESCENT.value:
            return cls.create_learner(
                config.learning.strategy, seed=config.learning.seed, default_options=options
            )
        return cls.create_learner(config.learning.strategy, default_options=options)

    @classmethod
    def get_available_learners(cls) -> Dict[str, Type[CurvatureLearner]]:
        """Get all available learner types."""
        return cls._learner_registry.copy()


class OperationsFactory:
    """Factory for vector algebras keyed by geometry."""

    @staticmethod
    def create_operations(space_type: Union[SpaceType, str]) -> VectorOperations:
        """Create the algebra for ``space_type``."""
        try:
            space_type = SpaceType(space_type)
        except ValueError as e:
            raise UnsupportedSpaceError(f"Unknown space type: {space_type}") from e

        if space_type is SpaceType.EUCLIDEAN:
            return EuclideanOperations()
        if space_type is SpaceType.POINCARE_BALL:
            return PoincareOperations()
        raise UnsupportedSpaceError(f"Unsupported space type: {space_type.name}", {"space_type": space_type.value})


class ConfigurationFactory:
    """Factory for creating and managing configurations."""

    _preset_configs: Dict[str, Dict[str, Any]] = {
        'default': {},
        'deep_hierarchy': {
            'learning': {
                'strategy': 'grid_search',
                'min_curvature': -10.0,
                'max_curvature': -0.5,
            },
            'conversion': {
                'max_radius': 0.95,
            },
        },
        'fast': {
            'learning': {
                'strategy': 'gradient_descent',
                'max_iterations': 20,
                'threshold': 1e-3,
            },
            'search': {
                'default_k': 5,
            },
        },
    }

    @classmethod
    def register_preset(cls, name: str, config_dict: Dict[str, Any]) -> None:
        """Register a new configuration preset."""
        cls._preset_configs[name] = config_dict
        logger.debug(f"Registered configuration preset: {name}")

    @classmethod
    def create_config(cls, preset: str = 'default', **overrides) -> HyperVecConfig:
        """Create a configuration from a preset with optional overrides."""
        if preset not in cls._preset_configs:
            available_presets = list(cls._preset_configs.keys())
            raise ConfigurationError(
                f"Unknown preset: {preset}. "
                f"Available presets: {available_presets}"
            )

        config_dict = copy.deepcopy(cls._preset_configs[preset])

        if overrides:
            cls._deep_update(config_dict, overrides)

        if config_dict:
            return HyperVecConfig.from_dict(config_dict)
        else:
            return HyperVecConfig()

    @classmethod
    def get_available_presets(cls) -> Dict[str, Dict[str, Any]]:
        """Get all available configuration presets."""
        return copy.deepcopy(cls._preset_configs)

    @classmethod
    def _deep_update(cls, base_dict: Dict[str, Any], update_dict: Dict[str, Any]) -> None:
        """Deep update a dictionary with another dictionary."""
        for key, value in update_dict.items():
            if key in base_dict and isinstance(base_dict[key], dict) and isinstance(value, dict):
                cls._deep_update(base_dict[key], value)
            else:
                base_dict[key] = value


def create_components(config: Optional[HyperVecConfig] = None) -> Dict[str, Any]:
    """
    Create a wired set of components from a configuration.

    Returns:
        Dictionary with ``config``, ``learner``, ``converter`` (an
        AdaptiveCurvatureConverter following the learner and using
        ``conversion.max_radius``), ``storage`` (in-memory) and ``index``
        (a FlatVectorIndex over that storage with ``search.default_k``)
    """
    from .config import get_default_config
    from .conversion.adaptive import AdaptiveCurvatureConverter
    from .index.flat import FlatVectorIndex
    from .storage.memory import InMemoryVectorStorage

    if config is None:
        config = get_default_config()

    learner = CurvatureLearnerFactory.create_from_config(config)
    converter = AdaptiveCurvatureConverter(learner, max_radius=config.conversion.max_radius)
    converter.set_curvature(config.conversion.curvature)
    storage = InMemoryVectorStorage()
    index = FlatVectorIndex(storage, default_k=config.search.default_k)

    logger.debug(f"Created components with learner {type(learner).__name__}")
    return {
        'config': config,
        'learner': learner,
        'converter': converter,
        'storage': storage,
        'index': index,
    }


def create_collection_config(
    config: HyperVecConfig,
    dimension: int,
    space_type: Union[SpaceType, str] = SpaceType.EUCLIDEAN
) -> CollectionConfig:
    """
    Collection settings for a new collection under ``config``.

    The storage format comes from ``search.storage_format``; Poincaré
    collections are scored at ``conversion.curvature``.
    """
    storage_format = StorageFormat(config.search.storage_format)
    try:
        space_type = SpaceType(space_type)
    except ValueError as e:
        raise UnsupportedSpaceError(f"Unknown space type: {space_type}") from e

    if space_type is SpaceType.EUCLIDEAN:
        return CollectionConfig.create_euclidean(dimension, storage_format)
    if space_type is SpaceType.POINCARE_BALL:
        return CollectionConfig.create_poincare(dimension, storage_format, config.conversion.curvature)
    raise UnsupportedSpaceError(f"Unsupported space type: {space_type.name}", {"space_type": space_type.value})
