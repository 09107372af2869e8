"""
Configuration management for HyperVec.

This module provides dataclass-based configuration with validation and
defaults for space conversion, curvature learning, similarity search
and logging.
"""

import json
import logging
from dataclasses import dataclass, field, asdict
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .exceptions import ConfigurationError


class LogLevel(Enum):
    """Logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


LEARNING_STRATEGIES = ("grid_search", "gradient_descent")
STORAGE_FORMATS = ("float32", "float16", "int8", "nf4")


@dataclass
class ConversionConfig:
    """Euclidean to Poincaré conversion configuration."""
    max_radius: float = 0.9
    curvature: float = -1.0

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Validate conversion parameters."""
        if not (0 < self.max_radius < 1):
            raise ConfigurationError(f"max_radius must be between 0 and 1, got {self.max_radius}")
        if self.curvature >= 0:
            raise ConfigurationError(f"Curvature must be negative, got {self.curvature}")


@dataclass
class CurvatureLearningConfig:
    """Curvature learning configuration."""
    strategy: str = "grid_search"
    learning_rate: float = 0.01
    max_iterations: int = 100
    threshold: float = 1e-4
    dimensions: int = 3
    max_radius: float = 0.9
    min_curvature: float = -5.0
    max_curvature: float = -0.1
    seed: int = 42
    distance_scale: float = 5.0
    epsilon: float = 0.001

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Validate curvature learning parameters."""
        if self.strategy not in LEARNING_STRATEGIES:
            raise ConfigurationError(
                f"Unsupported learning strategy: {self.strategy}. Available: {list(LEARNING_STRATEGIES)}"
            )
        if self.learning_rate <= 0:
            raise ConfigurationError(f"Learning rate must be positive, got {self.learning_rate}")
        if self.max_iterations <= 0:
            raise ConfigurationError(f"Max iterations must be positive, got {self.max_iterations}")
        if self.threshold <= 0:
            raise ConfigurationError(f"Threshold must be positive, got {self.threshold}")
        if self.dimensions <= 0:
            raise ConfigurationError(f"Dimensions must be positive, got {self.dimensions}")
        if not (0 < self.max_radius < 1):
            raise ConfigurationError(f"max_radius must be between 0 and 1, got {self.max_radius}")
        if not (self.min_curvature < self.max_curvature < 0):
            raise ConfigurationError(
                f"Curvature bounds must satisfy min < max < 0, got [{self.min_curvature}, {self.max_curvature}]"
            )
        if self.distance_scale <= 0:
            raise ConfigurationError(f"Distance scale must be positive, got {self.distance_scale}")
        if self.epsilon <= 0:
            raise ConfigurationError(f"Epsilon must be positive, got {self.epsilon}")

    def to_options(self) -> Dict[str, Any]:
        """Option mapping accepted by ``CurvatureLearner.learn_optimal_curvature``."""
        options = asdict(self)
        options.pop("strategy")
        return options


@dataclass
class SearchConfig:
    """Similarity search configuration."""
    default_k: int = 10
    storage_format: str = "float32"

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Validate search parameters."""
        if self.default_k <= 0:
            raise ConfigurationError(f"default_k must be positive, got {self.default_k}")
        if self.storage_format not in STORAGE_FORMATS:
            raise ConfigurationError(f"Unsupported storage format: {self.storage_format}")


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: LogLevel = LogLevel.INFO
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_handler: Optional[Path] = None
    console_handler: bool = True

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Normalise string values loaded from JSON."""
        if isinstance(self.level, str):
            try:
                self.level = LogLevel(self.level.upper())
            except ValueError:
                raise ConfigurationError(f"Unknown log level: {self.level}")
        if isinstance(self.file_handler, str):
            self.file_handler = Path(self.file_handler)

    def configure_logging(self) -> None:
        """Configure the logging system."""
        logger = logging.getLogger()
        logger.handlers.clear()

        logger.setLevel(getattr(logging, self.level.value))

        formatter = logging.Formatter(self.format)

        if self.console_handler:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

        if self.file_handler:
            file_handler = logging.FileHandler(self.file_handler)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)


@dataclass
class HyperVecConfig:
    """Main configuration class that combines all sub-configurations."""
    conversion: ConversionConfig = field(default_factory=ConversionConfig)
    learning: CurvatureLearningConfig = field(default_factory=CurvatureLearningConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self):
        self.validate_all()

    def validate_all(self) -> None:
        """Validate all configuration sections."""
        self.conversion.validate()
        self.learning.validate()
        self.search.validate()
        self.logging.validate()

    def configure_logging(self) -> None:
        self.logging.configure_logging()

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "HyperVecConfig":
        """Create configuration from dictionary."""
        config = cls()

        for section_name in ["conversion", "learning", "search", "logging"]:
            if section_name in config_dict:
                section = getattr(config, section_name)
                for key, value in config_dict[section_name].items():
                    if hasattr(section, key):
                        setattr(section, key, value)

        config.validate_all()
        return config

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "HyperVecConfig":
        """Load configuration from JSON file."""
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, "r") as f:
            config_dict = json.load(f)

        return cls.from_dict(config_dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to a JSON-compatible dictionary."""
        config_dict = asdict(self)
        config_dict["logging"]["level"] = self.logging.level.value
        if self.logging.file_handler is not None:
            config_dict["logging"]["file_handler"] = str(self.logging.file_handler)
        return config_dict

    def save(self, config_path: Union[str, Path]) -> None:
        """Save configuration to JSON file."""
        config_path = Path(config_path)
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)


def get_default_config() -> HyperVecConfig:
    """Get default configuration."""
    return HyperVecConfig()


def load_config(config_path: Optional[Union[str, Path]] = None) -> HyperVecConfig:
    """Load configuration from file or return default."""
    if config_path is None:
        default_paths = [
            Path("hypervec.json"),
            Path("~/.hypervec/config.json").expanduser(),
        ]

        for path in default_paths:
            if path.exists():
                config_path = path
                break

    if config_path and Path(config_path).exists():
        return HyperVecConfig.from_file(config_path)
    else:
        return get_default_config()
