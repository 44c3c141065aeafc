from dataclasses import dataclass, asdict
from pathlib import Path
import logging
import math

import yaml

from errors import InvalidConfiguration
from scaling import QualityMode
from viewtransform import FitMode, ViewportTransform

logger = logging.getLogger(__name__)


def _finite_positive(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and 0 < value < math.inf


@dataclass
class ViewerConfig:
    """Viewer settings, loadable from a YAML file"""
    fit_mode: str = "cover"  # Options: contain, cover, original
    quality_mode: str = "high_quality"  # Options: fast, high_quality
    min_zoom: float = 0.25
    max_zoom: float = 2.5
    zoom_step: float = 0.025
    hq_delay_ms: int = 120  # Delay before the high-quality pass after interaction
    background: str = "#202020"
    geometry: str = "800x600"
    log_level: str = "INFO"

    def validate(self) -> 'ViewerConfig':
        """Raise InvalidConfiguration on the first bad setting"""
        FitMode.parse(self.fit_mode)
        QualityMode.parse(self.quality_mode)
        if not (_finite_positive(self.min_zoom) and _finite_positive(self.max_zoom)
                and self.min_zoom < self.max_zoom):
            raise InvalidConfiguration(
                f"Zoom bounds must be finite and satisfy 0 < min_zoom < max_zoom "
                f"(got {self.min_zoom}, {self.max_zoom})"
            )
        if not _finite_positive(self.zoom_step):
            raise InvalidConfiguration(f"zoom_step must be positive and finite (got {self.zoom_step})")
        if not isinstance(self.hq_delay_ms, int) or self.hq_delay_ms < 0:
            raise InvalidConfiguration(f"hq_delay_ms must be a non-negative integer (got {self.hq_delay_ms})")
        if not isinstance(logging.getLevelName(str(self.log_level).upper()), int):
            raise InvalidConfiguration(f"Unknown log_level: {self.log_level!r}")
        return self

    def apply_to(self, transform: ViewportTransform) -> None:
        """Push zoom bounds, step and fit mode into an engine"""
        self.validate()
        transform.set_zoom_bounds(self.min_zoom, self.max_zoom)
        transform.set_zoom_step(self.zoom_step)
        transform.set_fit_mode(self.fit_mode)

    def create_transform(self) -> ViewportTransform:
        self.validate()
        return ViewportTransform(
            min_zoom=self.min_zoom,
            max_zoom=self.max_zoom,
            zoom_step=self.zoom_step,
            fit_mode=self.fit_mode,
        )

    def save(self, path: str = "viewer.yaml"):
        """Save configuration to YAML file"""
        with open(path, 'w') as f:
            yaml.dump(asdict(self), f, default_flow_style=False, indent=2)

    @classmethod
    def load(cls, path: str = "viewer.yaml") -> 'ViewerConfig':
        """Load configuration from YAML file; missing file gives defaults"""
        if not Path(path).exists():
            logger.debug("No config at %s, using defaults", path)
            return cls()

        with open(path, 'r') as f:
            config_dict = yaml.safe_load(f) or {}

        if not isinstance(config_dict, dict):
            raise InvalidConfiguration(f"{path}: expected a mapping at top level")

        config = cls()
        try:
            config.fit_mode = str(config_dict.get('fit_mode', config.fit_mode))
            config.quality_mode = str(config_dict.get('quality_mode', config.quality_mode))
            config.min_zoom = float(config_dict.get('min_zoom', config.min_zoom))
            config.max_zoom = float(config_dict.get('max_zoom', config.max_zoom))
            config.zoom_step = float(config_dict.get('zoom_step', config.zoom_step))
            config.hq_delay_ms = int(config_dict.get('hq_delay_ms', config.hq_delay_ms))
            config.background = str(config_dict.get('background', config.background))
            config.geometry = str(config_dict.get('geometry', config.geometry))
            config.log_level = str(config_dict.get('log_level', config.log_level))
        except (TypeError, ValueError, OverflowError) as e:
            raise InvalidConfiguration(f"{path}: {e}") from e

        return config.validate()
