"""
Configuration dataclasses for blend jobs.

Centralizes the tunable parameters of a blend: which function, how
strongly, and which channels it touches, plus the folders used by batch
runs.
"""

from dataclasses import dataclass, field
from pathlib import Path

from .blend_modes import BlendFunction, BlendMode, get_blend_mode, with_opacity


@dataclass
class BlendConfig:
    """Blend function and channel settings."""

    mode: BlendMode = "multiply"
    opacity: float = 1.0

    blend_color: bool = True
    blend_alpha: bool = False
    clamp_alpha: bool = True

    # Weight the colour result by the source alpha
    alpha_weighted: bool = False

    def __post_init__(self) -> None:
        """Validate mode and opacity."""
        get_blend_mode(self.mode)
        if not 0.0 <= self.opacity <= 1.0:
            raise ValueError(f"opacity must be in [0..1], got {self.opacity}")

    def blend_function(self) -> BlendFunction:
        fn = get_blend_mode(self.mode)
        if self.opacity < 1.0:
            return with_opacity(fn, self.opacity)
        return fn

    def blend_kwargs(self) -> dict:
        """Keyword arguments for ``engine.blend``."""
        return {
            "blend_alpha": self.blend_alpha,
            "clamp_alpha": self.clamp_alpha,
            "blend_color": self.blend_color,
            "alpha_weighted": self.alpha_weighted,
        }


@dataclass
class BatchConfig:
    """Folders and file selection for batch blending."""

    input_dir: Path = field(default_factory=lambda: Path("images"))
    output_dir: Path = field(default_factory=lambda: Path("output/blended"))
    pattern: str = "*.png"
    overwrite: bool = False
    blend: BlendConfig = field(default_factory=BlendConfig)

    def __post_init__(self) -> None:
        """Ensure the output directory exists."""
        self.input_dir = Path(self.input_dir)
        self.output_dir = Path(self.output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def inputs(self) -> list[Path]:
        """Matching input files, sorted by name."""
        return sorted(p for p in self.input_dir.glob(self.pattern) if p.is_file())

    def output_path(self, input_path: Path) -> Path:
        return self.output_dir / input_path.name
