from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field

SECTOR_INTENSITY_TOP_N = 10
TOPIC_COUNTS_TOP_N = 10
SCATTER_SAMPLE_LIMIT = 50
COUNTRY_COUNTS_TOP_N = 15

BAR_ENTER_DURATION_MS = 800
DONUT_ENTER_DURATION_MS = 800
BUBBLE_ENTER_DURATION_MS = 1000
COUNTRY_ENTER_DURATION_MS = 1000
HOVER_DURATION_MS = 200

CANVAS_WIDTH = 500
CANVAS_HEIGHT = 300


class Margin(BaseModel):
    top: int = Field(default=20, ge=0)
    right: int = Field(default=30, ge=0)
    bottom: int = Field(default=50, ge=0)
    left: int = Field(default=60, ge=0)


class CanvasConfig(BaseModel):
    width: int = Field(default=CANVAS_WIDTH, ge=50)
    height: int = Field(default=CANVAS_HEIGHT, ge=50)


class LimitsConfig(BaseModel):
    sector_intensity_top_n: int = Field(default=SECTOR_INTENSITY_TOP_N, ge=1)
    topic_counts_top_n: int = Field(default=TOPIC_COUNTS_TOP_N, ge=1)
    scatter_sample_limit: int = Field(default=SCATTER_SAMPLE_LIMIT, ge=1)
    country_counts_top_n: int = Field(default=COUNTRY_COUNTS_TOP_N, ge=1)


class DurationsConfig(BaseModel):
    bar_enter_ms: int = Field(default=BAR_ENTER_DURATION_MS, ge=0)
    donut_enter_ms: int = Field(default=DONUT_ENTER_DURATION_MS, ge=0)
    bubble_enter_ms: int = Field(default=BUBBLE_ENTER_DURATION_MS, ge=0)
    country_enter_ms: int = Field(default=COUNTRY_ENTER_DURATION_MS, ge=0)
    hover_ms: int = Field(default=HOVER_DURATION_MS, ge=0)


class BarConfig(BaseModel):
    margin: Margin = Field(default_factory=lambda: Margin(bottom=80))
    band_padding: float = Field(default=0.2, ge=0.0, lt=1.0)
    corner_radius: float = Field(default=4.0, ge=0.0)
    palette: str = "Blues"


class DonutConfig(BaseModel):
    ring_inset: float = Field(default=20.0, ge=0.0)
    inner_radius_ratio: float = Field(default=0.5, ge=0.0, lt=1.0)
    hover_radius_delta: float = Field(default=5.0, ge=0.0)
    label_min_share: float = Field(default=0.05, ge=0.0, le=1.0)
    rest_opacity: float = Field(default=0.8, ge=0.0, le=1.0)
    stroke: str = "#1F2937"


class BubbleConfig(BaseModel):
    margin: Margin = Field(default_factory=Margin)
    min_radius: float = Field(default=3.0, ge=0.0)
    max_radius: float = Field(default=20.0, gt=0.0)
    rest_opacity: float = Field(default=0.7, ge=0.0, le=1.0)
    title_max_chars: int = Field(default=50, ge=1)


class CountryConfig(BaseModel):
    margin: Margin = Field(default_factory=lambda: Margin(bottom=120, left=80))
    band_padding: float = Field(default=0.3, ge=0.0, lt=1.0)
    radius_factor: float = Field(default=3.0, gt=0.0)
    hover_radius_delta: float = Field(default=5.0, ge=0.0)
    palette: str = "Greens"
    max_label_words: int = Field(default=2, ge=1)


class TooltipConfig(BaseModel):
    offset_x: float = 10.0
    offset_y: float = -10.0


class ChartsConfig(BaseModel):
    canvas: CanvasConfig = Field(default_factory=CanvasConfig)
    limits: LimitsConfig = Field(default_factory=LimitsConfig)
    durations: DurationsConfig = Field(default_factory=DurationsConfig)
    bar: BarConfig = Field(default_factory=BarConfig)
    donut: DonutConfig = Field(default_factory=DonutConfig)
    bubble: BubbleConfig = Field(default_factory=BubbleConfig)
    country: CountryConfig = Field(default_factory=CountryConfig)
    tooltip: TooltipConfig = Field(default_factory=TooltipConfig)


class ApiConfig(BaseModel):
    base_url: str = "http://localhost:5000/api"
    timeout_seconds: float = Field(default=10.0, gt=0.0)


class OutputsConfig(BaseModel):
    figures_format: str = "png"
    write_html: bool = True


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    api: ApiConfig = Field(default_factory=ApiConfig)
    charts: ChartsConfig = Field(default_factory=ChartsConfig)
    outputs: OutputsConfig = Field(default_factory=OutputsConfig)


DEFAULT_CONFIG_PATH = Path("configs/default.yaml")


def load_config(path: Path) -> AppConfig:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    config = AppConfig.model_validate(data)
    config.api.base_url = os.getenv("INSIGHT_DASHBOARD_API_URL") or config.api.base_url
    return config
