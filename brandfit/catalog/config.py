from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

_DEFAULT_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


@dataclass(frozen=True)
class CatalogConfig:
    """
    Where the track catalog lives and how long a loaded copy stays fresh.
    """

    data_dir: Path = Path(os.getenv("BRANDFIT_DATA_DIR", str(_DEFAULT_DATA_DIR)))
    enriched_filename: str = "output/enriched_database.xlsx"
    input_filename: str = "input/sortyourmusic.xlsx"
    ttl_seconds: float = float(os.getenv("BRANDFIT_CATALOG_TTL", "300"))

    @property
    def enriched_path(self) -> Path:
        return self.data_dir / self.enriched_filename

    @property
    def input_path(self) -> Path:
        return self.data_dir / self.input_filename


@dataclass(frozen=True)
class ChartConfig:
    data_dir: Path = Path(os.getenv("BRANDFIT_DATA_DIR", str(_DEFAULT_DATA_DIR)))
    chart_filename: str = "top2000-2024.json"

    @property
    def chart_path(self) -> Path:
        return self.data_dir / self.chart_filename


DEFAULT_CATALOG_CONFIG = CatalogConfig()
DEFAULT_CHART_CONFIG = ChartConfig()
