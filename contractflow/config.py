"""Layout settings, configurable via environment variables or a .env file.

    CONTRACTFLOW_LEAF_WIDTH          pixels reserved per leaf (default 280)
    CONTRACTFLOW_VERTICAL_SPACING    pixels between levels (default 160)
    CONTRACTFLOW_ROOT_X              x the contract root is centered on (default 250)
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()  # load environment variables from .env file

DEFAULT_LEAF_WIDTH = 280.0
DEFAULT_VERTICAL_SPACING = 160.0
DEFAULT_ROOT_X = 250.0


class LayoutSettings(BaseModel):
    """constants of the subtree-proportional layout."""

    model_config = {"frozen": True}

    leaf_width: float = Field(default=DEFAULT_LEAF_WIDTH, gt=0)
    vertical_spacing: float = Field(default=DEFAULT_VERTICAL_SPACING, gt=0)
    root_x: float = DEFAULT_ROOT_X

    @classmethod
    def from_env(cls) -> "LayoutSettings":
        """Read overrides from the environment, falling back to defaults."""
        return cls(
            leaf_width=os.getenv("CONTRACTFLOW_LEAF_WIDTH", DEFAULT_LEAF_WIDTH),
            vertical_spacing=os.getenv("CONTRACTFLOW_VERTICAL_SPACING", DEFAULT_VERTICAL_SPACING),
            root_x=os.getenv("CONTRACTFLOW_ROOT_X", DEFAULT_ROOT_X),
        )
