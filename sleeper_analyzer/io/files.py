"""File management utilities."""

from pathlib import Path
from typing import Optional

from sleeper_analyzer.config import ConfigManager
from sleeper_analyzer.response import ApiResponse


class FileManager:
    """Manages output file paths and writes."""

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        self.config_manager = config_manager or ConfigManager()

    def get_output_path(self, filename: str) -> Path:
        """Get output file path."""
        output_dir = self.config_manager.get_output_dir()
        return output_dir / filename

    def write_response(self, response: ApiResponse, filename: str) -> Path:
        """Write a response envelope as JSON and return its path.

        Absolute paths are written as given; bare names land in ``out/``.
        """
        path = Path(filename)
        if not path.is_absolute() and path.parent == Path("."):
            path = self.get_output_path(path.name)
        else:
            path.parent.mkdir(parents=True, exist_ok=True)

        path.write_text(response.to_json(), encoding="utf-8")
        return path
