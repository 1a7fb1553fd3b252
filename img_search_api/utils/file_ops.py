"""File operations utilities for the application."""

from pathlib import Path
from typing import Union


def ensure_directory(directory_path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        directory_path: Path to the directory

    Returns:
        Path object for the directory
    """
    path = Path(directory_path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def write_text_file(file_path: Union[str, Path], content: str) -> Path:
    """
    Write text to a file, replacing any previous content.

    Args:
        file_path: Destination path
        content: Text to write (UTF-8)

    Returns:
        Path object for the written file
    """
    path = Path(file_path)
    # Ensure parent directory exists
    ensure_directory(path.parent)

    with path.open('w', encoding='utf-8') as f:
        f.write(content)
    return path
