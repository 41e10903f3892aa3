"""Finding image files on disk."""

from pathlib import Path

# Suffixes treated as images, compared lowercase
IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".bmp", ".tiff", ".tif"}


def scan_local_images(path: str | Path, extensions: set[str] | None = None) -> list[Path]:
    """Image files directly inside a directory, or the image file itself.

    Args:
        path: A directory (not searched recursively) or one image file.
        extensions: Allowed lowercase suffixes; defaults to IMAGE_EXTENSIONS.

    Returns:
        Resolved paths sorted by name.

    Raises:
        ValueError: If path is missing, or is a file with another suffix.
    """
    allowed = extensions or IMAGE_EXTENSIONS
    target = Path(path).resolve()

    if target.is_file():
        if target.suffix.lower() not in allowed:
            raise ValueError(f"{path} is not a supported image file")
        return [target]

    if not target.is_dir():
        raise ValueError(f"{path} is not a valid file or directory")

    return sorted(
        entry for entry in target.iterdir()
        if entry.is_file() and entry.suffix.lower() in allowed
    )
