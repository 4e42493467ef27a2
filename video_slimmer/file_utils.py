"""
File handling utilities and path operations
"""

from pathlib import Path
from typing import List

# Video file extensions
VIDEO_EXTS = {'.mkv', '.mp4', '.m4v', '.mov', '.avi', '.wmv', '.flv', '.ts', '.m2ts', '.webm'}


def format_file_size(size_bytes):
    """Convert bytes to human readable format"""
    for unit in ['B', 'KB', 'MB', 'GB']:
        if size_bytes < 1024.0:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024.0
    return f"{size_bytes:.1f} TB"


def is_video_file(path: Path) -> bool:
    return path.is_file() and path.suffix.lower() in VIDEO_EXTS


def collect_video_files(root_path: Path) -> List[Path]:
    """Collect all video files below a directory, sorted by path"""
    return sorted(p for p in root_path.rglob('*') if is_video_file(p))


def output_path_for(src: Path, root: Path, out_dir: Path) -> Path:
    """Mirror src's location under root into out_dir"""
    return out_dir / src.relative_to(root)
