# Model package init
from .maze_record import MazeRecord  # noqa: F401 re-export

__all__ = ["MazeRecord"]
