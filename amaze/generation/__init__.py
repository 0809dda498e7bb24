"""Maze generation package.

Public entry points:
    Order, Builder          describe what to generate
    MazeFactory             run an order on a background thread
    generate                synchronous pipeline (used by scripts and tests)
    Maze                    the delivered, read-only aggregate
    encode / decode         flat key/value form of a Maze
"""
from .bsp import BSPBranch, BSPBuilder, BSPLeaf, BSPNode
from .config import MAP_UNIT, MAX_SKILL_LEVEL, SkillSettings
from .directions import ORDERED, CardinalDirection, Wallboard
from .distance import Distance
from .errors import (
    CancellationToken,
    DecodeError,
    GenerationCancelled,
    InvariantViolation,
    MazeGenerationError,
    WallboardError,
)
from .factory import MazeFactory
from .floorplan import Floorplan
from .maze import Maze
from .order import Builder, Order
from .pipeline import generate
from .serialization import decode, encode
from .walls import Wall

__all__ = [
    "BSPBranch",
    "BSPBuilder",
    "BSPLeaf",
    "BSPNode",
    "Builder",
    "CancellationToken",
    "CardinalDirection",
    "DecodeError",
    "Distance",
    "Floorplan",
    "GenerationCancelled",
    "InvariantViolation",
    "MAP_UNIT",
    "MAX_SKILL_LEVEL",
    "Maze",
    "MazeFactory",
    "MazeGenerationError",
    "ORDERED",
    "Order",
    "SkillSettings",
    "Wall",
    "WallboardError",
    "Wallboard",
    "decode",
    "encode",
    "generate",
]
