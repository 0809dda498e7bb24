from dataclasses import dataclass

# Indexed by skill level 0..15
SKILL_X = (4, 12, 15, 20, 25, 25, 35, 35, 40, 60, 70, 80, 90, 110, 150, 300)
SKILL_Y = (4, 12, 15, 15, 20, 25, 25, 35, 40, 60, 70, 75, 75, 90, 120, 240)
SKILL_ROOMS = (0, 2, 2, 3, 4, 5, 10, 10, 20, 45, 45, 50, 50, 60, 80, 160)
SKILL_PARTCT = (60, 600, 900, 1200, 2100, 2700, 3300, 5000, 6000, 13500, 19800, 25000, 29000, 45000, 85000, 340000)
MAX_SKILL_LEVEL = 15

MAP_UNIT = 128

MAX_TRIES = 250
MIN_ROOM_DIMENSION = 3
MAX_ROOM_DIMENSION = 8
DOOR_CANDIDATES = 5

# BSP heuristics
SPLITTER_SAMPLES = 50
SPLIT_PENALTY = 3
PROGRESS_CADENCE = 32


@dataclass(frozen=True)
class SkillSettings:
    width: int
    height: int
    rooms: int
    expected_partiters: int

    @classmethod
    def for_level(cls, skill_level: int, perfect: bool = False) -> "SkillSettings":
        if not 0 <= skill_level <= MAX_SKILL_LEVEL:
            raise ValueError(f"skill level {skill_level} outside 0..{MAX_SKILL_LEVEL}")
        return cls(
            width=SKILL_X[skill_level],
            height=SKILL_Y[skill_level],
            rooms=0 if perfect else SKILL_ROOMS[skill_level],
            expected_partiters=SKILL_PARTCT[skill_level],
        )


__all__ = [
    "SKILL_X",
    "SKILL_Y",
    "SKILL_ROOMS",
    "SKILL_PARTCT",
    "MAX_SKILL_LEVEL",
    "MAP_UNIT",
    "MAX_TRIES",
    "MIN_ROOM_DIMENSION",
    "MAX_ROOM_DIMENSION",
    "DOOR_CANDIDATES",
    "SPLITTER_SAMPLES",
    "SPLIT_PENALTY",
    "PROGRESS_CADENCE",
    "SkillSettings",
]
