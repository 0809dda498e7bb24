from typing import Dict


def init_metrics() -> Dict[str, int | float | bool | dict]:
    return {
        'rooms_requested': 0,
        'rooms_placed': 0,
        'walls_torn_down': 0,
        'walls_extracted': 0,
        'bsp_iterations': 0,
        'bsp_splits': 0,
        'bsp_leaves': 0,
        'max_distance': 0,
        'runtime_ms': 0.0,
        'phase_ms': {},
    }
