"""witness_complex

Weak and strong witness complexes on point clouds.

The public API is intentionally small:

- default_config
- build_witness_complex, print_complex_summary
- choose_landmarks_furthest / choose_landmarks_random
- nearest_landmark_table, LandmarkIndex
- WeakWitnessComplex, StrongWitnessComplex
- SimplexTreeStore
- result_to_json, save_result
"""

from .config import default_config
from .errors import InvalidArgumentError, InvalidStateError, MalformedInputError, WitnessComplexError
from .landmarks import choose_landmarks, choose_landmarks_furthest, choose_landmarks_random
from .nearest import LandmarkIndex, nearest_landmark_table, rows_from_table
from .store import SimplexTreeStore
from .weak import WeakWitnessComplex
from .strong import StrongWitnessComplex
from .analysis import build_witness_complex, print_complex_summary
from .io import result_to_json, save_result

__all__ = [
    "default_config",
    "build_witness_complex",
    "print_complex_summary",
    "choose_landmarks",
    "choose_landmarks_furthest",
    "choose_landmarks_random",
    "nearest_landmark_table",
    "rows_from_table",
    "LandmarkIndex",
    "WeakWitnessComplex",
    "StrongWitnessComplex",
    "SimplexTreeStore",
    "result_to_json",
    "save_result",
    "WitnessComplexError",
    "InvalidArgumentError",
    "InvalidStateError",
    "MalformedInputError",
]
