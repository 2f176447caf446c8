from typing import TypeAlias
from numpy.typing import NDArray
import numpy as np

# vertex count above which ears are tested through the z-order index
HASH_THRESHOLD = 80
# coordinates are mapped onto a 15-bit grid before interleaving
Z_ORDER_SCALE = 32767

Vec2d: TypeAlias = tuple[float, float] | NDArray[np.floating]
Triangle: TypeAlias = tuple[Vec2d, Vec2d, Vec2d] | NDArray[np.floating]
FlatBuffer: TypeAlias = list[float] | NDArray[np.floating]
