# models/sobel_kernels.py
"""
Fixed 3x3 gradient kernels. Both arrays are read-only.
"""
import numpy as np


def _frozen(rows) -> np.ndarray:
    kernel = np.array(rows, dtype=np.int32)
    kernel.flags.writeable = False
    return kernel


# Responds to vertical edges (left/right intensity change)
HORIZONTAL = _frozen([[-1, 0, 1],
                      [-1, 0, 1],
                      [-1, 0, 1]])

# Responds to horizontal edges (top/bottom intensity change)
VERTICAL = _frozen([[-1, -1, -1],
                    [ 0,  0,  0],
                    [ 1,  1,  1]])
