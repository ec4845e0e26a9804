"""Central LED matrix layout defaults so the entire stack stays in sync."""

from dataclasses import dataclass, field
from typing import List, Tuple

DEFAULT_MATRIX_SIZE = 8      # 8×8 LEDs per matrix
DEFAULT_TOTAL_MATRICES = 5
DEFAULT_TILES_PER_ROW = 2    # matrices are wired two across
DEFAULT_LEDS_PER_MATRIX = DEFAULT_MATRIX_SIZE * DEFAULT_MATRIX_SIZE
DEFAULT_TOTAL_LEDS = DEFAULT_TOTAL_MATRICES * DEFAULT_LEDS_PER_MATRIX  # 320


class LayoutConfigurationError(ValueError):
    """Raised when the matrix dimensions and LED counts disagree."""


def leds_per_matrix(matrix_size: int = DEFAULT_MATRIX_SIZE) -> int:
    """LEDs on one square matrix."""
    return matrix_size * matrix_size


def total_leds(matrices: int = DEFAULT_TOTAL_MATRICES,
               matrix_size: int = DEFAULT_MATRIX_SIZE) -> int:
    """Compute total LED count for a layout."""
    return matrices * leds_per_matrix(matrix_size)


@dataclass(frozen=True)
class MatrixLayout:
    """
    Immutable description of the matrix array.

    Matrices are square tiles laid out left to right, `tiles_per_row` per row.
    LEDs are numbered matrix by matrix, row-major inside each matrix.
    """

    matrix_size: int = DEFAULT_MATRIX_SIZE
    total_matrices: int = DEFAULT_TOTAL_MATRICES
    leds_per_matrix: int = DEFAULT_LEDS_PER_MATRIX
    total_leds: int = DEFAULT_TOTAL_LEDS
    tiles_per_row: int = DEFAULT_TILES_PER_ROW
    _coordinates: Tuple[Tuple[int, int], ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        for name in ('matrix_size', 'total_matrices', 'leds_per_matrix', 'total_leds', 'tiles_per_row'):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 1:
                raise LayoutConfigurationError(f"{name} must be a positive integer, got {value!r}")

        if self.total_leds != self.total_matrices * self.leds_per_matrix:
            raise LayoutConfigurationError(
                f"total_leds ({self.total_leds}) does not match "
                f"{self.total_matrices} matrices × {self.leds_per_matrix} LEDs"
            )
        if self.leds_per_matrix != self.matrix_size * self.matrix_size:
            raise LayoutConfigurationError(
                f"leds_per_matrix ({self.leds_per_matrix}) does not match a "
                f"{self.matrix_size}×{self.matrix_size} matrix"
            )

        # frozen dataclass: cache the index → grid mapping once
        object.__setattr__(self, '_coordinates', tuple(
            self._compute_coordinate(i) for i in range(self.total_leds)
        ))

    @classmethod
    def from_dimensions(cls, matrix_size: int = DEFAULT_MATRIX_SIZE,
                        total_matrices: int = DEFAULT_TOTAL_MATRICES,
                        tiles_per_row: int = DEFAULT_TILES_PER_ROW) -> 'MatrixLayout':
        """Build a consistent layout from the matrix size and count alone."""
        return cls(
            matrix_size=matrix_size,
            total_matrices=total_matrices,
            leds_per_matrix=leds_per_matrix(matrix_size),
            total_leds=total_leds(total_matrices, matrix_size),
            tiles_per_row=tiles_per_row,
        )

    @property
    def linear_extent(self) -> int:
        """Matrix size × matrix count; bounds ripple spawn and lifetime."""
        return self.matrix_size * self.total_matrices

    @property
    def grid_width(self) -> int:
        return min(self.tiles_per_row, self.total_matrices) * self.matrix_size

    @property
    def grid_height(self) -> int:
        rows = -(-self.total_matrices // self.tiles_per_row)
        return rows * self.matrix_size

    def matrix_index(self, index: int) -> int:
        """Matrix that owns a linear LED index."""
        return index // self.leds_per_matrix

    def coordinate(self, index: int) -> Tuple[int, int]:
        """Map a linear LED index to (x, y) in grid space."""
        return self._coordinates[index]

    def coordinates(self) -> List[Tuple[int, int]]:
        return list(self._coordinates)

    def _compute_coordinate(self, index: int) -> Tuple[int, int]:
        matrix = index // self.leds_per_matrix
        matrix_x = matrix % self.tiles_per_row
        matrix_y = matrix // self.tiles_per_row
        local = index % self.leds_per_matrix
        x = local % self.matrix_size + matrix_x * self.matrix_size
        y = local // self.matrix_size + matrix_y * self.matrix_size
        return x, y
