"""
The Grid describes the discretisation used by the external DFT runtime: the geometry of the domain, and the real- and
fourier-space points that the convolutions in Convolver.py are evaluated on.

petspack never builds grids on its own initiative, the runtime hands over density profiles (see profile.py) that carry
their grid. Code that needs geometry-specific behaviour should go through a Grid method (e.g. Grid.volume) rather than
branching on Grid.geometry.
"""
from enum import IntEnum
import numpy as np


class Geometry(IntEnum):
    PLANAR = 1
    SPHERICAL = 3


class Grid:
    """
    Cell-centred spacial discretisation, determined by a domain size, number of gridpoints and geometry.

    The fourier-space grids for the cosine- and sine transforms are computed upon initialisation.
    """

    def __init__(self, n_grid, geometry, domain_size, domain_start=0):
        """
        Args:
            n_grid (int) : Number of grid points
            geometry (Geometry) : Symmetry of the domain
            domain_size (float) : Width (planar) or radius (spherical) of the domain [Å]
            domain_start (float, optional) : Position of the start of the domain [Å]

        Raises:
            NotImplementedError : For unsupported geometries.
        """
        if geometry not in (Geometry.PLANAR, Geometry.SPHERICAL):
            raise NotImplementedError(f'Grid is not implemented for geometry : {geometry}')

        self.N = n_grid
        self.L = domain_size
        self.geometry = geometry
        self.domain_start = domain_start
        self.domain_end = domain_start + domain_size

        self.dz = domain_size / n_grid
        self.z = np.linspace(self.domain_start + self.dz / 2, self.domain_end - self.dz / 2, n_grid)

        # Frequencies of the type-II cosine and sine transforms over the domain
        self.k_cos = np.arange(0, n_grid) / (2 * domain_size)
        self.k_sin = np.arange(1, n_grid + 1) / (2 * domain_size)

    def volume(self, z=None):
        """
        Volume of the grid, or of the part of the grid bounded by the position `z`.

        Args:
            z (float, optional) : End point of the sub-domain.

        Returns:
            float : The volume [Å^3] (planar: per unit area [Å])
        """
        end = self.domain_end if z is None else z
        if self.geometry == Geometry.PLANAR:
            return end - self.domain_start
        return (4 / 3) * np.pi * (end**3 - self.domain_start**3)

    def area(self, z):
        """
        Area of the dividing surface at position `z` (unity for planar geometry).
        """
        if self.geometry == Geometry.PLANAR:
            return 1
        return 4 * np.pi * z**2

    def __eq__(self, other):
        if not isinstance(other, Grid):
            return False
        return (self.N, self.L, self.geometry, self.domain_start) == (other.N, other.L, other.geometry, other.domain_start)

    def __hash__(self):
        return hash((self.N, self.L, self.geometry, self.domain_start))

    def __repr__(self):
        return f'Grid(N={self.N}, L={self.L}, geometry={self.geometry.name}, domain_start={self.domain_start})'


class PlanarGrid(Grid):

    def __init__(self, n_grid, domain_size, domain_start=0):
        super().__init__(n_grid, Geometry.PLANAR, domain_size, domain_start=domain_start)


class SphericalGrid(Grid):

    def __init__(self, n_grid, domain_size, domain_start=0):
        super().__init__(n_grid, Geometry.SPHERICAL, domain_size, domain_start=domain_start)
