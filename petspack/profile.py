import numpy as np
from scipy.integrate import trapezoid
from petspack.grid import Grid, Geometry


class Profile(np.ndarray):
    """
    A density profile (or weighted density, or Helmholtz energy density) on a Grid.

    Profiles behave as numpy arrays in calculations, but also carry the Grid they are discretised on, such that the
    convolutions in Convolver.py can select the transforms matching the geometry. A Profile may be a vector field
    (e.g. a vector weighted density), in which case it is odd under reflection and is transformed accordingly.

    Note: Many numpy functions return plain ndarrays, and thereby drop the grid. Wrap the result in a new Profile where
        the grid is needed.
    """
    def __new__(cls, profile, grid=None, geometry=Geometry.PLANAR, domain_size=10, is_vector_field=False):
        """
        Args:
            profile (Sized) : Values at the grid points
            grid (Grid, optional) : The grid of the values. If not supplied, a grid is made from `geometry` and
                                    `domain_size`, with as many points as `profile`.
            geometry (Geometry) : Geometry of the grid to make, if no grid is given
            domain_size (float) : Size of the grid to make, if no grid is given [Å]
            is_vector_field (bool) : Whether this profile is a vector field
        """
        obj = np.asarray(profile, dtype=float).view(cls)
        obj.grid = grid if grid is not None else Grid(len(obj), geometry, domain_size)
        obj.is_vector_field = is_vector_field
        return obj

    def __array_finalize__(self, obj):
        if obj is None: return
        self.grid = getattr(obj, 'grid', None)
        self.is_vector_field = getattr(obj, 'is_vector_field', False)

    def is_even(self):
        """Property
        Used in convolutions to determine what transforms to use
        """
        return not self.is_vector_field

    def is_odd(self):
        return not self.is_even()

    def integrate(self):
        """
        Integrate the profile over the domain, using the trapezoid rule.

        Returns:
            float : The integral (per unit area for planar geometry)
        """
        if self.grid.geometry == Geometry.PLANAR:
            f = np.asarray(self)
        else:
            f = 4 * np.pi * np.asarray(self) * self.grid.z**2
        return float(trapezoid(f, dx=self.grid.dz))

    @staticmethod
    def zeros(grid, nprofiles):
        """Constructor
        Returns:
            list[Profile] : `nprofiles` profiles of zeros on `grid`
        """
        return [Profile(np.zeros(grid.N), grid) for _ in range(nprofiles)]

    @staticmethod
    def zeros_like(profiles):
        """Constructor
        Returns:
            list[Profile] : Zero profiles on the grids of `profiles`
        """
        return [Profile(np.zeros(p.grid.N), p.grid, is_vector_field=p.is_vector_field) for p in profiles]

    @staticmethod
    def uniform(values, grid):
        """Constructor
        Constant profiles, one per value, e.g. for bulk densities.

        Args:
            values (Iterable[float]) : The values
            grid (Grid) : The grid
        Returns:
            list[Profile] : The profiles
        """
        return [Profile(np.full(grid.N, float(v)), grid) for v in values]
