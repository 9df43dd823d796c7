"""
The PeTS model, assembled from the hard sphere and dispersion contributions.

Pets is the bulk equation of state, and PetsFunctional the Helmholtz energy functional for classical DFT. Both select
the pure component variants of the contributions for a single component (when the FMT version allows it), and the
mixture variants otherwise. The models are built once and never modified: `subset` returns a new model.
"""
import warnings
from enum import IntEnum
import numpy as np
from petspack.hardsphere import FMTVersion, HardSphereMixture, HardSpherePure, hs_diameter
from petspack.dispersion import DispersionMixture, DispersionPure
from petspack.pair_potential import PairPotential
from petspack.ideal_gas import IdealGas
from petspack.profile import Profile
from petspack.kernel import gradient


class PetsOptions:
    """
    Model options.
    """

    def __init__(self, max_eta=0.5):
        """
        Args:
            max_eta (float) : Packing fraction used to estimate the maximum density, see `compute_max_density`.
        """
        self.max_eta = max_eta

    def __repr__(self):
        return f'PetsOptions(max_eta={self.max_eta})'


class MoleculeShape(IntEnum):
    Spherical = 1
    NonSpherical = 2


def select_contributions(parameters, fmt_version=FMTVersion.WhiteBear):
    """
    Pick the Helmholtz energy contributions: The pure component variants if there is a single component and the
    FMT version is WhiteBear or AntiSymWhiteBear, and the mixture variants otherwise.

    Args:
        parameters (PetsParameters) : The parameter set
        fmt_version (FMTVersion) : The FMT version of the hard sphere contribution

    Returns:
        list[HelmholtzContribution] : [hard sphere, dispersion]
    """
    fmt_version = FMTVersion(fmt_version)
    if (parameters.ncomps == 1) and (fmt_version in (FMTVersion.WhiteBear, FMTVersion.AntiSymWhiteBear)):
        return [HardSpherePure(parameters, fmt_version), DispersionPure(parameters)]
    return [HardSphereMixture(parameters, fmt_version), DispersionMixture(parameters)]


class Pets:
    """
    PeTS equation of state. Holds the parameters and the Helmholtz energy contributions, and evaluates the residual
    Helmholtz energy (and derived properties) of homogeneous phases.

    Units: Temperature [K], densities [particles / Å^3], volume [Å^3], amounts [particles]. Helmholtz energies are
    reduced by k_B T, such that e.g. the residual pressure is returned as p_res / (k_B T) [Å^-3].
    """

    def __init__(self, parameters, options=None, ideal_gas=None, fmt_version=FMTVersion.WhiteBear):
        """
        Args:
            parameters (PetsParameters) : The parameter set
            options (PetsOptions, optional) : Model options
            ideal_gas (optional) : Ideal gas model, defaults to IdealGas (translational contribution only)
            fmt_version (FMTVersion, optional) : Version of FMT for the hard sphere contribution. Defaults to WhiteBear
        """
        self.fmt_version = FMTVersion(fmt_version)
        self.parameters = parameters
        self.ncomps = parameters.ncomps
        self.options = PetsOptions() if options is None else options
        self.ideal_gas = IdealGas(parameters.molarweight) if ideal_gas is None else ideal_gas
        self.contributions = select_contributions(parameters, self.fmt_version)

    def __repr__(self):
        return f'{type(self).__name__}({", ".join(self.parameters.component_names())}, ' \
               f'contributions={self.contributions})'

    @property
    def molar_weight(self):
        """
        Molar weight of each component [g / mol]
        """
        return self.parameters.molarweight

    def subset(self, component_list):
        """Utility
        Create a new model, containing only the components in `component_list`, with the same options and FMT version.

        Args:
            component_list (list[int]) : Component indices (zero-indexed)
        """
        return Pets(self.parameters.subset(component_list), options=self.options,
                    ideal_gas=self.ideal_gas.subset(component_list), fmt_version=self.fmt_version)

    def compute_max_density(self, moles):
        """
        Estimate of the maximum density at the composition `moles`, from the packing fraction `max_eta`

            rho_max = max_eta * sum(moles) / ((pi / 6) * sum(sigma_i^3 * moles_i))

        Args:
            moles (1d array) : Amount of each component (any unit)

        Returns:
            float : Maximum density [particles / Å^3]
        """
        moles = np.asarray(moles, dtype=float)
        return self.options.max_eta * np.sum(moles) / ((np.pi / 6) * np.sum(self.parameters.sigma**3 * moles))

    def check_max_density(self, rho):
        """Utility
        Warn if the total density exceeds `compute_max_density`. Only advisory, densities above the maximum are not
        rejected.

        Args:
            rho (1d array) : Density of each component [particles / Å^3]
        """
        rho_max = self.compute_max_density(rho)
        if np.sum(rho) > rho_max:
            warnings.warn(f'Total density ({np.sum(rho)} / Å^3) exceeds the maximum density ({rho_max} / Å^3) '
                          f'at max_eta = {self.options.max_eta}.', RuntimeWarning, stacklevel=2)

    def validate_composition(self, z):
        """Internal
        Check that the composition `z` has length equal to number of components, and sums to one.

        Args:
            z (Iterable(float)) : The composition

        Raises:
            IndexError : If number of fractions does not match number of components.
            ValueError : If fractions do not sum to unity.
        """
        if len(z) != self.ncomps:
            raise IndexError(f'Number of mole fractions ({len(z)}) did not match number of components ({self.ncomps}).')
        elif abs(sum(z) - 1) > 1e-12:
            raise ValueError(f'Mole fractions did not sum to unity but to {sum(z)}.')

    def packing_fraction(self, T, rho):
        """
        Args:
            T (float) : Temperature [K]
            rho (1d array) : Density of each component [particles / Å^3]

        Returns:
            float : eta = (pi / 6) sum(rho_i d_i^3)
        """
        d = hs_diameter(self.parameters, T)
        return float((np.pi / 6) * sum(rho[i] * d[i]**3 for i in range(self.ncomps)))

    def residual_helmholtz_energy_density(self, T, rho):
        """
        Sum of the contributions.

        Args:
            T (float) : Temperature [K]
            rho (1d array) : Density of each component [particles / Å^3]

        Returns:
            float : Reduced residual Helmholtz energy density a_res / (k_B T V) [Å^-3]
        """
        return float(self._residual_helmholtz_energy_density(T, rho))

    def _residual_helmholtz_energy_density(self, T, rho):
        """Internal
        See: residual_helmholtz_energy_density. Traceable by jax in both `T` and `rho`.
        """
        return sum(c.bulk_helmholtz_energy_density(T, rho) for c in self.contributions)

    def residual_helmholtz_energy(self, T, V, n):
        """
        Args:
            T (float) : Temperature [K]
            V (float) : Volume [Å^3]
            n (1d array) : Number of particles of each component

        Returns:
            float : Reduced residual Helmholtz energy a_res / (k_B T)
        """
        rho = [n[i] / V for i in range(self.ncomps)]
        return V * self.residual_helmholtz_energy_density(T, rho)

    def residual_chemical_potential(self, T, rho):
        """
        Args:
            T (float) : Temperature [K]
            rho (1d array) : Density of each component [particles / Å^3]

        Returns:
            1d array : Reduced residual chemical potential mu_res / (k_B T) of each component
        """
        _, mu = gradient(lambda r: self._residual_helmholtz_energy_density(T, r), rho)
        return mu

    def residual_pressure(self, T, rho):
        """
        p_res = sum(rho_i mu_res_i) - a_res / V

        Args:
            T (float) : Temperature [K]
            rho (1d array) : Density of each component [particles / Å^3]

        Returns:
            float : Reduced residual pressure p_res / (k_B T) [Å^-3]
        """
        phi, mu = gradient(lambda r: self._residual_helmholtz_energy_density(T, r), rho)
        return float(np.dot(rho, mu) - phi)


class PetsFunctional(Pets):
    """
    PeTS Helmholtz energy functional, for classical DFT. In addition to the equation of state properties, exposes the
    weights, weighted densities and Helmholtz energy densities of density profiles, and the fluid properties used to
    set up external potentials (molecule shape, segment numbers, fluid-fluid sigma and epsilon, pair potential).
    """

    def __init__(self, parameters, fmt_version=FMTVersion.WhiteBear, options=None, ideal_gas=None):
        """
        Args:
            parameters (PetsParameters) : The parameter set
            fmt_version (FMTVersion, optional) : Version of FMT for the hard sphere contribution. Defaults to WhiteBear
            options (PetsOptions, optional) : Model options
            ideal_gas (optional) : Ideal gas model, defaults to IdealGas (translational contribution only)
        """
        super().__init__(parameters, options=options, ideal_gas=ideal_gas, fmt_version=fmt_version)
        self.molecule_shape = MoleculeShape.Spherical
        self.pair_potential = PairPotential(parameters)

    @staticmethod
    def new_full(parameters, fmt_version):
        """Constructor
        Functional with a given FMT version and default options.
        """
        return PetsFunctional(parameters, fmt_version=fmt_version)

    def __repr__(self):
        return f'PetsFunctional({", ".join(self.parameters.component_names())}, fmt_version={self.fmt_version.name}, ' \
               f'contributions={self.contributions})'

    def subset(self, component_list):
        """Utility
        See: Pets.subset. The FMT version is kept.
        """
        return PetsFunctional(self.parameters.subset(component_list), fmt_version=self.fmt_version,
                              options=self.options, ideal_gas=self.ideal_gas.subset(component_list))

    @property
    def m(self):
        """
        Number of segments of each component (always one)
        """
        return np.ones(self.ncomps)

    @property
    def sigma_ff(self):
        """
        Fluid-fluid segment diameters [Å]
        """
        return self.parameters.sigma

    @property
    def epsilon_k_ff(self):
        """
        Fluid-fluid energy parameters [K]
        """
        return self.parameters.epsilon_k

    def get_characteristic_lengths(self):
        return self.contributions[0].get_characteristic_lengths()

    def get_weights(self, T, dwdT=False):
        """Weights
        The weights of all contributions, concatenated as w[<weight idx>][<comp idx>], with the hard sphere weights
        first.

        Args:
            T (float) : Temperature [K]
            dwdT (bool) : Return temperature derivatives instead
        """
        weights = []
        for c in self.contributions:
            weights.extend(c.get_weights(T, dwdT=dwdT))
        return weights

    def get_weighted_densities(self, rho, T, bulk=False):
        """Weighted density
        The weighted densities of all contributions, ordered as the weights (see: get_weights).

        Args:
            rho (list[Profile] or list[float]) : Density of each component [particles / Å^3]
            T (float) : Temperature [K]
            bulk (bool) : If True, `rho` is a list[float] of bulk densities
        """
        n = []
        for c in self.contributions:
            n.extend(c.get_weighted_densities(rho, T, bulk=bulk))
        return n

    def reduced_helmholtz_energy_density(self, rho, T, dphidn=False, dphidrho=False, dphidT=False, bulk=False):
        """Helmholtz contribution
        Sum of the residual reduced Helmholtz energy densities of the contributions, and optionally one derivative.
        See: HelmholtzContribution.reduced_helmholtz_energy_density

        Args:
            rho (list[Profile] or list[float]) : Density of each component [particles / Å^3]
            T (float) : Temperature [K]
            dphidn (bool) : Also return derivatives wrt. each weighted density, ordered as get_weighted_densities
            dphidrho (bool) : Also return derivatives wrt. each component density
            dphidT (bool) : Also return derivative wrt. temperature
            bulk (bool) : If True, `rho` is a list[float] of bulk densities

        Returns:
            Profile or float : Reduced Helmholtz energy density [Å^-3]
            Optional list or 1d array : The derivatives
        """
        if sum((dphidn, dphidrho, dphidT)) > 1:
            raise ValueError('Only one of dphidn, dphidrho and dphidT can be computed at a time.')

        flags = dict(dphidn=dphidn, dphidrho=dphidrho, dphidT=dphidT, bulk=bulk)
        results = [c.reduced_helmholtz_energy_density(rho, T, **flags) for c in self.contributions]

        if (dphidn is False) and (dphidrho is False) and (dphidT is False):
            phi = sum(results)
            return Profile(phi, rho[0].grid) if bulk is False else phi

        phi = sum(r[0] for r in results)
        if bulk is False:
            phi = Profile(phi, rho[0].grid)

        if dphidn is True:
            dphidn = []
            for _, d in results:
                dphidn.extend(d)
            return phi, dphidn if bulk is False else np.array(dphidn)

        if dphidrho is True:
            if bulk is True:
                return phi, sum(np.asarray(r[1]) for r in results)
            dphidrho = Profile.zeros_like(rho)
            for _, d in results:
                for ci in range(self.ncomps):
                    dphidrho[ci] += d[ci]
            return phi, dphidrho

        dphidT = sum(r[1] for r in results)
        return phi, Profile(dphidT, rho[0].grid) if bulk is False else dphidT
