"""
Hard sphere contribution, from fundamental measure theory (FMT).

The FMT functionals are written as plain functions of the six weighted densities (n0, n1, n2, n3, nv1, nv2), against
jax.numpy, such that the same expressions give the bulk equation of state, the DFT functional and all their derivatives.

Two contributions are implemented: HardSphereMixture, with the full set of weights for any number of components and any
FMTVersion, and HardSpherePure, that only uses (n2, n3, nv2) and recovers the remaining weighted densities from the
diameter of the single component.
"""
from enum import IntEnum
import numpy as np
import jax.numpy as jnp
from petspack.Contribution import HelmholtzContribution, WEIGHTED_DENSITY_OFFSET
from petspack.WeightFunction import (Delta, Delta_diff, Heaviside, Heaviside_diff, DeltaVec, DeltaVec_diff,
                                     get_FMT_weights, get_FMT_weight_derivatives)
from petspack.kernel import first_derivative

# Temperature dependent hard sphere diameter of the PeTS model
HS_DIAMETER_A = 0.127112544
HS_DIAMETER_B = 3.052785558

# Below this packing fraction, the White Bear type expressions are evaluated from their Taylor series in n3
N3_SERIES_LIMIT = 1e-5


class FMTVersion(IntEnum):
    WhiteBear = 1
    AntiSymWhiteBear = 2
    Rosenfeld = 3
    WhiteBearMarkII = 4


def hs_diameter(parameters, T):
    """
    d_i(T) = sigma_i (1 - 0.127112544 exp(-3.052785558 epsilon_k_i / T))

    Args:
        parameters (PetsParameters) : The parameter set
        T (float or array) : Temperature [K]

    Returns:
        1d array : Hard sphere diameter of each component [Å]
    """
    sigma, epsilon_k = jnp.asarray(parameters.sigma), jnp.asarray(parameters.epsilon_k)
    return sigma * (1 - HS_DIAMETER_A * jnp.exp(- HS_DIAMETER_B * (epsilon_k / T)))


def hs_diameter_derivative(parameters, T):
    """
    Returns:
        tuple(1d array, 1d array) : Hard sphere diameters [Å] and their temperature derivatives [Å / K]
    """
    d, dd_dT = first_derivative(lambda t: hs_diameter(parameters, t), T)
    return np.asarray(d), np.asarray(dd_dT)


def _safe_n3(n3):
    """Internal
    Returns:
        mask, n3_safe : Where n3 is below N3_SERIES_LIMIT, and a copy of n3 where those points are replaced by 0.5,
                        such that the closed form expressions and their derivatives are finite everywhere.
    """
    small = n3 < N3_SERIES_LIMIT
    return small, jnp.where(small, 0.5, n3)


def _white_bear_f3(n3):
    """Internal
    The n3-dependence of the third White Bear term, (n3 + (1 - n3)^2 ln(1 - n3)) / (36 pi n3^2 (1 - n3)^2)
    """
    small, n3_safe = _safe_n3(n3)
    exact = (n3_safe + (1 - n3_safe)**2 * jnp.log1p(- n3_safe)) / (36 * np.pi * n3_safe**2 * (1 - n3_safe)**2)
    series = (1 / 24 + 2 * n3 / 27 + 5 * n3**2 / 48 + 2 * n3**3 / 15) / np.pi
    return jnp.where(small, series, exact)


def rosenfeld(n0, n1, n2, n3, nv1, nv2):
    """
    Rosenfeld (1989) functional
    """
    return - n0 * jnp.log1p(- n3) + (n1 * n2 - nv1 * nv2) / (1 - n3) \
        + (n2**3 - 3 * n2 * nv2 * nv2) / (24 * np.pi * (1 - n3)**2)


def white_bear(n0, n1, n2, n3, nv1, nv2):
    """
    White Bear functional (Roth et al. 2002, Yu and Wu 2002)
    """
    return - n0 * jnp.log1p(- n3) + (n1 * n2 - nv1 * nv2) / (1 - n3) \
        + (n2**3 - 3 * n2 * nv2 * nv2) * _white_bear_f3(n3)


def antisym_white_bear(n0, n1, n2, n3, nv1, nv2):
    """
    White Bear functional, with the third term antisymmetrised in xi = |nv2| / n2 (Rosenfeld et al. 1997)
    """
    xi2 = nv2 * nv2 / (n2 * n2)
    xi2 = jnp.where(xi2 < 1, xi2, 1.)
    return - n0 * jnp.log1p(- n3) + (n1 * n2 - nv1 * nv2) / (1 - n3) \
        + n2**3 * (1 - xi2)**3 * _white_bear_f3(n3)


def white_bear_mark_ii(n0, n1, n2, n3, nv1, nv2):
    """
    White Bear Mark II functional (Hansen-Goos and Roth 2006)
    """
    small, n3_safe = _safe_n3(n3)
    phi2 = jnp.where(small, n3**2 / 3 + n3**3 / 6 + n3**4 / 10,
                     (2 * n3_safe - n3_safe**2 + 2 * (1 - n3_safe) * jnp.log1p(- n3_safe)) / n3_safe)
    phi3 = jnp.where(small, 4 * n3 / 3 - n3**2 / 6 - n3**3 / 15,
                     (2 * n3_safe - 3 * n3_safe**2 + 2 * n3_safe**3 + 2 * (1 - n3_safe)**2 * jnp.log1p(- n3_safe))
                     / n3_safe**2)
    return - n0 * jnp.log1p(- n3) + (n1 * n2 - nv1 * nv2) * (1 + phi2 / 3) / (1 - n3) \
        + (n2**3 - 3 * n2 * nv2 * nv2) * (1 - phi3 / 3) / (24 * np.pi * (1 - n3)**2)


FMT_FUNCTIONALS = {FMTVersion.WhiteBear: white_bear,
                   FMTVersion.AntiSymWhiteBear: antisym_white_bear,
                   FMTVersion.Rosenfeld: rosenfeld,
                   FMTVersion.WhiteBearMarkII: white_bear_mark_ii}


class HardSphereMixture(HelmholtzContribution):
    """
    FMT hard sphere contribution for any number of components, with temperature dependent diameters.
    """

    def __init__(self, parameters, fmt_version=FMTVersion.WhiteBear):
        """
        Args:
            parameters (PetsParameters) : The parameter set
            fmt_version (FMTVersion) : The FMT functional to use
        """
        super().__init__(parameters)
        self.fmt_version = FMTVersion(fmt_version)
        self._phi = FMT_FUNCTIONALS[self.fmt_version]

    def __repr__(self):
        return f'HardSphereMixture({self.fmt_version.name}, ncomps={self.ncomps})'

    def get_characteristic_lengths(self):
        return np.asarray(hs_diameter(self.parameters, self.parameters.epsilon_k))

    def get_weights(self, T, dwdT=False):
        """Weights
        FMT weights, indexed as w[<weight idx>][<comp idx>], with the weights ordered as (w0, w1, w2, w3, wv1, wv2).

        Args:
            T (float) : Temperature [K]
            dwdT (bool) : Return the temperature derivatives instead
        """
        if dwdT is False:
            return get_FMT_weights(np.asarray(hs_diameter(self.parameters, T)) / 2)

        d, dd_dT = hs_diameter_derivative(self.parameters, T)
        dwdT = get_FMT_weight_derivatives(d / 2) # this is dwdR, multiplying with dRdT in the following loop.
        for wi in range(len(dwdT)):
            for ci in range(self.ncomps):
                dwdT[wi][ci] = dwdT[wi][ci] * (dd_dT[ci] / 2)
        return dwdT

    def bulk_weighted_densities(self, rho, T):
        R = hs_diameter(self.parameters, T) / 2
        comps = range(self.ncomps)
        n0 = sum(rho[i] for i in comps)
        n1 = sum(rho[i] * R[i] for i in comps)
        n2 = sum(4 * np.pi * rho[i] * R[i]**2 for i in comps)
        n3 = sum((4 / 3) * np.pi * rho[i] * R[i]**3 for i in comps)
        return [n0, n1, n2, n3, 0., 0.]

    def helmholtz_energy_density(self, T, n):
        return self._phi(*n)


class HardSpherePure(HelmholtzContribution):
    """
    FMT hard sphere contribution for a single component, White Bear and anti-symmetrised White Bear only.

    Only (n2, n3, nv2) are computed by convolution, the remaining weighted densities follow from
        n0 = n2 / (pi d^2), n1 = n2 / (2 pi d), nv1 = nv2 / (2 pi d)
    In bulk, the contribution reduces to the Carnahan-Starling expression.
    """

    def __init__(self, parameters, fmt_version=FMTVersion.WhiteBear):
        """
        Args:
            parameters (PetsParameters) : Parameters for a single component
            fmt_version (FMTVersion) : WhiteBear or AntiSymWhiteBear

        Raises:
            ValueError : For mixtures, and for other versions of FMT.
        """
        if parameters.ncomps != 1:
            raise ValueError(f'HardSpherePure is only valid for a single component, got {parameters.ncomps}.')
        fmt_version = FMTVersion(fmt_version)
        if fmt_version not in (FMTVersion.WhiteBear, FMTVersion.AntiSymWhiteBear):
            raise ValueError(f'HardSpherePure is not implemented for {fmt_version.name}, '
                             f'use HardSphereMixture instead.')
        super().__init__(parameters)
        self.fmt_version = fmt_version
        self._phi = FMT_FUNCTIONALS[self.fmt_version]

    def __repr__(self):
        return f'HardSpherePure({self.fmt_version.name})'

    def get_characteristic_lengths(self):
        return np.asarray(hs_diameter(self.parameters, self.parameters.epsilon_k))

    def get_weights(self, T, dwdT=False):
        """Weights
        The weights (w2, w3, wv2), indexed as w[<weight idx>][0].
        """
        if dwdT is False:
            R = float(hs_diameter(self.parameters, T)[0]) / 2
            return [[Delta(R)], [Heaviside(R)], [DeltaVec(R)]]

        d, dd_dT = hs_diameter_derivative(self.parameters, T)
        R, dRdT = d[0] / 2, dd_dT[0] / 2
        return [[Delta_diff(R) * dRdT], [Heaviside_diff(R) * dRdT], [DeltaVec_diff(R) * dRdT]]

    def bulk_weighted_densities(self, rho, T):
        R = hs_diameter(self.parameters, T)[0] / 2
        return [4 * np.pi * R**2 * rho[0], (4 / 3) * np.pi * R**3 * rho[0], 0.]

    def _phi_from_n2(self, T, n, offset):
        """Internal
        Evaluate the functional, with (n0, n1, nv1) recovered from (n2, nv2). `offset` is removed from n2 before
        scaling, and added to n0 and n1 after.
        """
        d = hs_diameter(self.parameters, T)[0]
        n2, n3, nv2 = n
        n0 = (n2 - offset) / (np.pi * d**2) + offset
        n1 = (n2 - offset) / (2 * np.pi * d) + offset
        nv1 = nv2 / (2 * np.pi * d)
        return self._phi(n0, n1, n2, n3, nv1, nv2)

    def helmholtz_energy_density(self, T, n):
        return self._phi_from_n2(T, n, 0.)

    def profile_helmholtz_energy_density(self, T, n):
        # Convolved n0 and n1 of HardSphereMixture carry the offset once, not scaled by 1 / (pi d^2)
        return self._phi_from_n2(T, n, WEIGHTED_DENSITY_OFFSET)

    def bulk_helmholtz_energy_density(self, T, rho):
        d = hs_diameter(self.parameters, T)[0]
        eta = (np.pi / 6) * rho[0] * d**3
        return rho[0] * (4 * eta - 3 * eta**2) / (1 - eta)**2
