"""
The interface shared by the Helmholtz energy contributions (hard sphere and dispersion).

A contribution defines a set of weight functions, and a (reduced) Helmholtz energy density as a function of the
temperature and the weighted densities. Everything else (convolutions, bulk evaluation and the derivatives used by
equation of state and DFT runtimes) is implemented once, here, by differentiating the energy density with jax
(see kernel.py).

Units: Densities are in [particles / Å^3], temperatures in [K], and reduced Helmholtz energy densities are
a / (k_B T V) in [Å^-3].
"""
import abc
import numpy as np
from petspack.Convolver import convolve_ad
from petspack.WeightFunction import Analytical
from petspack.profile import Profile
from petspack.kernel import first_derivative, gradient, pointwise_gradient

# Added to scalar weighted densities on profiles, such that no weighted density is exactly zero
WEIGHTED_DENSITY_OFFSET = 1e-12


class HelmholtzContribution(metaclass=abc.ABCMeta):

    def __init__(self, parameters):
        """Internal
        Args:
            parameters (PetsParameters) : The parameter set
        """
        self.parameters = parameters
        self.ncomps = parameters.ncomps

    @abc.abstractmethod
    def __repr__(self):
        pass

    @abc.abstractmethod
    def get_weights(self, T, dwdT=False):
        """Weights
        Args:
            T (float) : Temperature [K]
            dwdT (bool) : Return the temperature derivatives of the weights instead

        Returns:
            2D array [Analytical] : Weight functions, indexed as w[<weight idx>][<comp idx>], 0 for no weight.
        """
        pass

    @abc.abstractmethod
    def bulk_weighted_densities(self, rho, T):
        """Weighted density
        Weighted densities of a homogeneous system, traceable by jax in both `rho` and `T`.

        Args:
            rho (list) : Density of each component [particles / Å^3]
            T (float) : Temperature [K]

        Returns:
            list : Weighted densities, indexed as n[<weight idx>]
        """
        pass

    @abc.abstractmethod
    def helmholtz_energy_density(self, T, n):
        """Helmholtz contribution
        The reduced Helmholtz energy density as a function of the weighted densities. Written against jax.numpy, such
        that `T` and `n` may be floats, arrays or jax tracers.

        Args:
            T (float) : Temperature [K]
            n (list) : Weighted densities, indexed as n[<weight idx>]

        Returns:
            float or array : The reduced Helmholtz energy density [Å^-3]
        """
        pass

    def profile_helmholtz_energy_density(self, T, n):
        """Helmholtz contribution
        The reduced Helmholtz energy density of convolved weighted densities, that carry WEIGHTED_DENSITY_OFFSET (see:
        get_weighted_densities). Contributions that derive weighted densities from other weighted densities override
        this, to keep the offset consistent.

        Args:
            T (float) : Temperature [K]
            n (list[ndarray]) : Weighted densities, indexed as n[<weight idx>][<grid idx>]
        """
        return self.helmholtz_energy_density(T, n)

    def bulk_helmholtz_energy_density(self, T, rho):
        """Helmholtz contribution
        The reduced Helmholtz energy density of a homogeneous system. Contributions with a closed form for the bulk
        override this.

        Args:
            T (float) : Temperature [K]
            rho (list) : Density of each component [particles / Å^3]
        """
        return self.helmholtz_energy_density(T, self.bulk_weighted_densities(rho, T))

    @abc.abstractmethod
    def get_characteristic_lengths(self):
        """Utility
        Returns:
            1d array : Characteristic length of each component [Å]
        """
        pass

    def get_weighted_densities(self, rho, T, bulk=False, dndT=False):
        """Weighted density
        Compute the weighted densities, by convolving each density profile with the corresponding weights.

        Args:
            rho (list[Profile] or list[float]) : Density of each component [particles / Å^3]
            T (float) : Temperature [K]
            bulk (bool) : If True, take a list[float] for rho, and return a list[float]
            dndT (bool) : If True, return the temperature derivatives of the weighted densities (profiles only)

        Returns:
            list[Profile] : Weighted densities, indexed as n[<weight idx>][<grid idx>]
        """
        if bulk is True:
            rho = np.asarray(rho, dtype=float)
            return [float(n_alpha) for n_alpha in self.bulk_weighted_densities(rho, T)]

        weights = self.get_weights(T, dwdT=dndT)
        grid = rho[0].grid
        n = []
        for comp_weights in weights:
            n_alpha = np.zeros(grid.N)
            for rho_i, w in zip(rho, comp_weights):
                n_alpha += convolve_ad(w, rho_i)
            is_vector = any(isinstance(w, Analytical) and w.is_odd() for w in comp_weights)
            if (dndT is False) and (is_vector is False):
                n_alpha += WEIGHTED_DENSITY_OFFSET
            n.append(Profile(n_alpha, grid, is_vector_field=is_vector))
        return n

    def reduced_helmholtz_energy_density(self, rho, T, dphidn=False, dphidrho=False, dphidT=False, bulk=False):
        """Helmholtz contribution
        Compute the reduced Helmholtz energy density, and optionally one of its derivatives.

        Args:
            rho (list[Profile] or list[float]) : Density of each component [particles / Å^3]
            T (float) : Temperature [K]
            dphidn (bool) : Also return derivatives wrt. each weighted density
            dphidrho (bool) : Also return derivatives wrt. each component density (functional derivatives on profiles)
            dphidT (bool) : Also return derivative wrt. temperature
            bulk (bool) : If True, `rho` is a list[float] of bulk densities

        Returns:
            Profile or float : Reduced Helmholtz energy density [Å^-3]
            Optional list[Profile] or 1d array : The derivatives

        Raises:
            ValueError : If more than one derivative is requested.
        """
        if sum((dphidn, dphidrho, dphidT)) > 1:
            raise ValueError('Only one of dphidn, dphidrho and dphidT can be computed at a time.')

        if bulk is True:
            return self._bulk_reduced_helmholtz_energy_density(rho, T, dphidn, dphidrho, dphidT)

        grid = rho[0].grid
        n = self.get_weighted_densities(rho, T)
        n_arr = [np.asarray(n_alpha) for n_alpha in n]

        if (dphidn is False) and (dphidrho is False) and (dphidT is False):
            return Profile(np.asarray(self.profile_helmholtz_energy_density(T, n_arr)), grid)

        # phi is local in the weighted densities, so the pullback of ones gives dphi / dn_alpha at every point
        phi, dphidn_arr = pointwise_gradient(lambda *n_dual: self.profile_helmholtz_energy_density(T, list(n_dual)),
                                             n_arr)
        phi = Profile(phi, grid)

        if dphidn is True:
            return phi, [Profile(d, grid, is_vector_field=n_alpha.is_vector_field) for d, n_alpha in zip(dphidn_arr, n)]

        if dphidrho is True:
            weights = self.get_weights(T)
            dphidrho = Profile.zeros_like(rho)
            for wi, comp_weights in enumerate(weights):
                dphidn_profile = Profile(dphidn_arr[wi], grid, is_vector_field=n[wi].is_vector_field)
                for ci, w in enumerate(comp_weights):
                    if not isinstance(w, Analytical):
                        continue
                    # Vector weights are odd, w(-r) = -w(r)
                    dphidrho[ci] += convolve_ad(w, dphidn_profile) * (-1 if w.is_odd() else 1)
            return phi, dphidrho

        # Explicit temperature dependence at fixed weighted densities, plus the dependence through the weights
        _, dphidT_n = first_derivative(lambda t: self.profile_helmholtz_energy_density(t, n_arr), T)
        dndT = self.get_weighted_densities(rho, T, dndT=True)
        dphidT = np.asarray(dphidT_n) + np.zeros(grid.N)
        for dphidn_alpha, dn_alpha_dT in zip(dphidn_arr, dndT):
            dphidT += dphidn_alpha * np.asarray(dn_alpha_dT)
        return phi, Profile(dphidT, grid)

    def _bulk_reduced_helmholtz_energy_density(self, rho, T, dphidn, dphidrho, dphidT):
        """Internal
        See: reduced_helmholtz_energy_density
        """
        rho = np.atleast_1d(np.asarray(rho, dtype=float))
        if dphidn is True:
            n = [float(n_alpha) for n_alpha in self.bulk_weighted_densities(rho, T)]
            return gradient(lambda n_dual: self.helmholtz_energy_density(T, n_dual), n)
        if dphidrho is True:
            return gradient(lambda rho_dual: self.bulk_helmholtz_energy_density(T, rho_dual), rho)
        if dphidT is True:
            phi, dphidT = first_derivative(lambda t: self.bulk_helmholtz_energy_density(t, rho), T)
            return float(phi), float(dphidT)
        return float(self.bulk_helmholtz_energy_density(T, rho))
