"""
Default ideal gas contribution, used when no external ideal gas model is given to a model.

Only the translational part is included: a_id / (k_B T V) = sum_i rho_i (ln(rho_i Lambda_i^3) - 1), where Lambda_i is the
de Broglie wavelength. Any object with the same methods can be used in its place.
"""
import numpy as np
from scipy.constants import Boltzmann, Planck, Avogadro
import jax.numpy as jnp


class IdealGas:

    def __init__(self, molarweight):
        """
        Args:
            molarweight (1d array) : Molar weight of each component [g / mol]
        """
        self.molarweight = np.array(molarweight, dtype=float)
        self.molarweight.flags.writeable = False
        self.ncomps = len(self.molarweight)

    def __repr__(self):
        return f'IdealGas(molarweight={self.molarweight})'

    def de_broglie_wavelength(self, T):
        """
        Args:
            T (float) : Temperature [K]

        Returns:
            1d array : Thermal de Broglie wavelength of each component [Å]
        """
        m = jnp.asarray(self.molarweight) * 1e-3 / Avogadro # [kg / particle]
        return Planck * 1e10 / jnp.sqrt(2 * np.pi * m * Boltzmann * T)

    def helmholtz_energy_density(self, T, rho):
        """
        Args:
            T (float) : Temperature [K]
            rho (list) : Density of each component [particles / Å^3]

        Returns:
            float : Reduced ideal gas Helmholtz energy density [Å^-3]
        """
        wavelength = self.de_broglie_wavelength(T)
        return sum(rho[i] * (jnp.log(rho[i] * wavelength[i]**3) - 1) for i in range(self.ncomps))

    def subset(self, component_list):
        return IdealGas([self.molarweight[i] for i in component_list])
