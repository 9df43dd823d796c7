"""
Dispersion (attractive) contribution of the PeTS model, a first and second order perturbation on the hard sphere
reference fluid (Heier et al. 2018).

In bulk, the dispersion term is evaluated from the local densities. In the DFT functional, each density is first averaged
over a sphere of radius PSI_DFT * d_i (the weight NormTheta), and the bulk expression is evaluated from the averaged
densities.
"""
import numpy as np
from petspack.Contribution import HelmholtzContribution
from petspack.WeightFunction import NormTheta, NormTheta_diff
from petspack.hardsphere import hs_diameter, hs_diameter_derivative

# Coefficients of the perturbation integrals I1 and I2, as power series in the packing fraction
A = (0.690603404, 1.189317012, 1.265604153, -24.34554201, 93.67300357, -157.8773415, 96.93736697)
B = (0.664852128, 2.10733079, -9.597951213, -17.37871193, 30.17506222, 209.3942909, -353.2743581)

# Radius of the dispersion weight, in units of the hard sphere diameter
PSI_DFT = 1.21


def _dispersion(eta, rho1mix, rho2mix):
    """Internal
    phi = - 2 pi rho1mix I1(eta) - pi rho2mix C1(eta) I2(eta)
    """
    I1 = sum(A[k] * eta**k for k in range(len(A)))
    I2 = sum(B[k] * eta**k for k in range(len(B)))
    C1 = 1 / (1 + (8 * eta - 2 * eta**2) / (1 - eta)**4)
    return - 2 * np.pi * rho1mix * I1 - np.pi * rho2mix * C1 * I2


class DispersionMixture(HelmholtzContribution):
    """
    Dispersion contribution for any number of components. The weighted densities are the averaged densities of each
    component, indexed as n[<comp idx>].
    """
    disp_kernel_scale = PSI_DFT

    def __repr__(self):
        return f'DispersionMixture(ncomps={self.ncomps}, psi={self.disp_kernel_scale})'

    def get_characteristic_lengths(self):
        return np.asarray(hs_diameter(self.parameters, self.parameters.epsilon_k))

    def get_weights(self, T, dwdT=False):
        """Weights
        Get the weights for the dispersion term

        Args:
            T (float) : Temperature [K]
            dwdT (bool, optional) : Compute derivative wrt. T? Defaults to False.

        Returns:
            2d array of Analytical : The weights, indexed as w[<wt_idx>][<comp_idx>], where only w[i][i] is non-zero.
        """
        w = [[0 for _ in range(self.ncomps)] for _ in range(self.ncomps)]
        if dwdT is False:
            d = np.asarray(hs_diameter(self.parameters, T))
            for ci in range(self.ncomps):
                w[ci][ci] = NormTheta(d[ci] * self.disp_kernel_scale)
            return w

        d, dd_dT = hs_diameter_derivative(self.parameters, T)
        for ci in range(self.ncomps):
            w[ci][ci] = NormTheta_diff(d[ci] * self.disp_kernel_scale) * (dd_dT[ci] * self.disp_kernel_scale)
        return w

    def bulk_weighted_densities(self, rho, T):
        return [rho[i] for i in range(self.ncomps)]

    def helmholtz_energy_density(self, T, n):
        p = self.parameters
        d = hs_diameter(p, T)
        comps = range(self.ncomps)

        eta = (np.pi / 6) * sum(n[i] * d[i]**3 for i in comps)
        rho1mix = 0
        rho2mix = 0
        for i in comps:
            for j in comps:
                eps_ij = float(p.epsilon_k_ij[i][j]) / T
                sigma3_ij = float(p.sigma_ij[i][j])**3
                rho1mix = rho1mix + n[i] * n[j] * eps_ij * sigma3_ij
                rho2mix = rho2mix + n[i] * n[j] * eps_ij**2 * sigma3_ij
        return _dispersion(eta, rho1mix, rho2mix)


class DispersionPure(DispersionMixture):
    """
    Dispersion contribution for a single component, without the double sums over components.
    """

    def __init__(self, parameters):
        """
        Raises:
            ValueError : For mixtures.
        """
        if parameters.ncomps != 1:
            raise ValueError(f'DispersionPure is only valid for a single component, got {parameters.ncomps}.')
        super().__init__(parameters)

    def __repr__(self):
        return f'DispersionPure(psi={self.disp_kernel_scale})'

    def helmholtz_energy_density(self, T, n):
        p = self.parameters
        d = hs_diameter(p, T)[0]
        rho = n[0]
        eps = float(p.epsilon_k_ij[0][0]) / T
        rho2_sigma3 = rho**2 * float(p.sigma_ij[0][0])**3

        eta = (np.pi / 6) * rho * d**3
        return _dispersion(eta, rho2_sigma3 * eps, rho2_sigma3 * eps**2)
