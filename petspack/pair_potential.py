"""
The Lennard-Jones potential truncated and shifted at r_c = 2.5 sigma, which is the pair potential the PeTS model
describes:

    u(r) = 4 epsilon [(sigma / r)^12 - (sigma / r)^6] - u_LJ(r_c)    for r <= r_c
    u(r) = 0                                                         for r > r_c

Energies are divided by Boltzmanns constant, i.e. given in [K].
"""
import numpy as np

CUTOFF = 2.5


def lennard_jones(r, sigma, epsilon_k):
    """
    Untruncated Lennard-Jones potential [K]

    Args:
        r (float or ndarray) : Distance [Å]
        sigma (float) : Segment diameter [Å]
        epsilon_k (float) : Energy parameter [K]
    """
    s6 = (sigma / r)**6
    return 4 * epsilon_k * (s6**2 - s6)


class PairPotential:
    """
    Truncated and shifted Lennard-Jones potential for each component of a parameter set. The cutoff radii and the
    shifts are computed once, upon initialisation.
    """

    def __init__(self, parameters, cutoff=CUTOFF):
        """
        Args:
            parameters (PetsParameters) : The parameter set
            cutoff (float, optional) : Cutoff radius, in units of sigma. Defaults to 2.5
        """
        self.parameters = parameters
        self.cutoff = cutoff
        self.r_cut = parameters.sigma * cutoff
        self.u_cut = lennard_jones(self.r_cut, parameters.sigma, parameters.epsilon_k)
        self.r_cut.flags.writeable = False
        self.u_cut.flags.writeable = False

    def __repr__(self):
        return f'PairPotential(cutoff={self.cutoff}, r_cut={self.r_cut})'

    def __call__(self, r):
        """
        Args:
            r (1d array) : Distances [Å]

        Returns:
            2d array : Interaction energy [K], indexed as u[<comp idx>][<r idx>]
        """
        r = np.atleast_1d(np.asarray(r, dtype=float))
        return np.array([self.pair_potential(i, r) for i in range(self.parameters.ncomps)])

    def pair_potential(self, i, r, j=None):
        """Utility
        Evaluate the pair potential of component `i`, or (if `j` is given) the cross interaction between component
        `i` and `j`, using sigma_ij, epsilon_k_ij and the cutoff cutoff * sigma_ij.

        Args:
            i (int) : Component index
            r (float or ndarray) : Distance [Å]
            j (int, optional) : Component index

        Returns:
            float or ndarray : Interaction energy [K]
        """
        if j is None:
            sigma = self.parameters.sigma[i]
            epsilon_k = self.parameters.epsilon_k[i]
            r_cut, u_cut = self.r_cut[i], self.u_cut[i]
        else:
            sigma = self.parameters.sigma_ij[i][j]
            epsilon_k = self.parameters.epsilon_k_ij[i][j]
            r_cut = sigma * self.cutoff
            u_cut = lennard_jones(r_cut, sigma, epsilon_k)

        u = np.where(r > r_cut, 0., lennard_jones(r, sigma, epsilon_k) - u_cut)
        return u if np.ndim(u) > 0 else float(u)
