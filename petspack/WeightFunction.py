r"""
Weight functions, implemented through their analytical 3D fourier transforms. The weights are callable objects, that
can be scaled by a prefactor, such that for example

    Delta(R) / (4 * np.pi * R**2) # Returns a new Analytical, the FMT weight w0

Radii are plain floats (or numpy scalars): the transforms are evaluated with scipy.special, outside of jax.

The fourier variable k is the frequency (not the angular frequency), such that all transforms are functions of 2 pi k R.
"""
import numpy as np
from scipy.special import spherical_jn


class Analytical:
    """
    Fourier transformed weight function. The transform is held in the `lamb` attribute, and evaluated by calling the
    object, while the real space integral of the weight (the value of the transform at k = 0) is held in `integral`,
    such that bulk weighted densities can be computed without evaluating the transform.

    Scalar weights are even functions, and vector valued weights are odd. Convolver.py uses `is_even()` and `is_odd()`
    to select the appropriate sine/cosine transforms.

    Example:
        f = Analytical(lambda k: np.cos(k), 1)
        g = 2 * f
        g(0) # Returns 2.
    """
    def __init__(self, lamb, integral, is_vector_valued=False):
        self.lamb = lamb
        self.integral = integral
        self.is_vector_valued = is_vector_valued

    def __call__(self, k):
        return self.lamb(k)

    def __mul__(self, prefactor):
        return Analytical(lambda k: prefactor * self(k), prefactor * self.real_integral(), self.is_vector_valued)

    def __rmul__(self, prefactor):
        return self.__mul__(prefactor)

    def __truediv__(self, other):
        return self * (1 / other)

    def __add__(self, other):
        return Analytical(lambda k: self(k) + other(k), self.real_integral() + other.real_integral(),
                          self.is_vector_valued)

    def __sub__(self, other):
        return Analytical(lambda k: self(k) - other(k), self.real_integral() - other.real_integral(),
                          self.is_vector_valued)

    def __eq__(self, other):
        # Weights are compared to 0, the placeholder for "no weight"
        if not isinstance(other, Analytical):
            return False
        raise TypeError('Equality between analytical functions is not implemented.')

    __hash__ = object.__hash__

    def is_odd(self):
        return self.is_vector_valued

    def is_even(self):
        return not self.is_odd()

    def real_integral(self):
        return self.integral


class Delta(Analytical):
    r"""
    Fourier transform of $\delta(r - R)$
    """
    def __init__(self, R):
        self.R = R
        super().__init__(lambda k: 4 * np.pi * self.R**2 * spherical_jn(0, 2 * np.pi * k * self.R),
                         4 * np.pi * R**2)


class Delta_diff(Analytical):
    """
    Derivative of Delta wrt. R
    """
    def __init__(self, R):
        self.R = R
        super().__init__(lambda k: 8 * np.pi * self.R * (spherical_jn(0, 2 * np.pi * k * self.R)
                                                         - np.pi * k * self.R * spherical_jn(1, 2 * np.pi * k * self.R)),
                         8 * np.pi * R)


class Heaviside(Analytical):
    r"""
    Fourier transform of $\theta(R - r)$
    """
    def __init__(self, R):
        self.R = R
        super().__init__(lambda k: (4 / 3) * np.pi * self.R**3 * (spherical_jn(0, 2 * np.pi * k * self.R)
                                                                  + spherical_jn(2, 2 * np.pi * k * self.R)),
                         (4 / 3) * np.pi * R**3)


class Heaviside_diff(Analytical):
    """
    Derivative of Heaviside wrt. R (equal to Delta)
    """
    def __init__(self, R):
        self.R = R
        super().__init__(lambda k: 4 * np.pi * self.R**2 * spherical_jn(0, 2 * np.pi * k * self.R), 4 * np.pi * R**2)


class NormTheta(Analytical):
    r"""
    Fourier transform of the normalised Heaviside $\theta(R - r) / ((4 / 3) \pi R^3)$, with unit integral.
    """
    def __init__(self, R):
        self.R = R
        super().__init__(lambda k: spherical_jn(0, 2 * np.pi * k * self.R) + spherical_jn(2, 2 * np.pi * k * self.R), 1)


class NormTheta_diff(Analytical):
    """
    Derivative of NormTheta wrt. R. The integral of NormTheta is independent of R, so this integrates to zero.
    """
    def __init__(self, R):
        self.R = R
        super().__init__(lambda k: - (3 / self.R) * spherical_jn(2, 2 * np.pi * k * self.R), 0.)


class DeltaVec(Analytical):
    r"""
    Fourier transform of $\hat{\vec{r}}\delta(r - R)$, where $\hat{\vec{r}}$ is the unit vector pointing away from the
    origin. Only the (imaginary) component along the symmetry axis is kept.
    """
    def __init__(self, R):
        self.R = R
        super().__init__(lambda k: - 4 * np.pi * self.R**2 * spherical_jn(1, 2 * np.pi * k * self.R), 0.,
                         is_vector_valued=True)


class DeltaVec_diff(Analytical):
    """
    Derivative of DeltaVec wrt. R
    """
    def __init__(self, R):
        self.R = R
        super().__init__(lambda k: - 8 * np.pi**2 * k * self.R**2 * spherical_jn(0, 2 * np.pi * k * self.R), 0.,
                         is_vector_valued=True)


def get_FMT_weights(R, components=None):
    """
    FMT weight functions for spheres of radius R, organised as

    w[<weight idx>][<comp idx>], where
    w[0:4] are the scalar weights (w0, w1, w2, w3), and
    w[4:6] are the vector weights (wv1, wv2)

    Args:
        R (1d array) : Hard sphere radii [Å]
        components (Iterable[int], optional) : Components to generate weights for, defaults to all.
    """
    ncomps = len(R)
    w = [[0 for _ in range(ncomps)] for _ in range(6)]
    for i in (range(ncomps) if components is None else components):
        w[0][i] = Delta(R[i]) / (4 * np.pi * R[i]**2)
        w[1][i] = Delta(R[i]) / (4 * np.pi * R[i])
        w[2][i] = Delta(R[i])
        w[3][i] = Heaviside(R[i])
        w[4][i] = DeltaVec(R[i]) / (4 * np.pi * R[i])
        w[5][i] = DeltaVec(R[i])
    return w


def get_FMT_weight_derivatives(R):
    """
    See: get_FMT_weights. Derivatives of the weights wrt. R, organised the same way.
    """
    ncomps = len(R)
    dwdR = [[0 for _ in range(ncomps)] for _ in range(6)]
    for i in range(ncomps):
        dwdR[0][i] = Delta_diff(R[i]) / (4 * np.pi * R[i]**2) - Delta(R[i]) / (2 * np.pi * R[i]**3)
        dwdR[1][i] = Delta_diff(R[i]) / (4 * np.pi * R[i]) - Delta(R[i]) / (4 * np.pi * R[i]**2)
        dwdR[2][i] = Delta_diff(R[i])
        dwdR[3][i] = Heaviside_diff(R[i])
        dwdR[4][i] = DeltaVec_diff(R[i]) / (4 * np.pi * R[i]) - DeltaVec(R[i]) / (4 * np.pi * R[i]**2)
        dwdR[5][i] = DeltaVec_diff(R[i])
    return dwdR
