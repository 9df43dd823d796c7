"""
Convolution of an analytical (fourier transformed) weight function with a discrete profile.

The transforms to use are selected from the geometry of the profile's grid, and from the parity of the weight and the
profile: scalar weights and scalar profiles are even, vector weights and vector profiles are odd. Even functions are
expanded in cosines, and odd functions in sines (type-II transforms, cell-centred grid).
"""
from scipy.fft import dst, idst, dct, idct
import numpy as np
from petspack.grid import Geometry


def convolve_ad(analytical, discrete):
    """
    Convolve an analytical function with a discrete function

    Args:
        analytical (Analytical or 0) : Fourier transformed weight (see WeightFunction.py), 0 means "no weight"
        discrete (Profile) : The discrete function
    Returns:
        ndarray : The convolved function in real space. NOTE: Does NOT return a Profile.
    """
    if analytical == 0:
        return np.zeros(len(discrete))
    elif discrete.grid.geometry == Geometry.PLANAR:
        return convolve_ad_planar(analytical, discrete)
    elif discrete.grid.geometry == Geometry.SPHERICAL:
        return convolve_ad_spherical(analytical, discrete)
    raise NotImplementedError(f'Convolution not implemented for geometry {discrete.grid.geometry}')


def convolve_ad_planar(analytical, discrete):
    """
    Convolutions for planar geometry, see: convolve_ad
    """
    grid = discrete.grid
    profile = np.asarray(discrete)

    # The forward transform follows the parity of the profile, the inverse transform the parity of the product.
    # When the two differ, the transformed profile is shifted by one frequency to line up with the other family.
    if discrete.is_even():
        transformed = dct(profile, type=2)
        if analytical.is_even():
            return idct(transformed * analytical(grid.k_cos), type=2)
        transformed = np.roll(transformed, -1)
        transformed[-1] = 0
        return idst(transformed * analytical(grid.k_sin), type=2)

    transformed = dst(profile, type=2)
    if analytical.is_even():
        return idst(transformed * analytical(grid.k_sin), type=2)
    transformed = np.roll(transformed, 1)
    transformed[0] = 0
    return - idct(transformed * analytical(grid.k_cos), type=2)


def convolve_ad_spherical(analytical, discrete):
    """
    Convolutions for spherical geometry, see: convolve_ad

    The profile is split in its value at the outer boundary, and the deviation from that value. Only the deviation is
    transformed (as r * f(r)), the constant part is convolved exactly.
    """
    grid = discrete.grid
    r = grid.z
    k_sin = grid.k_sin
    k_cos = grid.k_cos

    profile = np.asarray(discrete)
    outer = profile[-1]
    deviation = profile - outer

    if discrete.is_even():
        if analytical.is_even():
            deviation_term = idst(dst(deviation * r, type=2) * analytical(k_sin), type=2) / r
            return deviation_term + analytical(0) * outer

        transformed = dst(deviation * r, type=2)
        odd_term = transformed * analytical(k_sin) / k_sin
        even_term = np.roll(transformed / k_sin, 1) * analytical(k_cos) * k_cos
        even_term[0] = 0
        # The constant part does not contribute to a vector weighted density
        return idst(odd_term, type=2) / (2 * np.pi * r**2) - idct(even_term, type=2) / r

    if analytical.is_even():
        raise NotImplementedError('Convolution of an even weight with an odd profile is not implemented for spherical '
                                  'geometry.')

    cos_term = np.roll(dct(deviation * r, type=2) / np.where(k_cos == 0, 1, k_cos), -1)
    cos_term[-1] = 0
    sin_term = dst(deviation, type=2) / (np.pi * k_sin**2)
    return idst((cos_term - sin_term) * analytical(k_sin) * k_sin, type=2) / r
