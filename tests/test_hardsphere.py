import numpy as np
import pytest
from pytest import approx
from petspack.hardsphere import (FMTVersion, HardSphereMixture, HardSpherePure, hs_diameter, hs_diameter_derivative,
                                 white_bear, antisym_white_bear, rosenfeld, white_bear_mark_ii)
from petspack.kernel import first_derivative, gradient
from petspack.grid import PlanarGrid, SphericalGrid
from petspack.profile import Profile
from tests.tools import argon, argon_krypton, states, central_difference, tanh_profiles, is_equal


def carnahan_starling(rho, eta):
    return rho * (4 * eta - 3 * eta**2) / (1 - eta)**2

def test_hs_diameter():
    params = argon_krypton()
    T = 130.
    d = hs_diameter(params, T)
    assert d == approx(params.sigma * (1 - 0.127112544 * np.exp(- 3.052785558 * params.epsilon_k / T)), rel=1e-14)
    _, dd_dT = hs_diameter_derivative(params, T)
    assert dd_dT == approx(central_difference(lambda t: hs_diameter(params, t), T), rel=1e-7)

@pytest.mark.parametrize('T, rho', states)
def test_white_bear_bulk_is_carnahan_starling(T, rho):
    params = argon()
    hs = HardSphereMixture(params, FMTVersion.WhiteBear)
    eta = (np.pi / 6) * rho * hs_diameter(params, T)[0]**3
    assert hs.bulk_helmholtz_energy_density(T, [rho]) == approx(carnahan_starling(rho, eta), rel=1e-10)

@pytest.mark.parametrize('T, rho', states)
def test_rosenfeld_bulk_is_percus_yevick(T, rho):
    params = argon()
    hs = HardSphereMixture(params, FMTVersion.Rosenfeld)
    eta = (np.pi / 6) * rho * hs_diameter(params, T)[0]**3
    py = rho * (- np.log(1 - eta) + 3 * eta / (1 - eta) + 3 * eta**2 / (2 * (1 - eta)**2))
    assert hs.bulk_helmholtz_energy_density(T, [rho]) == approx(py, rel=1e-10)

@pytest.mark.parametrize('T, rho', states)
def test_white_bear_versions_agree_in_bulk(T, rho):
    params = argon_krypton()
    x = [0.3, 0.7]
    wb = HardSphereMixture(params, FMTVersion.WhiteBear).bulk_helmholtz_energy_density(T, [rho * xi for xi in x])
    asym = HardSphereMixture(params, FMTVersion.AntiSymWhiteBear).bulk_helmholtz_energy_density(T, [rho * xi for xi in x])
    assert asym == approx(wb, rel=1e-12)

@pytest.mark.parametrize('fmt_version', [FMTVersion.WhiteBear, FMTVersion.AntiSymWhiteBear])
@pytest.mark.parametrize('T, rho', states)
def test_pure_equals_mixture_bulk(fmt_version, T, rho):
    params = argon()
    pure = HardSpherePure(params, fmt_version)
    mix = HardSphereMixture(params, fmt_version)

    assert is_equal(pure.reduced_helmholtz_energy_density([rho], T, bulk=True),
                    mix.reduced_helmholtz_energy_density([rho], T, bulk=True))

    _, mu_pure = pure.reduced_helmholtz_energy_density([rho], T, dphidrho=True, bulk=True)
    _, mu_mix = mix.reduced_helmholtz_energy_density([rho], T, dphidrho=True, bulk=True)
    assert is_equal(mu_pure[0], mu_mix[0])

    _, dT_pure = pure.reduced_helmholtz_energy_density([rho], T, dphidT=True, bulk=True)
    _, dT_mix = mix.reduced_helmholtz_energy_density([rho], T, dphidT=True, bulk=True)
    assert dT_pure == approx(dT_mix, rel=1e-10)

def test_white_bear_partial_derivatives():
    n = [0.02, 0.03, 0.35, 0.3, -0.004, -0.05]
    n0, n1, n2, n3, nv1, nv2 = n
    _, dphidn = gradient(lambda m: white_bear(*m), n)
    assert np.asarray(dphidn[0]) == approx(- np.log(1 - n3))
    assert dphidn[1] == approx(n2 / (1 - n3))
    assert dphidn[4] == approx(- nv2 / (1 - n3))
    f3 = (n3 + (1 - n3)**2 * np.log(1 - n3)) / (36 * np.pi * n3**2 * (1 - n3)**2)
    assert dphidn[2] == approx(n1 / (1 - n3) + 3 * (n2**2 - nv2**2) * f3)
    assert dphidn[5] == approx(- nv1 / (1 - n3) - 6 * n2 * nv2 * f3)
    assert dphidn[3] == approx(central_difference(lambda x: white_bear(n0, n1, n2, x, nv1, nv2), n3), rel=1e-7)

@pytest.mark.parametrize('phi', [white_bear, antisym_white_bear, white_bear_mark_ii])
@pytest.mark.parametrize('n3', [1e-4, 1e-5 * (1 - 1e-9), 1e-5 * (1 + 1e-9), 1e-6, 0.])
def test_small_packing_fraction_is_continuous(phi, n3):
    n2 = 4.8 * n3 + 1e-12
    ref_n3 = 1e-5
    val = phi(n2 / 10, n2 / 8, n2, n3, 0., 0.)
    ref = phi(4.8 * ref_n3 / 10, 4.8 * ref_n3 / 8, 4.8 * ref_n3, ref_n3, 0., 0.)
    assert np.isfinite(val)
    _, deriv = first_derivative(lambda x: phi(n2 / 10, n2 / 8, n2, x, 0., 0.), n3)
    assert np.isfinite(deriv)
    if n3 > 0:
        # phi scales as n3^2 at low packing fractions
        assert val / ref == approx((n3 / ref_n3)**2, rel=1e-3)

def test_fmt_versions_agree_at_low_density():
    n3 = 1e-3
    R = 1.6
    rho = n3 / ((4 / 3) * np.pi * R**3)
    n = [rho, rho * R, 4 * np.pi * R**2 * rho, n3, 0., 0.]
    values = [float(f(*n)) for f in (white_bear, antisym_white_bear, rosenfeld, white_bear_mark_ii)]
    assert values == approx([values[0]] * 4, rel=1e-5)

def test_antisym_clamps_xi():
    n = [0.02, 0.03, 0.3, 0.25, 0.04, 0.4]
    assert np.isfinite(antisym_white_bear(*n))
    n_clamped = [0.02, 0.03, 0.3, 0.25, 0.04, 0.3]
    # For |nv2| >= n2 the third term vanishes
    phi_23 = - n[0] * np.log(1 - n[3]) + (n[1] * n[2] - n[4] * n[5]) / (1 - n[3])
    assert antisym_white_bear(*n) == approx(phi_23)
    assert antisym_white_bear(*n_clamped) == approx(- n[0] * np.log(1 - n[3]) + (n[1] * n[2] - n[4] * 0.3) / (1 - n[3]))

def test_pure_rejects_mixtures_and_versions():
    with pytest.raises(ValueError):
        HardSpherePure(argon_krypton())
    for version in (FMTVersion.Rosenfeld, FMTVersion.WhiteBearMarkII):
        with pytest.raises(ValueError):
            HardSpherePure(argon(), version)

def test_one_derivative_at_a_time():
    hs = HardSphereMixture(argon())
    with pytest.raises(ValueError):
        hs.reduced_helmholtz_energy_density([0.02], 100., dphidn=True, dphidT=True, bulk=True)

@pytest.mark.parametrize('fmt_version', list(FMTVersion))
@pytest.mark.parametrize('grid', [PlanarGrid(64, 20.), SphericalGrid(64, 20.)])
def test_uniform_profile_equals_bulk(fmt_version, grid):
    params = argon_krypton()
    T, rho = 110., [0.006, 0.009]
    hs = HardSphereMixture(params, fmt_version)
    profiles = Profile.uniform(rho, grid)

    n = hs.get_weighted_densities(profiles, T)
    n_bulk = hs.get_weighted_densities(rho, T, bulk=True)
    for n_alpha, n_alpha_bulk in zip(n, n_bulk):
        assert np.asarray(n_alpha) == approx(np.full(grid.N, n_alpha_bulk), rel=1e-8, abs=1e-10)
    assert [p.is_vector_field for p in n] == [False] * 4 + [True] * 2

    phi, dphidrho = hs.reduced_helmholtz_energy_density(profiles, T, dphidrho=True)
    phi_bulk, mu_bulk = hs.reduced_helmholtz_energy_density(rho, T, dphidrho=True, bulk=True)
    assert np.asarray(phi) == approx(np.full(grid.N, phi_bulk), rel=1e-8)
    for ci in range(2):
        assert np.asarray(dphidrho[ci]) == approx(np.full(grid.N, mu_bulk[ci]), rel=1e-8)

    _, dphidT = hs.reduced_helmholtz_energy_density(profiles, T, dphidT=True)
    _, dphidT_bulk = hs.reduced_helmholtz_energy_density(rho, T, dphidT=True, bulk=True)
    assert np.asarray(dphidT) == approx(np.full(grid.N, dphidT_bulk), rel=1e-7)

@pytest.mark.parametrize('fmt_version', [FMTVersion.WhiteBear, FMTVersion.AntiSymWhiteBear])
def test_pure_equals_mixture_profile(fmt_version):
    # The dilute side resolves the weighted density offset in n0 and n1
    params = argon()
    T = 95.
    grid = PlanarGrid(128, 40.)
    profiles = tanh_profiles([0.02], [1e-6], grid)
    pure = HardSpherePure(params, fmt_version)
    mix = HardSphereMixture(params, fmt_version)

    assert np.asarray(pure.reduced_helmholtz_energy_density(profiles, T)) \
           == approx(np.asarray(mix.reduced_helmholtz_energy_density(profiles, T)), rel=1e-10)

    _, dphidrho_pure = pure.reduced_helmholtz_energy_density(profiles, T, dphidrho=True)
    _, dphidrho_mix = mix.reduced_helmholtz_energy_density(profiles, T, dphidrho=True)
    assert np.asarray(dphidrho_pure[0]) == approx(np.asarray(dphidrho_mix[0]), rel=1e-10, abs=1e-13)

    _, dphidT_pure = pure.reduced_helmholtz_energy_density(profiles, T, dphidT=True)
    _, dphidT_mix = mix.reduced_helmholtz_energy_density(profiles, T, dphidT=True)
    assert np.asarray(dphidT_pure) == approx(np.asarray(dphidT_mix), rel=1e-6, abs=1e-14)

@pytest.mark.parametrize('fmt_version', list(FMTVersion))
def test_profile_temperature_derivative(fmt_version):
    params = argon_krypton()
    T = 105.
    grid = PlanarGrid(128, 40.)
    profiles = tanh_profiles([0.012, 0.008], [0.0005, 0.001], grid)
    hs = HardSphereMixture(params, fmt_version)
    _, dphidT = hs.reduced_helmholtz_energy_density(profiles, T, dphidT=True)
    fd = central_difference(lambda t: np.asarray(hs.reduced_helmholtz_energy_density(profiles, t)), T, h=1e-3)
    assert np.asarray(dphidT) == approx(fd, rel=1e-5, abs=1e-12)

def test_dphidn_profiles():
    params = argon_krypton()
    T = 105.
    grid = PlanarGrid(64, 30.)
    profiles = tanh_profiles([0.012, 0.008], [0.0005, 0.001], grid)
    hs = HardSphereMixture(params)
    n = hs.get_weighted_densities(profiles, T)
    phi, dphidn = hs.reduced_helmholtz_energy_density(profiles, T, dphidn=True)
    assert len(dphidn) == 6
    assert np.asarray(dphidn[0]) == approx(- np.log(1 - np.asarray(n[3])))
    assert np.asarray(dphidn[4]) == approx(- np.asarray(n[5]) / (1 - np.asarray(n[3])))
    assert dphidn[5].is_vector_field
