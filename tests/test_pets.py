"""Tests of the assembled PeTS equation of state and functional."""
import warnings
import numpy as np
import pytest
from pytest import approx
from petspack.pets import Pets, PetsFunctional, PetsOptions, MoleculeShape, select_contributions
from petspack.hardsphere import FMTVersion, HardSphereMixture, HardSpherePure, hs_diameter
from petspack.dispersion import DispersionMixture, DispersionPure
from petspack.pair_potential import PairPotential
from petspack.ideal_gas import IdealGas
from petspack.parameters import PetsParameters
from petspack.grid import PlanarGrid
from petspack.profile import Profile
from petspack.kernel import gradient
from tests.tools import argon, argon_krypton, states, central_difference, tanh_profiles, is_equal


@pytest.mark.parametrize('fmt_version, pure', [(FMTVersion.WhiteBear, True), (FMTVersion.AntiSymWhiteBear, True),
                                               (FMTVersion.Rosenfeld, False), (FMTVersion.WhiteBearMarkII, False)])
def test_select_contributions(fmt_version, pure):
    hs, disp = select_contributions(argon(), fmt_version)
    assert isinstance(hs, HardSpherePure if pure else HardSphereMixture)
    assert isinstance(disp, DispersionPure if pure else DispersionMixture)
    assert hs.fmt_version == fmt_version

    hs, disp = select_contributions(argon_krypton(), fmt_version)
    assert isinstance(hs, HardSphereMixture) and not isinstance(disp, DispersionPure)

def test_max_density_argon():
    eos = Pets(argon())
    assert eos.compute_max_density([1.]) == approx(0.0241892, rel=1e-5)
    assert eos.compute_max_density([1.]) == approx(0.5 / ((np.pi / 6) * 3.405**3), rel=1e-14)

def test_max_density_mixture():
    params = argon_krypton()
    eos = Pets(params, options=PetsOptions(max_eta=0.4))
    moles = np.array([2., 3.])
    expected = 0.4 * 5. / ((np.pi / 6) * np.sum(params.sigma**3 * moles))
    assert eos.compute_max_density(moles) == approx(expected, rel=1e-14)
    assert eos.compute_max_density(7 * moles) == approx(expected, rel=1e-14)

def test_check_max_density():
    eos = Pets(argon())
    with pytest.warns(RuntimeWarning):
        eos.check_max_density([0.03])
    with warnings.catch_warnings():
        warnings.simplefilter('error')
        eos.check_max_density([0.02])

def test_validate_composition():
    eos = Pets(argon_krypton())
    eos.validate_composition([0.3, 0.7])
    with pytest.raises(IndexError):
        eos.validate_composition([1.])
    with pytest.raises(ValueError):
        eos.validate_composition([0.5, 0.6])

def test_packing_fraction():
    params = argon_krypton()
    eos = Pets(params)
    T, rho = 120., [0.008, 0.004]
    d = hs_diameter(params, T)
    assert eos.packing_fraction(T, rho) == approx((np.pi / 6) * (0.008 * d[0]**3 + 0.004 * d[1]**3), rel=1e-14)
    assert eos.packing_fraction(T, rho) < eos.options.max_eta

@pytest.mark.parametrize('T, rho', states)
def test_residual_helmholtz_energy(T, rho):
    eos = Pets(argon_krypton(0.02))
    x = np.array([0.4, 0.6])
    V = 1e4
    phi = eos.residual_helmholtz_energy_density(T, rho * x)
    assert eos.residual_helmholtz_energy(T, V, rho * x * V) == approx(V * phi, rel=1e-12)

@pytest.mark.parametrize('T, rho', states)
def test_chemical_potential(T, rho):
    eos = Pets(argon_krypton(0.02))
    x = np.array([0.4, 0.6])
    mu = eos.residual_chemical_potential(T, rho * x)
    for i in range(2):
        def phi(rho_i):
            r = rho * x.copy()
            r[i] = rho_i
            return eos.residual_helmholtz_energy_density(T, r)
        assert mu[i] == approx(central_difference(phi, rho * x[i], h=1e-7 * rho), rel=1e-6)

@pytest.mark.parametrize('T, rho', states)
def test_pressure(T, rho):
    # p = - dA / dV at constant T and n
    eos = Pets(argon_krypton())
    n = np.array([0.4, 0.6]) * 1e4
    V = 1e4 / rho
    p = eos.residual_pressure(T, n / V)
    fd = - central_difference(lambda v: eos.residual_helmholtz_energy(T, v, n), V, h=1e-6 * V)
    assert p == approx(fd, rel=1e-6)

def test_low_density_limit():
    eos = Pets(argon())
    for rho in (1e-8, 1e-9):
        assert abs(eos.residual_pressure(150., [rho])) < 1e-3 * rho
        assert abs(eos.residual_chemical_potential(150., [rho])[0]) < 1e-3

@pytest.mark.parametrize('T, rho', states)
def test_pure_and_mixture_variants_agree(T, rho):
    # A pure fluid split in two identical components uses the mixture contributions
    pure = Pets(argon())
    split = Pets(argon_krypton().subset([0, 0]))
    assert isinstance(split.contributions[0], HardSphereMixture)
    phi_pure = pure.residual_helmholtz_energy_density(T, [rho])
    phi_split = split.residual_helmholtz_energy_density(T, [0.3 * rho, 0.7 * rho])
    assert is_equal(phi_pure, phi_split, rel=1e-10)
    assert split.residual_pressure(T, [0.3 * rho, 0.7 * rho]) == approx(pure.residual_pressure(T, [rho]), rel=1e-9)

def test_subset():
    params = argon_krypton(0.05)
    eos = Pets(params, options=PetsOptions(max_eta=0.45))
    sub = eos.subset([1])
    direct = Pets(PetsParameters.new_pure(params.pure_records[1]))
    assert sub.ncomps == 1
    assert sub.options.max_eta == 0.45
    assert isinstance(sub.contributions[0], HardSpherePure)
    assert sub.residual_helmholtz_energy_density(130., [0.01]) \
           == approx(direct.residual_helmholtz_energy_density(130., [0.01]), rel=1e-14)
    assert sub.molar_weight[0] == params.molarweight[1]

def test_eos_fmt_version():
    eos = Pets(argon(), fmt_version=FMTVersion.Rosenfeld)
    assert eos.fmt_version == FMTVersion.Rosenfeld
    assert isinstance(eos.contributions[0], HardSphereMixture)
    assert eos.contributions[0].fmt_version == FMTVersion.Rosenfeld
    assert eos.subset([0]).fmt_version == FMTVersion.Rosenfeld
    assert Pets(argon()).fmt_version == FMTVersion.WhiteBear

    T, rho = 110., [0.015]
    assert eos.residual_helmholtz_energy_density(T, rho) \
           == approx(PetsFunctional(argon(), fmt_version=FMTVersion.Rosenfeld).residual_helmholtz_energy_density(T, rho),
                     rel=1e-14)

def test_functional_subset_equals_direct():
    params = argon_krypton(0.05)
    sub = PetsFunctional(params).subset([1])
    direct = PetsFunctional(PetsParameters.new_pure(params.pure_records[1]))
    assert isinstance(sub, PetsFunctional)
    assert [type(c) for c in sub.contributions] == [type(c) for c in direct.contributions]

    T, rho = 140., [0.012]
    phi_sub, mu_sub = sub.reduced_helmholtz_energy_density(rho, T, dphidrho=True, bulk=True)
    phi_direct, mu_direct = direct.reduced_helmholtz_energy_density(rho, T, dphidrho=True, bulk=True)
    assert phi_sub == approx(phi_direct, rel=1e-14)
    assert mu_sub == approx(mu_direct, rel=1e-14)

    grid = PlanarGrid(64, 30.)
    profiles = tanh_profiles([0.015], [0.0008], grid)
    phi_sub, dphidrho_sub = sub.reduced_helmholtz_energy_density(profiles, T, dphidrho=True)
    phi_direct, dphidrho_direct = direct.reduced_helmholtz_energy_density(profiles, T, dphidrho=True)
    assert np.asarray(phi_sub) == approx(np.asarray(phi_direct), rel=1e-14)
    assert np.asarray(dphidrho_sub[0]) == approx(np.asarray(dphidrho_direct[0]), rel=1e-14)

def test_ideal_gas():
    ig = IdealGas([39.948])
    T = 300.
    assert ig.de_broglie_wavelength(T)[0] == approx(0.1595, rel=1e-3)
    # Lambda ~ T^-1/2
    assert ig.de_broglie_wavelength(4 * T)[0] == approx(ig.de_broglie_wavelength(T)[0] / 2, rel=1e-12)
    rho = 0.01
    _, mu = gradient(lambda r: ig.helmholtz_energy_density(T, r), [rho])
    assert mu[0] == approx(np.log(rho * ig.de_broglie_wavelength(T)[0]**3))

def test_default_ideal_gas():
    eos = Pets(argon_krypton())
    assert isinstance(eos.ideal_gas, IdealGas)
    assert np.all(eos.ideal_gas.molarweight == eos.molar_weight)
    assert eos.subset([1]).ideal_gas.molarweight[0] == eos.molar_weight[1]

def test_functional_properties():
    params = argon_krypton()
    func = PetsFunctional(params)
    assert func.fmt_version == FMTVersion.WhiteBear
    assert func.molecule_shape == MoleculeShape.Spherical
    assert isinstance(func.pair_potential, PairPotential)
    assert np.all(func.m == 1.) and func.m.shape == (2,)
    assert np.all(func.sigma_ff == params.sigma)
    assert np.all(func.epsilon_k_ff == params.epsilon_k)
    assert func.sigma_ff.ndim == 1 and func.epsilon_k_ff.ndim == 1
    assert 'WhiteBear' in repr(func)

def test_functional_versions():
    func = PetsFunctional.new_full(argon(), FMTVersion.Rosenfeld)
    assert isinstance(func.contributions[0], HardSphereMixture)
    assert func.subset([0]).fmt_version == FMTVersion.Rosenfeld
    assert isinstance(PetsFunctional(argon()).contributions[0], HardSpherePure)

@pytest.mark.parametrize('params, nweights', [(argon(), 4), (argon_krypton(), 8)])
def test_functional_weights(params, nweights):
    func = PetsFunctional(params)
    T = 110.
    assert len(func.get_weights(T)) == nweights
    assert len(func.get_weights(T, dwdT=True)) == nweights
    rho = [0.01] * params.ncomps
    assert len(func.get_weighted_densities(rho, T, bulk=True)) == nweights
    _, dphidn = func.reduced_helmholtz_energy_density(rho, T, dphidn=True, bulk=True)
    assert dphidn.shape == (nweights,)
    assert func.get_characteristic_lengths() == approx(func.contributions[0].get_characteristic_lengths())

@pytest.mark.parametrize('fmt_version', list(FMTVersion))
def test_functional_bulk_matches_eos(fmt_version):
    params = argon_krypton(0.01)
    func = PetsFunctional(params, fmt_version=fmt_version)
    T, rho = 115., [0.009, 0.007]
    phi, mu = func.reduced_helmholtz_energy_density(rho, T, dphidrho=True, bulk=True)
    assert phi == approx(func.residual_helmholtz_energy_density(T, rho), rel=1e-12)
    assert mu == approx(func.residual_chemical_potential(T, rho), rel=1e-12)

    _, dphidT = func.reduced_helmholtz_energy_density(rho, T, dphidT=True, bulk=True)
    fd = central_difference(lambda t: func.residual_helmholtz_energy_density(t, rho), T)
    assert dphidT == approx(fd, rel=1e-7)

def test_functional_uniform_profile():
    params = argon_krypton()
    func = PetsFunctional(params)
    grid = PlanarGrid(64, 25.)
    T, rho = 100., [0.01, 0.006]
    profiles = Profile.uniform(rho, grid)
    phi, dphidrho = func.reduced_helmholtz_energy_density(profiles, T, dphidrho=True)
    phi_bulk, mu_bulk = func.reduced_helmholtz_energy_density(rho, T, dphidrho=True, bulk=True)
    assert isinstance(phi, Profile)
    assert np.asarray(phi) == approx(np.full(grid.N, phi_bulk), rel=1e-8)
    for ci in range(2):
        assert np.asarray(dphidrho[ci]) == approx(np.full(grid.N, mu_bulk[ci]), rel=1e-8)

def test_functional_profile_is_sum_of_contributions():
    func = PetsFunctional(argon_krypton())
    grid = PlanarGrid(64, 30.)
    T = 105.
    profiles = tanh_profiles([0.012, 0.008], [0.0005, 0.001], grid)

    phi, dphidT = func.reduced_helmholtz_energy_density(profiles, T, dphidT=True)
    parts = [c.reduced_helmholtz_energy_density(profiles, T, dphidT=True) for c in func.contributions]
    assert np.asarray(phi) == approx(np.asarray(parts[0][0] + parts[1][0]))
    assert np.asarray(dphidT) == approx(np.asarray(parts[0][1] + parts[1][1]))

    _, dphidn = func.reduced_helmholtz_energy_density(profiles, T, dphidn=True)
    n = func.get_weighted_densities(profiles, T)
    assert len(dphidn) == len(n) == 8
    assert [d.is_vector_field for d in dphidn] == [n_alpha.is_vector_field for n_alpha in n]

def test_functional_one_derivative_at_a_time():
    func = PetsFunctional(argon())
    with pytest.raises(ValueError):
        func.reduced_helmholtz_energy_density([0.01], 100., dphidrho=True, dphidT=True, bulk=True)
