"""Tests for the moist-air property model.

Covers the derivation invariants (bounds on water content), start-up
reconciliation of relative and specific humidity, density corrections and
re-reading the saturation method.
"""

import warnings

import numpy as np
import pytest

from conftest import humid_properties
from datastructures import FIXED_VALUE, VolScalarField, ZERO_GRADIENT
from thermo import ConfigurationMissing, HumidityRhoThermoImplementation, InvalidMethod, create
from thermo.psychrometrics import W_DRY_AIR, gas_constant

METHODS = ["simpleSaturation", "magnus", "buck", "hylandWexler"]


def regions(field):
    return field.regions().items()


def assert_bounded(model):
    """Water content never exceeds its saturated bound, in cells or on patches."""
    q = model.specific_humidity().regions()
    q_max = model.max_specific_humidity().regions()
    wv = model.water_vapor().regions()
    wv_max = model.max_water_vapor().regions()
    pv = model.partial_pressure().regions()
    p_sat = model.saturation_pressure().regions()
    for region in q:
        assert np.all(q[region] >= 0.0)
        assert np.all(q[region] <= q_max[region])
        assert np.all(wv[region] >= 0.0)
        assert np.all(wv[region] <= wv_max[region])
        assert np.all(pv[region] <= p_sat[region])


class TestInitialisation:
    """Start-up from relative or specific humidity."""

    @pytest.mark.parametrize("method", METHODS)
    def test_half_saturated(self, make_mesh, method):
        mesh = make_mesh({"thermophysicalProperties": humid_properties(method=method)})
        model = create(mesh)

        q = model.specific_humidity()
        q_max = model.max_specific_humidity()
        for region, values in regions(q):
            assert np.allclose(values, values[0])
            assert np.all(values > 0.0)
            assert np.all(values < q_max.regions()[region])

        assert np.all(model.partial_pressure().internal < model.saturation_pressure().internal)
        assert np.allclose(model.relative_humidity().internal, 0.5, rtol=1e-12)

    def test_specific_humidity_value(self, humid_model):
        """Roughly 7.3 g/kg at 20 degC, 1 bar, 50 % RH."""
        assert humid_model.specific_humidity().internal[0] == pytest.approx(7.3e-3, rel=0.02)

    def test_saturated(self, make_mesh):
        mesh = make_mesh({"thermophysicalProperties": humid_properties(initialConditions={"relHum": 1.0})})
        model = create(mesh)
        pv = model.partial_pressure()
        p_sat = model.saturation_pressure()
        for region, values in regions(pv):
            assert np.all(values <= p_sat.regions()[region])
            assert np.allclose(values, p_sat.regions()[region], rtol=1e-12)
        assert np.allclose(model.specific_humidity().internal, model.max_specific_humidity().internal, rtol=1e-12)

    @pytest.mark.parametrize("method", METHODS)
    @pytest.mark.parametrize("T", [263.15, 273.15, 293.15, 313.15, 353.15])
    def test_saturated_partial_pressure_is_exact(self, make_mesh, method, T):
        """At relHum = 1 the partial pressure equals pSatH2O bit for bit."""
        properties = humid_properties(method=method, initialConditions={"T": T, "relHum": 1.0})
        model = create(make_mesh({"thermophysicalProperties": properties}))
        pv = model.partial_pressure()
        p_sat = model.saturation_pressure()
        for region, values in regions(pv):
            assert np.array_equal(values, p_sat.regions()[region])
        assert np.array_equal(model.relative_humidity().internal, np.ones(10))

        # stays exact through later derivations
        model.correct()
        assert np.array_equal(model.partial_pressure().internal, model.saturation_pressure().internal)

    def test_relative_humidity_above_one_is_clipped(self, make_mesh):
        mesh = make_mesh({"thermophysicalProperties": humid_properties(initialConditions={"relHum": 1.4})})
        model = create(mesh)
        assert np.allclose(model.relative_humidity().internal, 1.0, rtol=1e-12)
        assert_bounded(model)

    def test_from_specific_humidity(self, make_mesh):
        properties = humid_properties(initWithRelHumidity=False, initialConditions={"specificHumidity": 5.0e-3})
        properties["initialConditions"].pop("relHum")
        model = create(make_mesh({"thermophysicalProperties": properties}))
        assert np.allclose(model.specific_humidity().internal, 5.0e-3, rtol=1e-12)
        assert np.all(model.relative_humidity().internal > 0.0)
        assert np.all(model.relative_humidity().internal < 1.0)

    def test_missing_humidity_field(self, make_mesh):
        properties = humid_properties()
        properties["initialConditions"].pop("relHum")
        with pytest.raises(ConfigurationMissing, match="relHum"):
            create(make_mesh({"thermophysicalProperties": properties}))

    def test_read_or_init_is_idempotent(self, humid_model):
        humid_model.read_or_init_specific_humidity()
        q1 = humid_model.specific_humidity()
        rh1 = humid_model.relative_humidity()
        humid_model.read_or_init_specific_humidity()
        q2 = humid_model.specific_humidity()
        rh2 = humid_model.relative_humidity()
        for region, values in regions(q1):
            assert np.allclose(values, q2.regions()[region], rtol=1e-12, atol=0.0)
            assert np.allclose(rh1.regions()[region], rh2.regions()[region], rtol=1e-12, atol=0.0)

    def test_read_or_init_is_idempotent_from_specific_humidity(self, make_mesh):
        properties = humid_properties(
            initWithRelHumidity=False,
            initialConditions={"specificHumidity": {"internalField": np.linspace(1.0e-3, 2.0e-2, 10).tolist()}},
        )
        properties["initialConditions"].pop("relHum")
        model = create(make_mesh({"thermophysicalProperties": properties}))

        model.read_or_init_specific_humidity()
        q1 = model.specific_humidity()
        rh1 = model.relative_humidity()
        model.read_or_init_specific_humidity()
        q2 = model.specific_humidity()
        rh2 = model.relative_humidity()
        for region, values in regions(q1):
            assert np.allclose(values, q2.regions()[region], rtol=1e-12, atol=0.0)
            assert np.allclose(rh1.regions()[region], rh2.regions()[region], rtol=1e-12, atol=0.0)
        # the values above saturation were clamped on the first pass
        assert_bounded(model)

    def test_round_trip_through_specific_humidity(self, make_mesh):
        """relHum -> specificHumidity -> relHum on a second model."""
        rel_hum = np.linspace(0.1, 0.95, 10).tolist()
        first = create(make_mesh({"thermophysicalProperties": humid_properties(initialConditions={"relHum": {"internalField": rel_hum}})}))

        properties = humid_properties(
            initWithRelHumidity=False,
            initialConditions={"specificHumidity": {"internalField": first.specific_humidity().internal.tolist()}},
        )
        properties["initialConditions"].pop("relHum")
        second = create(make_mesh({"thermophysicalProperties": properties}))

        assert np.allclose(second.relative_humidity().internal, rel_hum, rtol=1e-10)

    def test_stored_fields_take_precedence(self, make_mesh):
        """Fields written to the mesh registry are read back on construction."""
        mesh = make_mesh()
        first = create(mesh)
        first.update_state(T=np.linspace(285.0, 305.0, mesh.n_cells))
        first.correct()
        first.write()

        second = create(mesh)
        assert np.allclose(second.T().internal, first.T().internal)
        assert np.allclose(second.relative_humidity().internal, first.relative_humidity().internal, rtol=1e-12)


class TestPatchTypes:
    """Boundary conditions of the input humidity field carry over."""

    def test_fixed_value_patch_is_held(self, make_mesh):
        relhum = {"internalField": 0.4, "boundaryField": {"ends": {"type": FIXED_VALUE, "value": 0.9}}}
        model = create(make_mesh({"thermophysicalProperties": humid_properties(initialConditions={"relHum": relhum})}))

        q_field = model.fields.specific_humidity
        assert q_field.patch_types["ends"] == FIXED_VALUE
        assert q_field.patch_types["walls"] == ZERO_GRADIENT
        assert np.allclose(model.relative_humidity().patch("ends"), 0.9, rtol=1e-12)
        assert np.allclose(model.relative_humidity().patch("walls"), 0.4, rtol=1e-12)

        q_ends = model.specific_humidity().patch("ends")
        model.update_specific_humidity(np.full(model.mesh.n_cells, 1.0e-3))
        assert np.allclose(model.specific_humidity().patch("ends"), q_ends)
        assert np.allclose(model.specific_humidity().patch("walls"), 1.0e-3)


class TestDerivationBounds:
    """Out-of-range inputs are clamped, never raised."""

    def test_overshooting_specific_humidity(self, humid_model):
        q = np.array([-0.1, 0.0, 1.0e-3, 5.0e-2, 0.5, 1.0, 2.0, 7.0e-3, -5.0, 10.0])
        humid_model.update_specific_humidity(q)
        assert_bounded(humid_model)
        q_out = humid_model.specific_humidity().internal
        assert q_out[0] == 0.0
        assert q_out[2] == pytest.approx(1.0e-3, rel=1e-12)
        assert np.allclose(q_out[[4, 5, 6, 9]], humid_model.max_specific_humidity().internal[[4, 5, 6, 9]])

    @pytest.mark.parametrize("method", METHODS)
    @pytest.mark.parametrize("T", [250.0, 273.15, 330.0, 380.0])
    def test_bounds_over_temperature(self, make_mesh, method, T):
        mesh = make_mesh({"thermophysicalProperties": humid_properties(method=method, initialConditions={"relHum": 0.99})})
        model = create(mesh)
        model.update_state(T=T)
        model.update_specific_humidity(np.full(mesh.n_cells, 0.2))
        assert_bounded(model)

    def test_saturation_above_total_pressure(self, humid_model):
        """Above the boiling point the vapour pressure is bounded by p."""
        humid_model.update_state(T=380.0)
        humid_model.update_specific_humidity(np.full(10, 0.9))
        assert np.all(humid_model.saturation_pressure().internal > humid_model.p().internal)
        assert np.all(humid_model.partial_pressure().internal <= humid_model.p().internal)
        assert_bounded(humid_model)

    @pytest.mark.parametrize("p", [0.0, -1.0e3])
    def test_non_positive_pressure(self, humid_model, p):
        """Zero or negative pressure is floored, without warnings or NaNs."""
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            humid_model.update_state(p=p)
            humid_model.correct()

        assert_bounded(humid_model)
        for field in (humid_model.viscosity(), humid_model.density(), humid_model.compressibility()):
            for _, values in regions(field):
                assert np.all(np.isfinite(values))
        assert np.all(humid_model.viscosity().internal > 0.0)
        assert np.all(humid_model.density().internal > 0.0)

    def test_correct_density_at_zero_pressure(self, humid_model, mesh):
        humid_model.update_state(p=0.0)
        humid_model.correct()
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            humid_model.correct_density(VolScalarField.uniform("delta", mesh, 1.0e-6))
        assert np.all(np.isfinite(humid_model.compressibility().internal))

    def test_water_mass_is_content_times_volume(self, humid_model):
        expected = humid_model.water_vapor().internal * humid_model.mesh.cell_volumes
        assert np.allclose(humid_model.water_mass().internal, expected)


class TestDensityAndTransport:
    """Equation of state, density corrections and viscosity."""

    def test_moist_air_is_lighter_than_dry_air(self, humid_model):
        R_dry = gas_constant(W_DRY_AIR)
        rho_dry = humid_model.p().internal / (R_dry * humid_model.T().internal)
        rho = humid_model.density().internal
        assert np.all(rho < rho_dry)
        assert rho[0] == pytest.approx(1.19, rel=0.01)

    def test_psi_times_p_is_rho(self, humid_model):
        rho = humid_model.density()
        psi = humid_model.compressibility()
        p = humid_model.p()
        for region, values in regions(rho):
            assert np.allclose(values, psi.regions()[region] * p.regions()[region], rtol=1e-12)

    def test_correct_density_adds_delta_everywhere(self, humid_model, mesh):
        before = humid_model.density()
        delta = VolScalarField.uniform("delta", mesh, 0.0)
        delta.internal[:] = np.linspace(-0.01, 0.01, mesh.n_cells)
        delta.boundary["ends"][:] = 0.02
        delta.boundary["walls"][:] = -0.003

        humid_model.correct_density(delta)
        after = humid_model.density()
        for region, values in regions(after):
            assert np.allclose(values, before.regions()[region] + delta.regions()[region], rtol=1e-14)
        # compressibility follows the corrected density
        assert np.allclose(humid_model.compressibility().internal, after.internal / humid_model.p().internal)

    def test_density_snapshot_is_detached(self, humid_model):
        snapshot = humid_model.density()
        snapshot.internal[:] = 0.0
        assert np.all(humid_model.density().internal > 0.0)

    def test_density_mutable_is_live(self, humid_model):
        humid_model.density_mutable().internal[:] = 2.0
        assert np.all(humid_model.density().internal == 2.0)

    def test_density_patch(self, humid_model):
        assert humid_model.density_patch("ends").shape == (2,)
        with pytest.raises(KeyError):
            humid_model.density_patch("inlet")

    def test_previous_density(self, humid_model):
        humid_model.store_old_times()
        rho_old = humid_model.density().internal.copy()
        humid_model.update_state(T=320.0)
        humid_model.correct()
        assert np.allclose(humid_model.previous_density().internal, rho_old)
        assert np.all(humid_model.density().internal < rho_old)

    def test_viscosity_close_to_air(self, humid_model):
        mu = humid_model.viscosity().internal
        assert mu[0] == pytest.approx(1.81e-5, rel=0.02)
        assert humid_model.viscosity_patch("walls").shape == (20,)

    def test_effective_viscosity(self, humid_model):
        humid_model.correct(mut=1.0e-4)
        mu = humid_model.viscosity()
        mu_eff = humid_model.effective_viscosity()
        for region, values in regions(mu_eff):
            assert np.allclose(values, mu.regions()[region] + 1.0e-4)
        assert np.all(humid_model.turbulent_viscosity().internal == 1.0e-4)


class TestReadMethod:
    """Re-reading the saturation method."""

    def test_invalid_method_leaves_state_unchanged(self, humid_model):
        before = {name: field.copy() for name, field in humid_model.fields.items()}
        humid_model.properties["method"] = "antoine"
        with pytest.raises(InvalidMethod):
            humid_model.read_method()

        assert humid_model.method == "simpleSaturation"
        for name, field in humid_model.fields.items():
            for region, values in regions(field):
                assert np.array_equal(values, before[name].regions()[region])

    def test_read_rejects_invalid_dictionary(self, humid_model):
        with pytest.raises(InvalidMethod):
            humid_model.read(humid_properties(method="antoine"))
        assert humid_model.properties["method"] == "simpleSaturation"

    def test_read_reloads_init_flag(self, humid_model):
        assert humid_model.humidity.init_with_rel_humidity
        humid_model.read(humid_properties(initWithRelHumidity=False))
        assert humid_model.humidity.init_with_rel_humidity is False

        # with the flag off the specific humidity is kept as it is
        q = humid_model.specific_humidity().internal.copy()
        humid_model.update_state(T=300.0)
        humid_model.read_or_init_specific_humidity()
        assert np.allclose(humid_model.specific_humidity().internal, q, rtol=1e-12)

        humid_model.read(humid_properties(initWithRelHumidity=True))
        assert humid_model.humidity.init_with_rel_humidity is True

    def test_switch_method(self, humid_model):
        p_sat = humid_model.saturation_pressure().internal.copy()
        humid_model.read(humid_properties(method="magnus"))
        humid_model.correct()
        assert humid_model.method == "magnus"
        assert not np.allclose(humid_model.saturation_pressure().internal, p_sat, rtol=1e-6)

    def test_construction_with_invalid_method(self, make_mesh):
        with pytest.raises(InvalidMethod):
            create(make_mesh({"thermophysicalProperties": humid_properties(method="antoine")}))


class TestStandaloneLayer:
    """The humidity layer built without the registry."""

    def test_from_dict(self, make_mesh):
        mesh = make_mesh({})
        model = HumidityRhoThermoImplementation.from_dict(mesh, humid_properties(method="buck"))
        assert model.method == "buck"
        assert model.fields.rho.internal.shape == (10,)

    def test_to_dataframe(self, humid_model):
        df = humid_model.to_dataframe()
        assert len(df) == 10
        for column in ("x", "y", "T", "p", "thermo:rho", "relHum", "specificHumidity", "pSatH2O", "muEff"):
            assert column in df.columns
