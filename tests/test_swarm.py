"""
Tests for swarm construction, stepping and best tracking.
"""

import math

import numpy as np
import pytest

from openswarm.optimization import (
    Objective, Particle, Swarm, SwarmOptions, Uniform, Constant, UpdateSign,
)
from openswarm.functions import rastrigin, sphere
from openswarm.models.errors import ConfigurationError, NonFiniteFitnessError


def make_swarm(objective, size=12, dimensions=3, seed=42, **kwargs):
    return Swarm(
        size=size,
        dimensions=dimensions,
        position_distribution=Uniform(-5.0, 5.0),
        velocity_distribution=Uniform(-1.0, 1.0),
        objective=objective,
        seed=seed,
        **kwargs
    )


def trajectory(swarm, steps, options):
    states = []
    for _ in range(steps):
        swarm.step(options)
        states.append((
            np.array([p.position for p in swarm.particles]),
            np.array([p.velocity for p in swarm.particles]),
            swarm.best().copy(),
        ))
    return states


class TestSwarmConstruction:
    """Tests for Swarm initialization."""

    def test_population_and_dimensions(self, sphere_objective):
        swarm = make_swarm(sphere_objective, size=7, dimensions=4)

        assert swarm.size == 7
        assert swarm.dimensions == 4
        assert swarm.iteration == 0
        for particle in swarm.particles:
            assert particle.position.shape == (4,)
            assert particle.velocity.shape == (4,)
            assert particle.personal_best.shape == (4,)

    def test_initial_values_drawn_from_distributions(self, sphere_objective):
        swarm = make_swarm(sphere_objective, size=20)

        for particle in swarm.particles:
            assert np.all((particle.position >= -5.0) & (particle.position < 5.0))
            assert np.all((particle.velocity >= -1.0) & (particle.velocity < 1.0))
            assert np.array_equal(particle.personal_best, particle.position)

    def test_global_best_is_fittest_initial_position(self, sphere_objective):
        swarm = make_swarm(sphere_objective, size=15)
        values = [sphere_objective.evaluate(p.position) for p in swarm.particles]

        assert np.array_equal(swarm.best(), swarm.particles[int(np.argmin(values))].position)

    def test_dominating_particle_becomes_global_best(self, sphere_objective):
        weak = Particle(np.array([3.0, 4.0]), np.zeros(2))
        strong = Particle(np.array([0.5, -0.5]), np.zeros(2))

        swarm = Swarm.from_particles([weak, strong], sphere_objective)

        assert np.array_equal(swarm.best(), [0.5, -0.5])

    def test_empty_population_rejected(self, sphere_objective):
        with pytest.raises(ConfigurationError):
            make_swarm(sphere_objective, size=0)

        with pytest.raises(ConfigurationError):
            Swarm.from_particles([], sphere_objective)

    def test_zero_dimensions_rejected(self, sphere_objective):
        with pytest.raises(ConfigurationError):
            make_swarm(sphere_objective, dimensions=0)

    def test_mixed_dimensions_rejected(self, sphere_objective):
        particles = [Particle(np.zeros(2), np.zeros(2)), Particle(np.zeros(3), np.zeros(3))]

        with pytest.raises(ConfigurationError):
            Swarm.from_particles(particles, sphere_objective)

    def test_invalid_worker_count_rejected(self, sphere_objective):
        with pytest.raises(ConfigurationError):
            make_swarm(sphere_objective, max_workers=0)

    def test_nan_during_construction(self):
        with pytest.raises(NonFiniteFitnessError):
            make_swarm(Objective(lambda x: math.nan))


class TestSwarmStep:
    """Tests for a single swarm iteration."""

    def test_zero_coefficients_keep_particle_still(self, sphere_objective):
        particle = Particle(np.array([3.0, 4.0]), np.zeros(2))
        swarm = Swarm.from_particles([particle], sphere_objective)

        report = swarm.step(SwarmOptions(omega=1.0, phi_1=0.0, phi_2=0.0))

        assert np.array_equal(particle.velocity, [0.0, 0.0])
        assert np.array_equal(particle.position, [3.0, 4.0])
        assert np.array_equal(swarm.best(), [3.0, 4.0])
        assert sphere_objective.evaluate_for_maximization(swarm.best()) == -25.0
        assert report.omega == 1.0
        assert not report.global_best_changed

    def test_cognitive_term_vanishes_at_personal_best(self, sphere_objective, fixed_random):
        particle = Particle(np.array([3.0, 4.0]), np.zeros(2), rng=fixed_random(0.5))
        swarm = Swarm.from_particles([particle], sphere_objective)

        swarm.step(SwarmOptions(omega=0.0, phi_1=1.0, phi_2=0.0))

        assert np.array_equal(particle.velocity, [0.0, 0.0])
        assert np.array_equal(particle.position, [3.0, 4.0])

    def test_global_best_updates_from_current_positions(self, sphere_objective, fixed_random):
        moving = Particle(np.array([2.0, 0.0]), np.array([-2.0, 0.0]), rng=fixed_random(0.0))
        still = Particle(np.array([1.0, 0.0]), np.zeros(2), rng=fixed_random(0.0))
        swarm = Swarm.from_particles([moving, still], sphere_objective)
        assert np.array_equal(swarm.best(), [1.0, 0.0])

        report = swarm.step(SwarmOptions(omega=1.0, phi_1=0.0, phi_2=0.0))

        assert report.global_best_changed
        assert report.iteration == 1
        assert report.local_fitness == 0.0
        assert np.array_equal(swarm.best(), [0.0, 0.0])
        assert swarm.best_fitness() == 0.0

    def test_global_best_kept_on_tie(self, sphere_objective, fixed_random):
        particle = Particle(np.array([3.0, 4.0]), np.array([1.0, -1.0]), rng=fixed_random(0.0))
        swarm = Swarm.from_particles([particle], sphere_objective)

        report = swarm.step(SwarmOptions(omega=1.0, phi_1=0.0, phi_2=0.0))

        assert np.array_equal(particle.position, [4.0, 3.0])
        assert np.array_equal(swarm.best(), [3.0, 4.0])
        assert not report.global_best_changed

    def test_global_best_frozen_during_particle_phase(self, sphere_objective, fixed_random):
        """Every particle is pulled toward the best known before the step."""
        leader = Particle(np.array([1.0, 0.0]), np.array([-1.0, 0.0]), rng=fixed_random(1.0))
        follower = Particle(np.array([5.0, 0.0]), np.zeros(2), rng=fixed_random(1.0))
        swarm = Swarm.from_particles([leader, follower], sphere_objective)

        swarm.step(SwarmOptions(omega=1.0, phi_1=0.0, phi_2=1.0))

        # Leader moved to the origin, but the follower still saw (1, 0)
        assert np.array_equal(leader.position, [0.0, 0.0])
        assert np.allclose(follower.velocity, [-4.0, 0.0])
        assert np.array_equal(swarm.best(), [0.0, 0.0])

    def test_random_omega_shared_within_step(self, sphere_objective, monkeypatch):
        seen = []
        original = Particle.update

        def spy(self, global_best, options, objective):
            seen.append(options.omega)
            return original(self, global_best, options, objective)

        monkeypatch.setattr(Particle, "update", spy)
        swarm = make_swarm(sphere_objective, size=8)

        first = swarm.step(SwarmOptions(omega=None))
        assert seen == [first.omega] * 8
        assert 0.0 <= first.omega < 1.0

        seen.clear()
        second = swarm.step(SwarmOptions(omega=None))
        assert seen == [second.omega] * 8
        assert second.omega != first.omega

    def test_fixed_omega_used_for_every_step(self, sphere_objective):
        swarm = make_swarm(sphere_objective)
        options = SwarmOptions(omega=0.6, phi_1=1.0, phi_2=1.0)

        assert [swarm.step(options).omega for _ in range(3)] == [0.6, 0.6, 0.6]

    def test_default_options(self, sphere_objective):
        swarm = make_swarm(sphere_objective)
        report = swarm.step()
        assert 0.0 <= report.omega < 1.0

    def test_nan_aborts_step(self):
        objective = Objective(lambda x: math.nan if x[0] > 10.0 else float(x[0] ** 2))
        particle = Particle(np.array([1.0]), np.array([20.0]))
        swarm = Swarm.from_particles([particle], objective)

        with pytest.raises(NonFiniteFitnessError):
            swarm.step(SwarmOptions(omega=1.0, phi_1=0.0, phi_2=0.0))

    def test_subtract_sign_configurable(self, sphere_objective, fixed_random):
        particle = Particle(
            np.array([1.0, 1.0]), np.array([1.0, 1.0]),
            rng=fixed_random(0.0), update_sign=UpdateSign.SUBTRACT,
        )
        swarm = Swarm.from_particles([particle], sphere_objective)

        swarm.step(SwarmOptions(omega=1.0, phi_1=0.0, phi_2=0.0))

        assert np.array_equal(particle.position, [0.0, 0.0])
        assert np.array_equal(swarm.best(), [0.0, 0.0])


class TestSwarmInvariants:
    """Properties that hold across a whole run."""

    def setup_method(self):
        """Setup test fixtures."""
        self.objective = Objective(rastrigin, minimize=True)
        self.options = SwarmOptions(omega=None, phi_1=2.0, phi_2=2.0)

    def test_global_best_never_regresses(self):
        swarm = make_swarm(self.objective, size=10, dimensions=3, seed=7)
        previous = self.objective.evaluate_for_maximization(swarm.best())

        for _ in range(50):
            swarm.step(self.options)
            current = self.objective.evaluate_for_maximization(swarm.best())
            assert current >= previous
            previous = current

    def test_personal_bests_never_regress(self):
        swarm = make_swarm(self.objective, size=10, dimensions=3, seed=11)
        previous = [self.objective.evaluate_for_maximization(p.personal_best) for p in swarm.particles]

        for _ in range(50):
            swarm.step(self.options)
            current = [self.objective.evaluate_for_maximization(p.personal_best) for p in swarm.particles]
            assert all(c >= p for c, p in zip(current, previous))
            previous = current

    def test_global_best_dominates_personal_bests(self):
        swarm = make_swarm(self.objective, size=10, dimensions=3, seed=3)

        for _ in range(30):
            swarm.step(self.options)
            best = self.objective.evaluate_for_maximization(swarm.best())
            for particle in swarm.particles:
                assert best >= self.objective.evaluate_for_maximization(particle.personal_best)

    def test_dimensions_preserved(self):
        swarm = make_swarm(self.objective, size=6, dimensions=5, seed=1)

        for _ in range(20):
            swarm.step(self.options)
            assert swarm.best().shape == (5,)
            for particle in swarm.particles:
                assert particle.position.shape == (5,)
                assert particle.velocity.shape == (5,)
                assert particle.personal_best.shape == (5,)

    def test_read_accessors_idempotent(self):
        swarm = make_swarm(self.objective, seed=5)
        swarm.step(self.options)

        assert np.array_equal(swarm.best(), swarm.best())
        for particle in swarm.particles:
            assert np.array_equal(particle.position, particle.position)
            assert np.array_equal(particle.velocity, particle.velocity)

    def test_best_is_read_only(self):
        swarm = make_swarm(self.objective)

        with pytest.raises(ValueError):
            swarm.best()[0] = 0.0

    def test_same_seed_same_trajectory(self):
        first = trajectory(make_swarm(self.objective, seed=123), 25, self.options)
        second = trajectory(make_swarm(self.objective, seed=123), 25, self.options)

        for (x1, v1, g1), (x2, v2, g2) in zip(first, second):
            assert np.array_equal(x1, x2)
            assert np.array_equal(v1, v2)
            assert np.array_equal(g1, g2)

    def test_different_seed_different_trajectory(self):
        first = trajectory(make_swarm(self.objective, seed=1), 3, self.options)
        second = trajectory(make_swarm(self.objective, seed=2), 3, self.options)

        assert not np.array_equal(first[-1][0], second[-1][0])

    def test_threaded_updates_match_sequential(self):
        sequential = trajectory(make_swarm(self.objective, seed=99), 20, self.options)
        threaded = trajectory(make_swarm(self.objective, seed=99, max_workers=4), 20, self.options)

        for (x1, v1, g1), (x2, v2, g2) in zip(sequential, threaded):
            assert np.array_equal(x1, x2)
            assert np.array_equal(v1, v2)
            assert np.array_equal(g1, g2)

    def test_constant_distribution_initialization(self):
        swarm = Swarm(
            size=3,
            dimensions=2,
            position_distribution=Constant(1.5),
            velocity_distribution=Constant(0.0),
            objective=self.objective,
        )

        for particle in swarm.particles:
            assert np.array_equal(particle.position, [1.5, 1.5])
            assert np.array_equal(particle.velocity, [0.0, 0.0])


class TestSwarmConvergence:
    """Sanity checks that the swarm actually optimizes."""

    def test_minimizes_sphere(self):
        objective = Objective(sphere, minimize=True)
        swarm = make_swarm(objective, size=20, dimensions=2, seed=0)
        options = SwarmOptions(omega=0.7, phi_1=1.5, phi_2=1.5)
        initial = swarm.best_fitness()

        for _ in range(150):
            swarm.step(options)

        assert swarm.best_fitness() < initial
        assert swarm.best_fitness() < 1e-2

    def test_maximizes_negated_sphere(self):
        objective = Objective(lambda x: -sphere(x), minimize=False)
        swarm = make_swarm(objective, size=20, dimensions=2, seed=0)
        options = SwarmOptions(omega=0.7, phi_1=1.5, phi_2=1.5)

        for _ in range(150):
            swarm.step(options)

        assert swarm.best_fitness() > -1e-2
