"""
Unit tests for the HyperVec factories module.

Tests cover:
- Curvature learner registration and creation
- Algebra creation by geometry
- Configuration presets and overrides
- Wiring of a complete component set
"""

import copy
import unittest

from hypervec.config import HyperVecConfig
from hypervec.conversion import AdaptiveCurvatureConverter
from hypervec.core import EuclideanOperations, PoincareOperations, SpaceType
from hypervec.exceptions import ConfigurationError, UnsupportedSpaceError
from hypervec.factories import (
    LearnerType,
    CurvatureLearnerFactory,
    OperationsFactory,
    ConfigurationFactory,
    create_components,
    create_collection_config
)
from hypervec.index import FlatVectorIndex
from hypervec.learning import (
    CurvatureLearner,
    GradientDescentCurvatureLearner,
    GridSearchCurvatureLearner,
)
from hypervec.storage import InMemoryVectorStorage, StorageFormat, VectorType
from tests import TestFixtures


class FixedCurvatureLearner(CurvatureLearner):
    """Learner that always proposes the same curvature."""

    def learn_optimal_curvature(self, hierarchy, options=None):
        self._last_learned_curvature = -3.0
        return -3.0


class TestCurvatureLearnerFactory(unittest.TestCase):
    """Test CurvatureLearnerFactory class."""

    def setUp(self):
        """Set up test fixtures."""
        # Store original registry to restore after tests
        self.original_registry = CurvatureLearnerFactory._learner_registry.copy()

    def tearDown(self):
        """Restore original registry."""
        CurvatureLearnerFactory._learner_registry = self.original_registry

    def test_get_available_learners(self):
        """Test getting available learners."""
        learners = CurvatureLearnerFactory.get_available_learners()

        self.assertIn("grid_search", learners)
        self.assertIn("gradient_descent", learners)
        self.assertIsInstance(learners, dict)

    def test_create_by_type(self):
        """Test creating learners by enum member."""
        self.assertIsInstance(
            CurvatureLearnerFactory.create_learner(LearnerType.GRID_SEARCH), GridSearchCurvatureLearner
        )
        self.assertIsInstance(
            CurvatureLearnerFactory.create_learner(LearnerType.GRADIENT_DESCENT), GradientDescentCurvatureLearner
        )

    def test_create_by_name_with_kwargs(self):
        """Test creating a learner by name with constructor arguments."""
        learner = CurvatureLearnerFactory.create_learner("gradient_descent", seed=3)
        self.assertEqual(learner.seed, 3)

    def test_create_unknown_learner(self):
        """Test creating a learner that is not registered."""
        with self.assertRaises(ConfigurationError) as cm:
            CurvatureLearnerFactory.create_learner("simulated_annealing")
        self.assertIn("Unknown learner type", str(cm.exception))

    def test_create_with_bad_arguments(self):
        """Test creating a learner with unexpected arguments."""
        with self.assertRaises(ConfigurationError):
            CurvatureLearnerFactory.create_learner("grid_search", seed=1)

    def test_register_learner(self):
        """Test registering a new learner."""
        CurvatureLearnerFactory.register_learner("fixed", FixedCurvatureLearner)

        learner = CurvatureLearnerFactory.create_learner("fixed")
        self.assertIsInstance(learner, FixedCurvatureLearner)
        self.assertEqual(learner.learn_optimal_curvature({}), -3.0)

    def test_register_invalid_learner(self):
        """Test registering a class that is not a learner."""
        with self.assertRaises(ConfigurationError):
            CurvatureLearnerFactory.register_learner("bad", dict)

    def test_create_default_learner(self):
        """Test creating the default learner."""
        self.assertIsInstance(CurvatureLearnerFactory.create_default_learner(), GridSearchCurvatureLearner)

    def test_create_from_config(self):
        """Test creating the learner named by a configuration."""
        config = HyperVecConfig.from_dict({"learning": {"strategy": "gradient_descent", "seed": 9}})
        learner = CurvatureLearnerFactory.create_from_config(config)

        self.assertIsInstance(learner, GradientDescentCurvatureLearner)
        self.assertEqual(learner.seed, 9)
        self.assertEqual(learner.default_options["seed"], 9)
        self.assertEqual(learner.default_options["max_iterations"], 100)

    def test_config_bounds_reach_learner(self):
        """Test that configured curvature bounds apply to learning."""
        config = HyperVecConfig.from_dict({"learning": {"min_curvature": -10.0}})
        learner = CurvatureLearnerFactory.create_from_config(config)
        hierarchy = TestFixtures.create_chain_hierarchy(60)

        self.assertAlmostEqual(learner.learn_optimal_curvature(hierarchy), -7.5)
        self.assertEqual(learner.learn_optimal_curvature(hierarchy, {"min_curvature": -6.0}), -6.0)


class TestOperationsFactory(unittest.TestCase):
    """Test OperationsFactory class."""

    def test_create_operations(self):
        """Test creating algebras by geometry."""
        self.assertIsInstance(OperationsFactory.create_operations(SpaceType.EUCLIDEAN), EuclideanOperations)
        self.assertIsInstance(OperationsFactory.create_operations("poincare_ball"), PoincareOperations)

    def test_unsupported_space(self):
        """Test geometries without an algebra."""
        with self.assertRaises(UnsupportedSpaceError):
            OperationsFactory.create_operations(SpaceType.LORENTZ)
        with self.assertRaises(UnsupportedSpaceError):
            OperationsFactory.create_operations("spherical")


class TestConfigurationFactory(unittest.TestCase):
    """Test ConfigurationFactory class."""

    def setUp(self):
        """Set up test fixtures."""
        self.original_presets = copy.deepcopy(ConfigurationFactory._preset_configs)

    def tearDown(self):
        """Restore original presets."""
        ConfigurationFactory._preset_configs = self.original_presets

    def test_get_available_presets(self):
        """Test getting available presets."""
        presets = ConfigurationFactory.get_available_presets()

        self.assertIn("default", presets)
        self.assertIn("deep_hierarchy", presets)
        self.assertIn("fast", presets)

    def test_create_default_config(self):
        """Test creating the default configuration."""
        config = ConfigurationFactory.create_config()
        self.assertEqual(config.learning.strategy, "grid_search")
        self.assertEqual(config.conversion.max_radius, 0.9)

    def test_create_preset_config(self):
        """Test creating preset configurations."""
        deep = ConfigurationFactory.create_config("deep_hierarchy")
        self.assertEqual(deep.learning.min_curvature, -10.0)
        self.assertEqual(deep.conversion.max_radius, 0.95)

        fast = ConfigurationFactory.create_config("fast")
        self.assertEqual(fast.learning.strategy, "gradient_descent")
        self.assertEqual(fast.learning.max_iterations, 20)
        self.assertEqual(fast.search.default_k, 5)

    def test_create_config_with_overrides(self):
        """Test creating configuration with overrides."""
        config = ConfigurationFactory.create_config("fast", learning={"max_iterations": 50})

        self.assertEqual(config.learning.max_iterations, 50)
        self.assertEqual(config.learning.strategy, "gradient_descent")

    def test_overrides_do_not_modify_preset(self):
        """Test that overrides leave the stored preset untouched."""
        ConfigurationFactory.create_config("fast", learning={"max_iterations": 50})
        self.assertEqual(ConfigurationFactory.create_config("fast").learning.max_iterations, 20)

    def test_unknown_preset(self):
        """Test creating configuration from an unknown preset."""
        with self.assertRaises(ConfigurationError) as cm:
            ConfigurationFactory.create_config("turbo")
        self.assertIn("Unknown preset", str(cm.exception))

    def test_register_preset(self):
        """Test registering a new preset."""
        ConfigurationFactory.register_preset("narrow", {"search": {"default_k": 2}})
        self.assertEqual(ConfigurationFactory.create_config("narrow").search.default_k, 2)


class TestCreateComponents(unittest.TestCase):
    """Test create_components function."""

    def test_default_components(self):
        """Test wiring with the default configuration."""
        components = create_components()

        self.assertIsInstance(components["config"], HyperVecConfig)
        self.assertIsInstance(components["learner"], GridSearchCurvatureLearner)
        self.assertIsInstance(components["converter"], AdaptiveCurvatureConverter)
        self.assertIsInstance(components["storage"], InMemoryVectorStorage)
        self.assertIsInstance(components["index"], FlatVectorIndex)
        self.assertIs(components["index"].storage, components["storage"])
        self.assertIs(components["converter"].curvature_learner, components["learner"])

    def test_components_follow_config(self):
        """Test wiring with a custom configuration."""
        config = HyperVecConfig.from_dict({
            "learning": {"strategy": "gradient_descent"},
            "conversion": {"curvature": -2.0},
        })
        components = create_components(config)

        self.assertIsInstance(components["learner"], GradientDescentCurvatureLearner)
        self.assertEqual(components["converter"].current_curvature, -2.0)

    def test_deep_hierarchy_preset(self):
        """Test that the deep hierarchy preset changes the learned curvature."""
        hierarchy = TestFixtures.create_chain_hierarchy(60)

        default = create_components()["converter"]
        deep = create_components(ConfigurationFactory.create_config("deep_hierarchy"))["converter"]

        self.assertEqual(default.learn_curvature(hierarchy), -5.0)
        self.assertAlmostEqual(deep.learn_curvature(hierarchy), -7.5)
        self.assertEqual(default.max_radius, 0.9)
        self.assertEqual(deep.max_radius, 0.95)

    def test_fast_preset(self):
        """Test that the fast preset reaches the learner and the index."""
        components = create_components(ConfigurationFactory.create_config("fast"))

        self.assertEqual(components["learner"].default_options["max_iterations"], 20)
        self.assertEqual(components["learner"].default_options["threshold"], 1e-3)
        self.assertEqual(components["index"].default_k, 5)


class TestCreateCollectionConfig(unittest.TestCase):
    """Test create_collection_config function."""

    def test_euclidean(self):
        """Test the storage format comes from the search settings."""
        config = HyperVecConfig.from_dict({"search": {"storage_format": "float16"}})
        collection_config = create_collection_config(config, 8)

        self.assertEqual(collection_config.dimension, 8)
        self.assertEqual(collection_config.vector_type, VectorType.EUCLIDEAN)
        self.assertEqual(collection_config.storage_format, StorageFormat.FLOAT16)

    def test_poincare_uses_conversion_curvature(self):
        """Test Poincaré collections take the configured curvature."""
        config = HyperVecConfig.from_dict({"conversion": {"curvature": -2.5}})
        collection_config = create_collection_config(config, 4, "poincare_ball")

        self.assertEqual(collection_config.vector_type, VectorType.HYPERBOLIC_POINCARE)
        self.assertEqual(collection_config.curvature, -2.5)

    def test_unsupported_space(self):
        """Test geometries without a collection layout."""
        with self.assertRaises(UnsupportedSpaceError):
            create_collection_config(HyperVecConfig(), 4, SpaceType.LORENTZ)
        with self.assertRaises(UnsupportedSpaceError):
            create_collection_config(HyperVecConfig(), 4, "spherical")


if __name__ == '__main__':
    unittest.main()
