"""Tests for method identifiers, alias tables and method traits."""

import pytest

from reduction import (
    DimensionReductionMethod,
    EigenMethod,
    NeighborsMethod,
    ParameterBag,
    get_available_methods,
    method_is_linear,
    method_needs_distance,
    method_needs_kernel,
    parse_eigen_method,
    parse_neighbors_method,
    parse_reduction_method,
)
from reduction.methods import METHOD_ALIASES

M = DimensionReductionMethod


class TestParseReductionMethod:
    """Test resolution of method names."""

    @pytest.mark.parametrize("alias,canonical", [
        ("lle", "locally_linear_embedding"),
        ("npe", "neighborhood_preserving_embedding"),
        ("ltsa", "local_tangent_space_alignment"),
        ("lltsa", "linear_local_tangent_space_alignment"),
        ("hlle", "hessian_locally_linear_embedding"),
        ("la", "laplacian_eigenmaps"),
        ("lpp", "locality_preserving_projections"),
        ("dm", "diffusion_map"),
        ("l-isomap", "landmark_isomap"),
        ("mds", "multidimensional_scaling"),
        ("l-mds", "landmark_multidimensional_scaling"),
        ("spe", "stochastic_proximity_embedding"),
        ("kpca", "kernel_pca"),
        ("ra", "random_projection"),
        ("fa", "factor_analysis"),
        ("t-sne", "t-stochastic_neighborhood_embedding"),
    ])
    def test_alias_and_canonical_name_agree(self, alias, canonical):
        assert parse_reduction_method(alias) is parse_reduction_method(canonical)

    def test_every_member_resolves_by_canonical_name(self):
        for member in DimensionReductionMethod:
            assert parse_reduction_method(member.value) is member

    def test_names_without_alias(self):
        assert parse_reduction_method("isomap") is M.ISOMAP
        assert parse_reduction_method("pca") is M.PCA

    @pytest.mark.parametrize("name", ["LLE", "Pca", "tsne", "", "locally linear embedding", "lle "])
    def test_unknown_names_rejected(self, name):
        with pytest.raises(ValueError, match="Unknown method"):
            parse_reduction_method(name)

    def test_alias_table_covers_documented_abbreviations(self):
        assert len(METHOD_ALIASES) == 16
        assert set(METHOD_ALIASES.values()) == set(M) - {M.ISOMAP, M.PCA}


class TestParseSolverMethods:
    """Test resolution of neighbors and eigen method names."""

    def test_neighbors_methods(self):
        assert parse_neighbors_method("brute") is NeighborsMethod.BRUTE
        assert parse_neighbors_method("covertree") is NeighborsMethod.COVER_TREE

    def test_unknown_neighbors_method(self):
        with pytest.raises(ValueError, match="Unknown neighbors method"):
            parse_neighbors_method("kdtree")

    def test_eigen_methods(self):
        assert parse_eigen_method("arpack") is EigenMethod.ARPACK
        assert parse_eigen_method("randomized") is EigenMethod.RANDOMIZED
        assert parse_eigen_method("dense") is EigenMethod.DENSE

    def test_unknown_eigen_method(self):
        with pytest.raises(ValueError, match="Unknown eigendecomposition method"):
            parse_eigen_method("lapack")


class TestMethodTraits:
    """Test the capability predicates consulted by callback strategies."""

    def test_distance_only_methods(self):
        for method in (M.MULTIDIMENSIONAL_SCALING, M.ISOMAP, M.DIFFUSION_MAP,
                       M.STOCHASTIC_PROXIMITY_EMBEDDING, M.LAPLACIAN_EIGENMAPS):
            assert method_needs_distance(method)
            assert not method_needs_kernel(method)

    def test_kernel_only_methods(self):
        for method in (M.LOCALLY_LINEAR_EMBEDDING, M.LOCAL_TANGENT_SPACE_ALIGNMENT, M.KERNEL_PCA):
            assert method_needs_kernel(method)
            assert not method_needs_distance(method)

    def test_feature_methods_need_neither(self):
        for method in (M.PCA, M.RANDOM_PROJECTION, M.FACTOR_ANALYSIS, M.T_SNE):
            assert not method_needs_kernel(method)
            assert not method_needs_distance(method)

    def test_linear_methods(self):
        linear = {m for m in M if method_is_linear(m)}
        assert linear == {
            M.NEIGHBORHOOD_PRESERVING_EMBEDDING,
            M.LINEAR_LOCAL_TANGENT_SPACE_ALIGNMENT,
            M.LOCALITY_PRESERVING_PROJECTIONS,
            M.PCA,
            M.RANDOM_PROJECTION,
        }


class TestParameterBag:
    """Test ParameterBag defaults and mapping access."""

    def test_defaults(self):
        bag = ParameterBag()

        assert bag.method is M.LOCALLY_LINEAR_EMBEDDING
        assert bag.eigen_method is EigenMethod.ARPACK
        assert bag.neighbors_method is NeighborsMethod.COVER_TREE
        assert bag.num_neighbors == 10
        assert bag.target_dimension == 2
        assert bag.diffusion_map_timesteps == 1
        assert bag.gaussian_kernel_width == 1.0
        assert bag.max_iteration == 1000
        assert bag.spe_global_strategy is True
        assert bag.spe_num_updates == 100
        assert bag.spe_tolerance == 1e-5
        assert bag.landmark_ratio == 0.2
        assert bag.nullspace_shift == 1e-9
        assert bag.check_connectivity is True
        assert bag.fa_epsilon == 1e-5
        assert bag.sne_perplexity == 30.0
        assert bag.sne_theta == 0.5

    def test_mapping_access(self):
        bag = ParameterBag(num_neighbors=7)

        assert bag["num_neighbors"] == 7
        assert bag.to_dict()["num_neighbors"] == 7
        with pytest.raises(KeyError):
            bag["no_such_parameter"]

    def test_no_field_left_unset(self):
        assert all(value is not None for value in ParameterBag().to_dict().values())


def test_available_methods_lists_aliases():
    available = get_available_methods()

    assert "locally_linear_embedding (lle)" in available['method']
    assert "isomap" in available['method']
    assert available['neighbors_method'] == ["brute", "covertree"]
    assert available['eigen_method'] == ["arpack", "randomized", "dense"]
