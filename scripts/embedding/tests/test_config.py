"""
Tests for configuration resolution.
"""
import logging
from pathlib import Path

import pytest

from reduction import DimensionReductionMethod, EigenMethod, NeighborsMethod
from scripts.embedding.config import (
    ConfigurationError,
    ConfigurationResolver,
    MissingInputFileError,
    OutOfRangeParameterError,
    PipelineConfig,
    UnknownEigenMethodError,
    UnknownMethodError,
    UnknownNeighborsMethodError,
)


class TestResolveParameters:
    """Test suite for ConfigurationResolver.resolve_parameters."""

    @pytest.fixture
    def resolver(self):
        return ConfigurationResolver()

    def test_defaults(self, resolver, parse_args):
        """Test that parser defaults resolve to the documented parameter values."""
        parameters = resolver.resolve_parameters(parse_args([]))

        assert parameters.method is DimensionReductionMethod.LOCALLY_LINEAR_EMBEDDING
        assert parameters.num_neighbors == 10
        assert parameters.target_dimension == 2
        assert parameters.spe_global_strategy is True
        assert parameters.check_connectivity is True

    def test_alias_equivalent_to_canonical_name(self, resolver, parse_args):
        """Test that an abbreviation and its canonical name give the same bag."""
        by_alias = resolver.resolve_parameters(parse_args(["--method", "lltsa"]))
        by_name = resolver.resolve_parameters(
            parse_args(["--method", "linear_local_tangent_space_alignment"]))

        assert by_alias == by_name

    def test_values_forwarded(self, resolver, parse_args):
        """Test that every CLI value lands in the matching parameter."""
        args = parse_args([
            "-m", "dm", "-nm", "brute", "-em", "dense", "-td", "3", "-k", "7",
            "-gw", "2.5", "--timesteps", "4", "--spe-local", "--eigenshift", "1e-6",
            "--landmark-ratio", "0.5", "--spe-tolerance", "1e-3", "--spe-num-updates", "20",
            "--max-iters", "50", "--fa-epsilon", "1e-4", "--sne-perplexity", "12",
            "--sne-theta", "0.2",
        ])

        parameters = resolver.resolve_parameters(args)

        assert parameters.method is DimensionReductionMethod.DIFFUSION_MAP
        assert parameters.neighbors_method is NeighborsMethod.BRUTE
        assert parameters.eigen_method is EigenMethod.DENSE
        assert parameters.target_dimension == 3
        assert parameters.num_neighbors == 7
        assert parameters.gaussian_kernel_width == 2.5
        assert parameters.diffusion_map_timesteps == 4
        assert parameters.spe_global_strategy is False
        assert parameters.nullspace_shift == 1e-6
        assert parameters.landmark_ratio == 0.5
        assert parameters.spe_tolerance == 1e-3
        assert parameters.spe_num_updates == 20
        assert parameters.max_iteration == 50
        assert parameters.fa_epsilon == 1e-4
        assert parameters.sne_perplexity == 12.0
        assert parameters.sne_theta == 0.2

    def test_unknown_method(self, resolver, parse_args):
        """Test that an unknown method is rejected with the method name."""
        with pytest.raises(UnknownMethodError, match="Unknown method umap"):
            resolver.resolve_parameters(parse_args(["--method", "umap"]))

    def test_unknown_neighbors_method(self, resolver, parse_args):
        with pytest.raises(UnknownNeighborsMethodError):
            resolver.resolve_parameters(parse_args(["--neighbors-method", "kdtree"]))

    def test_unknown_eigen_method(self, resolver, parse_args):
        with pytest.raises(UnknownEigenMethodError):
            resolver.resolve_parameters(parse_args(["--eigen-method", "lanczos"]))

    @pytest.mark.parametrize("k", ["2", "0", "-5"])
    def test_too_few_neighbors(self, resolver, parse_args, k):
        """Test that fewer than three neighbors is rejected."""
        with pytest.raises(OutOfRangeParameterError, match="consider at least 10"):
            resolver.resolve_parameters(parse_args(["-k", k]))

    def test_three_neighbors_accepted(self, resolver, parse_args):
        assert resolver.resolve_parameters(parse_args(["-k", "3"])).num_neighbors == 3

    def test_zero_target_dimension_accepted(self, resolver, parse_args):
        assert resolver.resolve_parameters(parse_args(["-td", "0"])).target_dimension == 0

    def test_negative_target_dimension(self, resolver, parse_args):
        with pytest.raises(OutOfRangeParameterError, match="Please visit other universe"):
            resolver.resolve_parameters(parse_args(["-td", "-1"]))

    def test_negative_gaussian_width(self, resolver, parse_args):
        with pytest.raises(OutOfRangeParameterError, match="Width of the gaussian kernel is negative"):
            resolver.resolve_parameters(parse_args(["-gw", "-0.5"]))

    def test_negative_timesteps(self, resolver, parse_args):
        with pytest.raises(OutOfRangeParameterError, match="Number of timesteps is negative"):
            resolver.resolve_parameters(parse_args(["--timesteps", "-1"]))

    def test_unchecked_values_pass_through(self, resolver, parse_args):
        """Test that ranges left to the methods are not validated here."""
        args = parse_args(["--landmark-ratio", "1.5", "--max-iters", "0", "--sne-perplexity", "-1",
                           "-gw", "0"])

        parameters = resolver.resolve_parameters(args)

        assert parameters.landmark_ratio == 1.5
        assert parameters.max_iteration == 0
        assert parameters.gaussian_kernel_width == 0.0

    def test_errors_are_configuration_errors(self):
        for error in (UnknownMethodError, UnknownNeighborsMethodError, UnknownEigenMethodError,
                      OutOfRangeParameterError, MissingInputFileError):
            assert issubclass(error, ConfigurationError)


class TestResolvePipeline:
    """Test suite for ConfigurationResolver.resolve_pipeline."""

    def test_missing_input_file(self, parse_args):
        with pytest.raises(MissingInputFileError, match="No input file specified"):
            ConfigurationResolver().resolve_pipeline(parse_args(["-o", "out.dat"]))

    def test_missing_output_file_warns(self, parse_args, caplog):
        """Test that omitting the output file falls back to standard output with a warning."""
        with caplog.at_level(logging.WARNING, logger='embedding'):
            config = ConfigurationResolver().resolve_pipeline(parse_args(["-i", "in.dat"]))

        assert config.output_file is None
        assert "No output file specified, using standard output" in caplog.text

    def test_projection_needs_both_files(self, parse_args):
        only_matrix = ConfigurationResolver().resolve_pipeline(
            parse_args(["-i", "in.dat", "-o", "out.dat", "-opmat", "proj.dat"]))
        both = ConfigurationResolver().resolve_pipeline(
            parse_args(["-i", "in.dat", "-o", "out.dat", "-opmat", "proj.dat", "-opmean", "mean.dat"]))

        assert not only_matrix.output_projection
        assert both.output_projection
        assert both.projection_mean_file == Path("mean.dat")

    def test_run_settings_forwarded(self, parse_args):
        config = ConfigurationResolver().resolve_pipeline(parse_args([
            "-i", "in.dat", "-o", "out.dat", "--transpose",
            "--callback-strategy", "precomputed", "--seed", "11",
        ]))

        assert config.input_file == Path("in.dat")
        assert config.transpose is True
        assert config.callback_strategy == "precomputed"
        assert config.seed == 11


def test_pipeline_config_converts_paths():
    config = PipelineConfig(input_file="data.txt", output_file="out.txt")

    assert config.input_file == Path("data.txt")
    assert config.output_file == Path("out.txt")
    assert config.projection_matrix_file is None
