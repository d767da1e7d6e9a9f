"""
End-to-end tests for the embedding command-line tool.
"""
import io
import logging
from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from reduction import LoggingConfig
from scripts.embedding.embed import EmbeddingPipeline, create_argument_parser, main

SOLVERS = ["-nm", "brute", "-em", "dense"]


class TestMain:
    """Test suite for the main entry point."""

    def test_embedding_to_standard_output(self, input_file, caplog):
        """Test that omitting --output-file writes to standard output with a warning."""
        stdout = io.StringIO()

        with caplog.at_level(logging.WARNING):
            status = main(["-i", str(input_file), "--transpose", "-m", "lle", *SOLVERS], stdout=stdout)

        assert status == 0
        coordinates = np.loadtxt(io.StringIO(stdout.getvalue()))
        assert coordinates.shape == (60, 2)
        assert np.all(np.isfinite(coordinates))
        assert "No output file specified, using standard output" in caplog.text

    def test_embedding_to_file(self, input_file, temp_dir):
        output = temp_dir / "out.dat"

        status = main(["-i", str(input_file), "--transpose", "-o", str(output),
                       "-m", "kpca", "-td", "3", *SOLVERS])

        assert status == 0
        assert np.loadtxt(output).shape == (60, 3)

    def test_unknown_method_writes_nothing(self, input_file, temp_dir, caplog):
        """Test that an unknown method is logged and produces zero bytes."""
        stdout = io.StringIO()
        output = temp_dir / "out.dat"

        with caplog.at_level(logging.ERROR):
            status = main(["-i", str(input_file), "-m", "umap"], stdout=stdout)
            status_with_file = main(["-i", str(input_file), "-o", str(output), "-m", "umap"])

        assert status == 0
        assert status_with_file == 0
        assert stdout.getvalue() == ""
        assert not output.exists()
        assert "Unknown method umap" in caplog.text

    def test_missing_input_file(self, temp_dir, caplog):
        output = temp_dir / "out.dat"

        with caplog.at_level(logging.ERROR):
            status = main(["-o", str(output)])

        assert status == 0
        assert not output.exists()
        assert "No input file specified" in caplog.text

    def test_algorithm_failure_is_reported(self, input_file, capsys):
        """Test that a failing method surfaces its message and still returns 0."""
        status = main(["-i", str(input_file), "--transpose", "-m", "hlle", "-k", "4",
                       *SOLVERS], stdout=io.StringIO())

        assert status == 0
        assert "Some error occurred:" in capsys.readouterr().out

    def test_linear_method_writes_projection(self, input_file, temp_dir, swiss_roll):
        """Test that the projection matrix and mean go to their own files."""
        matrix_file = temp_dir / "proj.dat"
        mean_file = temp_dir / "mean.dat"

        main(["-i", str(input_file), "--transpose", "-o", str(temp_dir / "out.dat"), "-m", "pca",
              "-opmat", str(matrix_file), "-opmean", str(mean_file), *SOLVERS])

        assert np.loadtxt(matrix_file).shape == (3, 2)
        np.testing.assert_allclose(np.loadtxt(mean_file), swiss_roll.mean(axis=0))

    def test_nonlinear_method_leaves_projection_files_empty(self, input_file, temp_dir):
        matrix_file = temp_dir / "proj.dat"
        mean_file = temp_dir / "mean.dat"

        main(["-i", str(input_file), "--transpose", "-o", str(temp_dir / "out.dat"), "-m", "mds",
              "-opmat", str(matrix_file), "-opmean", str(mean_file), *SOLVERS])

        assert matrix_file.read_text() == ""
        assert mean_file.read_text() == ""

    def test_precomputed_strategy_with_benchmark(self, input_file, temp_dir, caplog):
        output = temp_dir / "out.dat"

        with caplog.at_level(logging.INFO, logger='embedding.benchmark'):
            main(["-i", str(input_file), "--transpose", "-o", str(output), "-m", "mds",
                  "--callback-strategy", "precomputed", "--benchmark", *SOLVERS])

        assert np.loadtxt(output).shape == (60, 2)
        assert "Distance matrix computation took" in caplog.text
        assert "Kernel matrix computation" not in caplog.text

    def test_seeded_runs_are_reproducible(self, input_file, temp_dir):
        first = temp_dir / "first.dat"
        second = temp_dir / "second.dat"
        common = ["-i", str(input_file), "--transpose", "-m", "spe", "--max-iters", "50",
                  "--seed", "5", *SOLVERS]

        main([*common, "-o", str(first)])
        main([*common, "-o", str(second)])

        assert first.read_text() == second.read_text()

    def test_bad_number_exits_through_argparse(self):
        with pytest.raises(SystemExit) as excinfo:
            main(["-k", "ten"])

        assert excinfo.value.code == 2


class TestEmbeddingPipeline:
    """Test suite for EmbeddingPipeline."""

    def test_run_reports_configuration_failure(self, temp_dir):
        args = create_argument_parser().parse_args(["-i", str(temp_dir / "absent.dat")])
        log = LoggingConfig()

        assert EmbeddingPipeline(args, log).run() is False

    @patch('scripts.embedding.embed.EmbeddingInvoker')
    def test_projection_released_after_writing(self, mock_invoker, input_file, temp_dir):
        """Test that the pipeline clears the projection once it is written."""
        projection = MagicMock()
        mock_invoker.return_value.invoke.return_value = (np.zeros((2, 60)), projection)
        args = create_argument_parser().parse_args(
            ["-i", str(input_file), "--transpose", "-o", str(temp_dir / "out.dat")])
        log = LoggingConfig()

        assert EmbeddingPipeline(args, log).run() is True
        projection.clear.assert_called_once()
