"""Tests for exporting resolved secrets."""
import io

from vault_gate.secrets.domains.models import SecretRequest, SecretResult
from vault_gate.secrets.workflows.exporters import export_results, mask_commands


def result(value, output="token", env="TOKEN"):
    request = SecretRequest(path="secret/data/ci", selector="token", output_var_name=output, env_var_name=env)
    return SecretResult(request=request, value=value)


class TestExportResults:
    """Test suite for export_results."""

    def test_prints_masks_and_exports(self):
        """Test shell export output when no GitHub files are given."""
        stream = io.StringIO()

        outputs = export_results([result("it's secret")], stream=stream)

        lines = stream.getvalue().splitlines()
        assert lines == ["::add-mask::it's secret", "export TOKEN='it'\"'\"'s secret'"]
        assert outputs == {"token": "it's secret"}

    def test_multiline_value_masked_per_line(self):
        """Test that each non-empty line of a value is masked."""
        assert list(mask_commands("line1\r\n\nline2\n")) == ["::add-mask::line1", "::add-mask::line2"]

    def test_github_files(self, tmp_path):
        """Test that outputs and env are appended as delimited records."""
        github_env = tmp_path / "env"
        github_output = tmp_path / "output"
        stream = io.StringIO()

        export_results(
            [result("a\nb"), result("c", output="other", env="OTHER")],
            github_env=str(github_env),
            github_output=str(github_output),
            stream=stream,
        )

        env_lines = github_env.read_text().splitlines()
        assert env_lines[0].startswith("TOKEN<<ghadelimiter_")
        assert env_lines[1:3] == ["a", "b"]
        assert env_lines[3] == env_lines[0].split("<<")[1]
        assert env_lines[4].startswith("OTHER<<")

        output_text = github_output.read_text()
        assert output_text.startswith("token<<")
        assert "other<<" in output_text
        assert "export" not in stream.getvalue()

    def test_no_export_env(self, tmp_path):
        """Test that env exports can be disabled."""
        github_env = tmp_path / "env"
        stream = io.StringIO()

        outputs = export_results([result("v")], export_env=False, github_env=str(github_env), stream=stream)

        assert not github_env.exists()
        assert "export" not in stream.getvalue()
        assert outputs == {"token": "v"}

    def test_empty_results(self):
        """Test that nothing is written for an empty batch."""
        stream = io.StringIO()

        assert export_results([], stream=stream) == {}
        assert stream.getvalue() == ""
