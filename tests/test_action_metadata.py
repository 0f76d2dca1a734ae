"""
Tests for the composite action metadata in action.yml.
"""

from pathlib import Path

import pytest
import yaml

from leakskit.config.parser import INPUT_NAMES, read_env_inputs

ACTION_FILE = Path(__file__).resolve().parent.parent / "action.yml"


@pytest.fixture(scope="module")
def action() -> dict:
    with open(ACTION_FILE, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def _run_step(action: dict) -> dict:
    steps = action["runs"]["steps"]
    return next(step for step in steps if step.get("id") == "leakskit")


class TestActionMetadata:
    """Test that action.yml and the config reader agree."""

    def test_inputs_are_known(self, action):
        assert set(action["inputs"]) <= set(INPUT_NAMES)

    def test_version_required(self, action):
        assert action["inputs"]["version"]["required"] is True

    def test_every_input_reaches_environment(self, action):
        """Each declared input is forwarded under a name read_env_inputs accepts."""
        env = _run_step(action)["env"]
        environ = {key: f"value-of-{key}" for key in env}

        assert set(read_env_inputs(environ)) == set(action["inputs"])

    def test_outputs(self, action):
        assert set(action["outputs"]) == {"gitleaks-bin", "sarif", "exit-code"}
        for name, output in action["outputs"].items():
            assert output["value"] == f"${{{{ steps.leakskit.outputs.{name} }}}}"

    def test_runs_leakskit(self, action):
        assert action["runs"]["using"] == "composite"
        assert _run_step(action)["run"].strip() == "leakskit run"
