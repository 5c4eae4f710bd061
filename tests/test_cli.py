"""
CLI commands: tree and implementations.
"""

import pytest
from click.testing import CliRunner

from instantiator import __version__
from instantiator.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


def invoke(runner, *args):
    return runner.invoke(cli, list(args), obj={})


class TestTreeCommand:

    def test_tree(self, runner):
        result = invoke(runner, "tree", "testmodel.graph:Root")

        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == [
            "Root",
            "├── a: ServiceA",
            "│   └── repository: Repository",
            "└── b: ServiceB",
            "    └── repository: Repository (shared)",
        ]

    def test_tree_with_missing_implementation(self, runner):
        result = invoke(runner, "tree", "testmodel.noimpl.impl:StartingServiceWithInterfaceWithNoImplementation")

        assert result.exit_code == 0, result.output
        assert "bean: (unset)" in result.output

    def test_interface_target(self, runner):
        result = invoke(runner, "tree", "testmodel.inject:ServiceBean")

        assert result.exit_code == 1
        assert "Cannot obtain an instance of interface" in result.output

    def test_ambiguous_graph(self, runner):
        result = invoke(
            runner,
            "tree",
            "testmodel.twoimpl.impl:StartingServiceWithInterfaceWithTwoImplementations",
        )

        assert result.exit_code == 1
        assert "More than one implementation" in result.output

    def test_unconstructible_target(self, runner):
        result = invoke(runner, "tree", "testmodel.failing:NeedsArgument")

        assert result.exit_code == 1
        assert "could not be constructed" in result.output

    def test_bad_import_path(self, runner):
        result = invoke(runner, "tree", "testmodel.graph:Nope")

        assert result.exit_code == 1
        assert "has no attribute" in result.output

    def test_custom_markers_from_config(self, runner, tmp_path):
        config = tmp_path / "instantiator.yaml"
        config.write_text("markers:\n  - testmodel.customannotation:MyInjectionAnnotation\n")

        result = invoke(
            runner,
            "--config", str(config),
            "tree", "testmodel.customannotation:StartingServiceWithCustomAnnotation",
        )

        assert result.exit_code == 0, result.output
        assert "bean: ServiceBeanImpl" in result.output


class TestImplementationsCommand:

    def test_implementations(self, runner):
        result = invoke(runner, "implementations", "testmodel.twoimpl:HaveTwoImplementationsBean")

        assert result.exit_code == 0, result.output
        lines = [line.strip() for line in result.output.splitlines()]
        assert lines == [
            "• testmodel.twoimpl.impl.Implementation1",
            "• testmodel.twoimpl.impl.Implementation2",
        ]

    def test_no_implementations(self, runner):
        result = invoke(runner, "implementations", "testmodel.noimpl:HaveNoImplementation")

        assert result.exit_code == 0
        assert "No implementations of testmodel.noimpl.HaveNoImplementation" in result.output

    def test_package_option(self, runner):
        result = invoke(runner, "--package", "testmodel.graph", "implementations", "testmodel.inject:DaoBean")

        assert result.exit_code == 0
        assert "No implementations" in result.output

    def test_concrete_target(self, runner):
        result = invoke(runner, "implementations", "testmodel.graph:Repository")

        assert result.exit_code == 1
        assert "is not an interface" in result.output


def test_version(runner):
    result = invoke(runner, "--version")

    assert result.exit_code == 0
    assert __version__ in result.output
