"""Behavioural tests for environment overrides and tree persistence."""
# ruff: noqa: D103

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest
from pytest_bdd import given, parsers, scenario, then, when

from k8s_tester.config import (
    Config,
    ConfigError,
    ConfigTree,
    TypeCoercionError,
    UnknownFieldError,
)
from k8s_tester.config.persistence import encode


class StepContext(typ.TypedDict, total=False):
    """State shared between BDD steps in this module."""

    tree: ConfigTree | None
    environ: dict[str, str]
    config_file: Path
    error: ConfigError


@scenario(
    "../config_environment.feature",
    "Cluster name comes from the environment",
)
def test_cluster_name_override() -> None:
    """Root fields are overridden from K8S_TESTER_ variables."""


@scenario(
    "../config_environment.feature",
    "Malformed add-on integer is rejected",
)
def test_addon_coercion_error() -> None:
    """Malformed add-on values abort the override pass."""


@scenario(
    "../config_environment.feature",
    "Unknown keys in a configuration file are rejected",
)
def test_unknown_field_load() -> None:
    """Strict decoding rejects unknown keys."""


@scenario(
    "../config_environment.feature",
    "Saving resolves a relative config path",
)
def test_relative_config_path_save() -> None:
    """Saving makes config_path absolute."""


@pytest.fixture
def context(clean_env: pytest.MonkeyPatch) -> StepContext:
    del clean_env
    return {"environ": {}}


@given("a default configuration tree")
def default_tree(context: StepContext) -> None:
    context["tree"] = ConfigTree.build({"K8S_TESTER_CLUSTER_NAME": "bdd-cluster"})


@given(parsers.parse('the environment variable "{name}" is "{value}"'))
def environment_variable(context: StepContext, name: str, value: str) -> None:
    context["environ"][name] = value


@given(parsers.parse('a configuration file with the extra key "{key}"'))
def config_file_with_extra_key(context: StepContext, tmp_path: Path, key: str) -> None:
    path = tmp_path / "cfg.yaml"
    path.write_bytes(encode(Config(cluster_name="x")) + f"{key}: true\n".encode())
    context["config_file"] = path


@given(parsers.parse('the config path is "{path}" relative to the working directory'))
def relative_config_path(
    context: StepContext,
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    path: str,
) -> None:
    monkeypatch.chdir(tmp_path)
    tree = context["tree"]
    assert tree is not None
    with tree.locked() as config:
        config.config_path = path


@when("environment overrides are applied")
def apply_overrides(context: StepContext) -> None:
    tree = context["tree"]
    assert tree is not None
    try:
        tree.apply_all_overrides(context["environ"])
    except ConfigError as exc:
        context["error"] = exc


@when("the configuration file is loaded")
def load_config_file(context: StepContext) -> None:
    context["tree"] = None
    try:
        context["tree"] = ConfigTree.load(context["config_file"])
    except ConfigError as exc:
        context["error"] = exc


@when("the configuration tree is saved")
def save_tree(context: StepContext) -> None:
    tree = context["tree"]
    assert tree is not None
    tree.save()


@then(parsers.parse('the cluster name is "{name}"'))
def cluster_name_is(context: StepContext, name: str) -> None:
    assert "error" not in context, f"Unexpected error: {context.get('error')}"
    tree = context["tree"]
    assert tree is not None
    assert tree.cluster_name == name


@then(parsers.parse('a type coercion error names "{env_name}"'))
def coercion_error_names(context: StepContext, env_name: str) -> None:
    error = context.get("error")
    assert isinstance(error, TypeCoercionError), f"Expected coercion error: {error!r}"
    assert error.env_name == env_name
    assert env_name in str(error)


@then(parsers.parse('loading fails with an unknown field error for "{key}"'))
def unknown_field_error(context: StepContext, key: str) -> None:
    error = context.get("error")
    assert isinstance(error, UnknownFieldError), f"Expected unknown field: {error!r}"
    assert error.field_name == key


@then("no configuration tree is returned")
def no_tree_returned(context: StepContext) -> None:
    assert context["tree"] is None


@then("the config path is absolute")
def config_path_is_absolute(context: StepContext) -> None:
    tree = context["tree"]
    assert tree is not None
    assert Path(tree.config_path).is_absolute()


@then("the configuration file exists at the config path")
def config_file_exists(context: StepContext) -> None:
    tree = context["tree"]
    assert tree is not None
    assert Path(tree.config_path).is_file()
