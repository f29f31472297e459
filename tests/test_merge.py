from __future__ import annotations

from webpack_tasks.merge import deep_merge, merge_configs


def test_scalar_override_wins() -> None:
    merged = deep_merge({"mode": "development", "devtool": "eval"}, {"mode": "production"})
    assert merged == {"mode": "production", "devtool": "eval"}


def test_nested_mappings_merge_key_by_key() -> None:
    base = {"output": {"path": "dist", "filename": "[name].js"}}
    merged = deep_merge(base, {"output": {"filename": "[name].[contenthash].js"}})
    assert merged == {"output": {"path": "dist", "filename": "[name].[contenthash].js"}}


def test_lists_concatenate() -> None:
    merged = deep_merge({"loaders": ["babel"]}, {"loaders": ["ts"]})
    assert merged == {"loaders": ["babel", "ts"]}


def test_merging_with_itself_keeps_scalars() -> None:
    override = {"mode": "production", "output": {"path": "dist"}}
    assert deep_merge(override, override) == override


def test_inputs_are_not_mutated() -> None:
    base = {"module": {"rules": [{"test": "js"}]}}
    override = {"module": {"rules": [{"test": "css"}]}}
    merged = deep_merge(base, override)

    merged["module"]["rules"].append({"test": "svg"})

    assert base == {"module": {"rules": [{"test": "js"}]}}
    assert override == {"module": {"rules": [{"test": "css"}]}}


def test_merge_configs_one_entry_per_target_and_drops_config_key() -> None:
    configs = [{"name": "client"}, {"name": "server"}]
    merged = merge_configs(configs, {"config": "webpack.config.py", "devtool": False})

    assert merged == [
        {"name": "client", "devtool": False},
        {"name": "server", "devtool": False},
    ]
    assert all("config" not in entry for entry in merged)
