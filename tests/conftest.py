"""Shared payload builders for contract tests."""

from __future__ import annotations

from typing import Any, Callable, Dict, List

import pytest

import comfywire.config as config_module


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch, tmp_path):
    """Keep a developer's comfywire.yaml or env from leaking into tests."""
    monkeypatch.delenv("COMFYWIRE_LOG_LEVEL", raising=False)
    monkeypatch.delenv("COMFYWIRE_CHECK_OUTPUT_ARITY", raising=False)
    monkeypatch.setenv("COMFYWIRE_CONFIG", str(tmp_path / "missing.yaml"))
    monkeypatch.setattr(config_module, "_config_instance", None)


@pytest.fixture
def make_prompt() -> Callable[..., List[Any]]:
    def _make(prompt_id: str = "p1", queue_index: int = 0) -> List[Any]:
        return [
            queue_index,
            prompt_id,
            {
                "3": {
                    "inputs": {"seed": 42, "model": ["4", 0]},
                    "class_type": "KSampler",
                },
                "9": {
                    "inputs": {"images": ["8", 0], "filename_prefix": "out"},
                    "class_type": "SaveImage",
                },
            },
            {
                "extra_pnginfo": {"workflow": {"nodes": [], "links": [], "version": 0.4}},
                "client_id": "client-1",
            },
            ["9"],
        ]

    return _make


@pytest.fixture
def make_node_def() -> Callable[..., Dict[str, Any]]:
    def _make(name: str = "KSampler", **overrides: Any) -> Dict[str, Any]:
        node_def = {
            "name": name,
            "display_name": name,
            "description": "",
            "category": "sampling",
            "python_module": "nodes",
            "input": {
                "required": {
                    "model": ["MODEL"],
                    "seed": ["INT", {"default": 0, "min": 0, "max": 2**64 - 1}],
                    "cfg": ["FLOAT", {"default": 8.0, "step": 0.1, "round": 0.01}],
                    "sampler_name": [["euler", "dpmpp_2m"]],
                },
                "hidden": {"unique_id": "UNIQUE_ID"},
            },
            "output": ["LATENT"],
            "output_is_list": [False],
            "output_name": ["LATENT"],
            "output_node": False,
        }
        node_def.update(overrides)
        return node_def

    return _make


@pytest.fixture
def execution_error_body() -> Dict[str, Any]:
    return {
        "prompt_id": "p1",
        "timestamp": 1000,
        "node_id": "5",
        "node_type": "KSampler",
        "executed": ["1", "2"],
        "exception_message": "OOM",
        "exception_type": "RuntimeError",
        "traceback": ["..."],
        "current_inputs": {},
        "current_outputs": {},
    }
