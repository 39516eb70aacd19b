from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from trialspace.config import ExperimentConfig, load_config
from trialspace.errors import ConfigError


def _make_config() -> dict[str, Any]:
    return {
        "metadata": {"name": "mlp-sweep", "description": "demo"},
        "exp_key": "mlp",
        "seed": 7,
        "samples": 3,
        "search_space": {
            "lr": {"name": "loguniform", "low": -7, "high": 0},
            "layers": {"name": "choice", "options": [1, 2, 3]},
        },
    }


class ExperimentConfigTests(unittest.TestCase):
    def test_valid_config_is_accepted(self) -> None:
        config = ExperimentConfig.model_validate(_make_config())

        self.assertEqual(config.metadata.name, "mlp-sweep")
        self.assertEqual(config.exp_key, "mlp")
        self.assertEqual(config.search_space["layers"]["options"], [1, 2, 3])

    def test_unknown_keys_are_rejected(self) -> None:
        data = _make_config()
        data["sampler"] = "tpe"
        with self.assertRaises(ValidationError):
            ExperimentConfig.model_validate(data)

    def test_samples_must_be_positive(self) -> None:
        data = _make_config()
        data["samples"] = 0
        with self.assertRaises(ValidationError):
            ExperimentConfig.model_validate(data)

    def test_search_space_is_required(self) -> None:
        data = _make_config()
        data["search_space"] = None
        with self.assertRaises(ValidationError):
            ExperimentConfig.model_validate(data)

    def test_blank_exp_key_is_rejected(self) -> None:
        data = _make_config()
        data["exp_key"] = "   "
        with self.assertRaises(ValidationError):
            ExperimentConfig.model_validate(data)


class LoadConfigTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _write(self, payload: Any) -> Path:
        path = self.root / "experiment.yaml"
        path.write_text(yaml.safe_dump(payload), encoding="utf-8")
        return path

    def test_round_trip_from_yaml(self) -> None:
        config = load_config(self._write(_make_config()))
        self.assertEqual(config.seed, 7)
        self.assertEqual(config.samples, 3)

    def test_missing_file(self) -> None:
        with self.assertRaisesRegex(ConfigError, "not found"):
            load_config(self.root / "missing.yaml")

    def test_non_mapping_root(self) -> None:
        with self.assertRaisesRegex(ConfigError, "mapping"):
            load_config(self._write([1, 2, 3]))

    def test_validation_errors_name_the_location(self) -> None:
        data = _make_config()
        del data["metadata"]
        with self.assertRaises(ConfigError) as ctx:
            load_config(self._write(data))
        self.assertIn("metadata", str(ctx.exception))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
