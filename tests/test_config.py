"""Tests for configuration loading."""

import logging
import os
import shutil
import sys
import tempfile
import unittest
from pathlib import Path

import pytest
import yaml

# Add parent directory to path
sys.path.append(str(Path(__file__).resolve().parent.parent))

from raytracer import approx, canvas, config
from raytracer.canvas import Canvas
from raytracer.tuples import color


class TestConfig(unittest.TestCase):
    """Test YAML configuration loading and validation."""

    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmp_dir)

    def _write(self, data) -> str:
        path = os.path.join(self.tmp_dir, "config.yaml")
        with open(path, "w") as f:
            yaml.safe_dump(data, f)
        return path

    def test_default_config(self):
        cfg = config.load_config()
        self.assertEqual(cfg["tolerance"]["ulps"], 2)
        self.assertEqual(cfg["ppm"]["max_color_value"], 255)
        self.assertEqual(cfg["logging"]["level"], "INFO")

    def test_partial_file_is_merged_with_defaults(self):
        path = self._write({"ppm": {"max_color_value": 15}})
        cfg = config.load_config(path)
        self.assertEqual(cfg["ppm"]["max_color_value"], 15)
        self.assertEqual(cfg["tolerance"]["ulps"], 2)

    def test_defaults_are_not_mutated(self):
        path = self._write({"tolerance": {"ulps": 4}})
        config.load_config(path)
        self.assertEqual(config.DEFAULT_CONFIG["tolerance"]["ulps"], 2)

    def test_empty_file_gives_defaults(self):
        path = os.path.join(self.tmp_dir, "empty.yaml")
        Path(path).write_text("")
        self.assertEqual(config.load_config(path), config.DEFAULT_CONFIG)

    def test_missing_explicit_file_raises(self):
        with self.assertRaises(FileNotFoundError):
            config.load_config(os.path.join(self.tmp_dir, "missing.yaml"))

    def test_invalid_values_raise(self):
        with pytest.raises(ValueError, match="ulps"):
            config.load_config(self._write({"tolerance": {"ulps": -1}}))
        with pytest.raises(ValueError, match="max_color_value"):
            config.load_config(self._write({"ppm": {"max_color_value": 70000}}))
        with pytest.raises(ValueError, match="logging.level"):
            config.load_config(self._write({"logging": {"level": "LOUD"}}))

    def test_non_mapping_raises(self):
        with self.assertRaises(ValueError):
            config.load_config(self._write([1, 2, 3]))

    def test_blank_section_raises(self):
        path = os.path.join(self.tmp_dir, "blank.yaml")
        Path(path).write_text("tolerance:\n")
        with pytest.raises(ValueError, match="tolerance"):
            config.load_config(path)

    def test_scalar_section_raises(self):
        with pytest.raises(ValueError, match="ppm"):
            config.load_config(self._write({"ppm": 5}))

    def test_defaults_follow_library_constants(self):
        self.assertEqual(config.DEFAULT_CONFIG["tolerance"]["ulps"], approx.DEFAULT_ULPS)
        self.assertEqual(
            config.DEFAULT_CONFIG["ppm"]["max_color_value"], canvas.MAX_COLOR_VALUE
        )

    def test_config_drives_serialization(self):
        cfg = config.load_config(self._write({"ppm": {"max_color_value": 15}}))
        c = Canvas(1, 1)
        c.write_pixel_at(0, 0, color(1.0, 0.5, 0.0))
        ppm = c.to_ppm(max_color_value=cfg["ppm"]["max_color_value"])
        self.assertEqual(ppm, "P3\n1 1\n15\n15 8 0 \n")

    def test_config_drives_tolerance(self):
        cfg = config.load_config(self._write({"tolerance": {"ulps": 0}}))
        a = color(0.1, 0.2, 0.3)
        b = color(0.1, 0.2, 0.3) * 1.0000001
        self.assertFalse(a.approx_eq(b, ulps=cfg["tolerance"]["ulps"]))

    def test_setup_logging(self):
        root = logging.getLogger()
        saved = root.handlers[:]
        saved_level = root.level
        root.handlers = []
        try:
            config.setup_logging({"logging": {"level": "debug"}})
            self.assertEqual(root.level, logging.DEBUG)
            self.assertEqual(root.handlers[0].formatter._fmt, config.LOG_FORMAT)
        finally:
            root.handlers = saved
            root.setLevel(saved_level)


if __name__ == "__main__":
    unittest.main()
