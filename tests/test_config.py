# tests/test_config.py
import os
import shutil
import sys
import tempfile
import unittest

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from spinwheel.domain.wheel.factories.wheel_factory import WheelFactory
from spinwheel.infrastructure.config.loaders.yaml_loader import (
    FileNotFoundConfigError, SchemaValidationError, YamlConfigLoader, YamlParseError
)
from spinwheel.infrastructure.config.validators.schema_validator import SchemaValidator

PACKAGE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'spinwheel'))
WHEELS_DIR = os.path.join(PACKAGE_DIR, 'application', 'config', 'wheels')
WHEEL_SCHEMA = os.path.join(PACKAGE_DIR, 'application', 'config', 'schemas', 'wheel_schema.json')


class TestYamlConfigLoader(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.loader = YamlConfigLoader(schema_validator=SchemaValidator())

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def _write(self, name, content):
        path = os.path.join(self.temp_dir, name)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)
        return path

    def test_load_valid_wheel(self):
        path = self._write("w.yaml", "title: T\noptions: [a, {label: b, weight: 2}]\n")
        config = self.loader.load_file(path, WHEEL_SCHEMA)
        self.assertEqual(config["options"][1]["weight"], 2)

    def test_schema_violation(self):
        path = self._write("w.yaml", "title: T\noptions: [{label: a, weight: 0}, b]\n")

        with self.assertRaises(SchemaValidationError) as ctx:
            self.loader.load_file(path, WHEEL_SCHEMA)
        self.assertTrue(ctx.exception.errors)

        # Lenient mode hands back the unvalidated config
        config = self.loader.set_strict_mode(False).load_file(path, WHEEL_SCHEMA)
        self.assertEqual(config["title"], "T")

    def test_missing_file(self):
        missing = os.path.join(self.temp_dir, "nope.yaml")
        with self.assertRaises(FileNotFoundConfigError):
            self.loader.load_file(missing)

        self.loader.set_strict_mode(False)
        self.assertEqual(self.loader.load_file(missing, default_config={"x": 1}), {"x": 1})

    def test_parse_error(self):
        path = self._write("broken.yaml", "title: [unclosed\n")
        with self.assertRaises(YamlParseError):
            self.loader.load_file(path)

    def test_empty_file(self):
        path = self._write("empty.yaml", "")
        self.assertEqual(self.loader.load_file(path), {})

    def test_load_directory(self):
        self._write("b.yaml", "title: B\noptions: [x, y]\n")
        self._write("a.yml", "title: A\noptions: [x, y]\n")
        self._write("bad.yaml", "title: Bad\noptions: [x]\n")
        self._write("notes.txt", "ignored")

        with self.assertRaises(SchemaValidationError):
            self.loader.load_directory(self.temp_dir, WHEEL_SCHEMA)

        configs = self.loader.load_directory(self.temp_dir, WHEEL_SCHEMA, ignore_errors=True)
        self.assertEqual(list(configs), ["a", "b"])

    def test_find_file_by_stem(self):
        path = self._write("coin.yml", "title: Coin\noptions: [Heads, Tails]\n")

        self.assertEqual(self.loader.find_file(self.temp_dir, "coin"), path)
        self.assertIsNone(self.loader.find_file(self.temp_dir, "dice"))

    def test_schema_is_read_once(self):
        self._write("a.yaml", "title: A\noptions: [x, y]\n")
        self._write("b.yaml", "title: B\noptions: [x, y]\n")
        self.loader.load_directory(self.temp_dir, WHEEL_SCHEMA)

        self.assertEqual(list(self.loader._schemas), [WHEEL_SCHEMA])

    def test_missing_directory(self):
        missing = os.path.join(self.temp_dir, "nowhere")
        with self.assertRaises(FileNotFoundConfigError):
            self.loader.load_directory(missing)
        self.assertEqual(self.loader.set_strict_mode(False).load_directory(missing), {})


class TestSchemaValidator(unittest.TestCase):

    def setUp(self):
        self.validator = SchemaValidator()
        self.schema = {
            "type": "object",
            "properties": {
                "config": {
                    "type": "object",
                    "properties": {"duration": {"type": "string", "default": "medium"}},
                    "default": {},
                },
                "options": {
                    "type": "array",
                    "items": {"type": "object", "properties": {"weight": {"type": "number", "default": 1}}},
                },
            },
        }

    def test_validate(self):
        self.assertEqual(self.validator.validate({"options": []}, self.schema), (True, []))

        is_valid, errors = self.validator.validate({"options": "many"}, self.schema)
        self.assertFalse(is_valid)
        self.assertIn("At options", errors[0])

    def test_invalid_schema(self):
        is_valid, errors = self.validator.validate({}, {"type": "no-such-type"})
        self.assertFalse(is_valid)
        self.assertTrue(errors[0].startswith("Schema error"))

    def test_defaults_fill_nested_values(self):
        config = {"options": [{"label": "a"}, {"label": "b", "weight": 3}]}

        is_valid, _, updated = self.validator.validate_with_defaults(config, self.schema)

        self.assertTrue(is_valid)
        self.assertEqual(updated["config"], {"duration": "medium"})
        self.assertEqual([o["weight"] for o in updated["options"]], [1, 3])
        self.assertNotIn("config", config)


class TestShippedWheels(unittest.TestCase):

    def test_every_shipped_wheel_loads(self):
        loader = YamlConfigLoader(schema_validator=SchemaValidator())
        configs = loader.load_directory(WHEELS_DIR, WHEEL_SCHEMA)
        wheels = WheelFactory().create_wheels(configs)

        self.assertIn("preset-guitar-notes", wheels)
        self.assertEqual(len(wheels["preset-guitar-notes"]), 7)
        self.assertEqual(len(wheels), len(configs))


if __name__ == "__main__":
    unittest.main()
