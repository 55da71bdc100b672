import copy
import json
import os
import shutil
import tempfile
import toml
import unittest
from click.testing import CliRunner
from droidplan import config
from droidplan.commands.config import config as config_command
from droidplan.errors import ConfigError
from tests.test_layers import SAMPLE_CONFIG

class TestConfig(unittest.TestCase):

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.config_path = os.path.join(self.test_dir, config.CONFIG_FILE)
        self.sample_config = copy.deepcopy(SAMPLE_CONFIG)
        config.save_config(self.sample_config, path=self.test_dir)
        self.runner = CliRunner()

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def _invoke(self, *args):
        return self.runner.invoke(config_command, list(args), obj={"path": self.test_dir})

    def test_load_config_not_found(self):
        """Loading a non-existent config returns an empty dict."""
        os.remove(self.config_path)
        self.assertEqual(config.load_config(path=self.test_dir), {})

    def test_save_and_load_config(self):
        loaded_config = config.load_config(path=self.test_dir)
        self.assertEqual(loaded_config, self.sample_config)
        with open(self.config_path, "r") as f:
            self.assertEqual(toml.load(f), self.sample_config)

    def test_load_malformed_config(self):
        with open(self.config_path, "w") as f:
            f.write("[toolchain\ncompile_target_version = ")
        self.assertEqual(config.load_config(path=self.test_dir), {})
        with self.assertRaises(ConfigError):
            config.load_config(path=self.test_dir, strict=True)

    def test_get_nested_value(self):
        result = self._invoke("get", "identity.effective_id")
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(result.stdout.strip(), "com.example.projectspendlytic")

    def test_get_plugin_by_index(self):
        result = self._invoke("get", "plugins.1.name")
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(result.stdout.strip(), "kotlin-android")

    def test_get_non_existent_value(self):
        result = self._invoke("get", "toolchain.nonexistent")
        self.assertEqual(result.exit_code, 0)
        self.assertIn("Error: Key 'toolchain.nonexistent' not found", result.output)

    def test_set_nested_value_is_typed(self):
        result = self._invoke("set", "toolchain.target_version", "34")
        self.assertEqual(result.exit_code, 0)
        loaded_config = config.load_config(path=self.test_dir)
        self.assertEqual(loaded_config["toolchain"]["target_version"], 34)

    def test_set_rejects_invalid_descriptor(self):
        result = self._invoke("set", "variants.release.minify", "true")
        self.assertEqual(result.exit_code, 0)
        self.assertIn("would make droidplan.toml invalid", result.output)
        loaded_config = config.load_config(path=self.test_dir)
        self.assertNotIn("minify", loaded_config["variants"]["release"])

    def test_unset_nested_value(self):
        result = self._invoke("unset", "identity.service_config")
        self.assertEqual(result.exit_code, 0)
        loaded_config = config.load_config(path=self.test_dir)
        self.assertNotIn("service_config", loaded_config["identity"])

    def test_unset_required_value_is_refused(self):
        self._invoke("unset", "toolchain.compile_target_version")
        loaded_config = config.load_config(path=self.test_dir)
        self.assertIn("compile_target_version", loaded_config["toolchain"])

    def test_list_config(self):
        result = self._invoke("list")
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(json.loads(result.stdout), self.sample_config)

    def test_view_without_config(self):
        os.remove(self.config_path)
        result = self._invoke("view")
        self.assertIn("Error: No droidplan.toml found.", result.output)

if __name__ == "__main__":
    unittest.main()
