import sys
import os
import unittest
import tempfile
from unittest.mock import patch
from io import StringIO

# Add the parent directory to sys.path to import the togglpy package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from togglpy.config import (Config, merge_configs, load_config, load_global_config, update_config,
                            LOCAL_CONFIG_NAME, GLOBAL_CONFIG_NAME)
from togglpy.errors import ConfigParseError, ConfigIoError
from togglpy.utils.dir_utils import is_within_home, iter_search_dirs, find_local_config, global_config_dir


def write_file(path, content):
    with open(path, 'w', encoding='utf-8') as f:
        f.write(content)


def read_file(path):
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


class TestConfigParsing(unittest.TestCase):
    """Test parsing and serializing KEY=VALUE config files."""

    def test_parse_known_keys(self):
        config = Config.from_text("API_TOKEN=abc123\nWORKSPACE_ID=42\nPROJECT_ID=7\n")
        self.assertEqual(config, Config(api_token="abc123", workspace_id=42, project_id=7))

    def test_unknown_keys_are_ignored(self):
        config = Config.from_text("COLOR=blue\nWORKSPACE_ID=1\n")
        self.assertEqual(config, Config(workspace_id=1))

    def test_empty_text_gives_empty_config(self):
        self.assertTrue(Config.from_text("").is_empty())

    def test_invalid_ids_are_fatal(self):
        test_cases = [
            ("WORKSPACE_ID=abc", "workspace_id"),
            ("WORKSPACE_ID=-3", "workspace_id"),
            ("PROJECT_ID=1.5", "project_id"),
            ("PROJECT_ID=", "project_id"),
            ("WORKSPACE_ID 123\n", "workspace_id"),
            ("WORKSPACE_ID: 5\n", "workspace_id"),
            ("PROJECT_ID='7\n", "project_id"),
        ]
        for text, field_name in test_cases:
            with self.subTest(text=text):
                with self.assertRaises(ConfigParseError) as ctx:
                    Config.from_text(text)
                self.assertIn(f"Could not parse {field_name}", str(ctx.exception))

    def test_unparsable_line_is_fatal(self):
        with self.assertRaises(ConfigParseError) as ctx:
            Config.from_text("garbage line here\nWORKSPACE_ID=1\n")
        self.assertIn("Could not parse line 1", str(ctx.exception))

    def test_comments_and_blank_lines_are_allowed(self):
        config = Config.from_text("# defaults for this repo\n\nWORKSPACE_ID=1\n")
        self.assertEqual(config, Config(workspace_id=1))

    def test_to_text_only_writes_set_fields(self):
        self.assertEqual(Config(workspace_id=5).to_text(), "WORKSPACE_ID=5")
        text = Config(api_token="tok", workspace_id=5, project_id=9).to_text()
        self.assertEqual(Config.from_text(text), Config(api_token="tok", workspace_id=5, project_id=9))


class TestConfigMerge(unittest.TestCase):
    """Test the per-field merge of local and global configs."""

    def test_local_value_wins(self):
        merged = merge_configs(Config(workspace_id=2), Config(workspace_id=1))
        self.assertEqual(merged.workspace_id, 2)

    def test_fields_fall_back_independently(self):
        local = Config(project_id=20)
        global_ = Config(api_token="tok", workspace_id=1, project_id=10)
        self.assertEqual(merge_configs(local, global_), Config(api_token="tok", workspace_id=1, project_id=20))

    def test_missing_layers(self):
        self.assertEqual(merge_configs(None, Config(workspace_id=1)), Config(workspace_id=1))
        self.assertEqual(merge_configs(Config(project_id=3), None), Config(project_id=3))
        self.assertTrue(merge_configs(None, None).is_empty())

    def test_update_ignores_unset_fields(self):
        config = Config(api_token="tok", workspace_id=1, project_id=2)
        config.update(Config(project_id=3))
        self.assertEqual(config, Config(api_token="tok", workspace_id=1, project_id=3))


class TestDirectoryWalk(unittest.TestCase):
    """Test the bounded upward search for a local config."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.root = os.path.realpath(self.tmp.name)
        self.home = os.path.join(self.root, "home")
        self.deep = os.path.join(self.home, "a", "b", "c")
        os.makedirs(self.deep)

    def tearDown(self):
        self.tmp.cleanup()

    def test_is_within_home(self):
        test_cases = [
            ("/home/user", True),
            ("/home/user/projects/x", True),
            ("/home/username", False),
            ("/home", False),
            ("/", False),
            ("/tmp/work", False),
        ]
        for path, expected in test_cases:
            with self.subTest(path=path):
                self.assertEqual(is_within_home(path, "/home/user"), expected)

    def test_iter_search_dirs_stops_at_home(self):
        dirs = list(iter_search_dirs(self.deep, self.home))
        self.assertEqual(dirs, [
            self.deep,
            os.path.join(self.home, "a", "b"),
            os.path.join(self.home, "a"),
            self.home,
        ])

    def test_iter_search_dirs_outside_home_is_empty(self):
        self.assertEqual(list(iter_search_dirs(self.root, self.home)), [])

    def test_finds_config_two_levels_up(self):
        config_path = os.path.join(self.home, "a", LOCAL_CONFIG_NAME)
        write_file(config_path, "WORKSPACE_ID=2\n")
        self.assertEqual(find_local_config(LOCAL_CONFIG_NAME, self.deep, self.home), config_path)

    def test_nearest_config_wins(self):
        write_file(os.path.join(self.home, "a", LOCAL_CONFIG_NAME), "WORKSPACE_ID=2\n")
        nearer = os.path.join(self.home, "a", "b", LOCAL_CONFIG_NAME)
        write_file(nearer, "WORKSPACE_ID=3\n")
        self.assertEqual(find_local_config(LOCAL_CONFIG_NAME, self.deep, self.home), nearer)

    def test_no_config_found(self):
        self.assertIsNone(find_local_config(LOCAL_CONFIG_NAME, self.deep, self.home))

    def test_does_not_look_above_home(self):
        write_file(os.path.join(self.root, LOCAL_CONFIG_NAME), "WORKSPACE_ID=9\n")
        self.assertIsNone(find_local_config(LOCAL_CONFIG_NAME, self.deep, self.home))

    def test_outside_home_skips_search(self):
        outside = os.path.join(self.root, "work")
        os.makedirs(outside)
        write_file(os.path.join(outside, LOCAL_CONFIG_NAME), "WORKSPACE_ID=9\n")
        with patch('togglpy.utils.dir_utils.os.path.isfile') as mock_isfile:
            self.assertIsNone(find_local_config(LOCAL_CONFIG_NAME, outside, self.home))
            mock_isfile.assert_not_called()

    def test_global_config_dir_override(self):
        target = os.path.join(self.root, "cfg", "togglpy")
        with patch.dict('os.environ', {'TOGGLPY_CONFIG_DIR': target}):
            self.assertEqual(global_config_dir(), target)
        self.assertTrue(os.path.isdir(target))


class TestConfigResolution(unittest.TestCase):
    """Test loading and updating the layered config files."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        root = os.path.realpath(self.tmp.name)
        self.config_dir = os.path.join(root, "config")
        self.home = os.path.join(root, "home")
        self.project_dir = os.path.join(self.home, "a")
        self.cwd = os.path.join(self.project_dir, "b", "c")
        os.makedirs(self.config_dir)
        os.makedirs(self.cwd)
        self.global_path = os.path.join(self.config_dir, GLOBAL_CONFIG_NAME)

    def tearDown(self):
        self.tmp.cleanup()

    def load(self):
        return load_config(self.config_dir, self.cwd, self.home)

    def test_nothing_configured(self):
        self.assertTrue(self.load().is_empty())

    def test_local_overrides_global_per_field(self):
        write_file(self.global_path, "API_TOKEN=tok\nWORKSPACE_ID=1\nPROJECT_ID=10\n")
        write_file(os.path.join(self.project_dir, LOCAL_CONFIG_NAME), "WORKSPACE_ID=2\n")
        self.assertEqual(self.load(), Config(api_token="tok", workspace_id=2, project_id=10))

    def test_local_config_without_global_file(self):
        write_file(os.path.join(self.project_dir, LOCAL_CONFIG_NAME), "PROJECT_ID=4\n")
        self.assertEqual(self.load(), Config(project_id=4))

    def test_local_token_is_accepted_on_read(self):
        write_file(self.global_path, "API_TOKEN=global\n")
        write_file(os.path.join(self.project_dir, LOCAL_CONFIG_NAME), "API_TOKEN=local\n")
        self.assertEqual(self.load().api_token, "local")

    def test_malformed_global_config_is_fatal(self):
        write_file(self.global_path, "WORKSPACE_ID=one\n")
        with self.assertRaises(ConfigParseError) as ctx:
            self.load()
        self.assertIn("workspace_id", str(ctx.exception))

    def test_global_update_keeps_other_fields(self):
        write_file(self.global_path, "API_TOKEN=tok\nWORKSPACE_ID=1\n")
        update_config(True, Config(project_id=3), self.config_dir, self.cwd, self.home)
        self.assertEqual(load_global_config(self.config_dir), Config(api_token="tok", workspace_id=1, project_id=3))

    def test_local_update_writes_current_directory_only(self):
        walked_up = os.path.join(self.project_dir, LOCAL_CONFIG_NAME)
        write_file(walked_up, "WORKSPACE_ID=2\n")
        update_config(False, Config(project_id=5), self.config_dir, self.cwd, self.home)

        self.assertEqual(read_file(walked_up), "WORKSPACE_ID=2\n")
        written = read_file(os.path.join(self.cwd, LOCAL_CONFIG_NAME))
        self.assertEqual(Config.from_text(written), Config(project_id=5))
        self.assertEqual(self.load(), Config(project_id=5))

    @patch('sys.stdout', new_callable=StringIO)
    def test_local_token_update_is_rejected_with_warning(self, mock_stdout):
        saved = update_config(False, Config(api_token="secret", workspace_id=8), self.config_dir, self.cwd, self.home)

        self.assertIn("[WARNING] API token can only be set globally", mock_stdout.getvalue())
        self.assertEqual(saved, Config(workspace_id=8))
        written = read_file(os.path.join(self.cwd, LOCAL_CONFIG_NAME))
        self.assertNotIn("API_TOKEN", written)
        self.assertIsNone(load_global_config(self.config_dir))

    def test_local_update_outside_home_fails(self):
        outside = os.path.dirname(self.home)
        with self.assertRaises(ConfigIoError):
            update_config(False, Config(project_id=5), self.config_dir, outside, self.home)

    @patch('sys.stdout', new_callable=StringIO)
    def test_token_only_local_update_writes_nothing(self, mock_stdout):
        saved = update_config(False, Config(api_token="secret"), self.config_dir, self.cwd, self.home)

        self.assertTrue(saved.is_empty())
        self.assertIn("[WARNING]", mock_stdout.getvalue())
        self.assertFalse(os.path.exists(os.path.join(self.cwd, LOCAL_CONFIG_NAME)))

    def test_unreadable_global_config(self):
        os.makedirs(self.global_path)
        with self.assertRaises(ConfigIoError) as ctx:
            self.load()
        self.assertIsInstance(ctx.exception.__cause__, OSError)

        with self.assertRaises(ConfigIoError) as ctx:
            update_config(True, Config(project_id=3), self.config_dir, self.cwd, self.home)
        self.assertIsInstance(ctx.exception.__cause__, OSError)

    def test_unwritable_local_config(self):
        os.makedirs(os.path.join(self.cwd, LOCAL_CONFIG_NAME, "nested"))
        with patch('togglpy.config.load_current_dir_config', return_value=None):
            with self.assertRaises(ConfigIoError) as ctx:
                update_config(False, Config(project_id=5), self.config_dir, self.cwd, self.home)
        self.assertIsInstance(ctx.exception.__cause__, OSError)


if __name__ == '__main__':
    unittest.main()
