import json

from swatch_config import ConfigManager, default_config_path


def test_missing_config_is_empty(tmp_path):
    assert ConfigManager(str(tmp_path / "none.json")).load_config() == {}


def test_corrupt_config_is_empty(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")
    assert ConfigManager(str(path)).load_config() == {}


def test_save_and_update(tmp_path):
    path = tmp_path / "config.json"
    manager = ConfigManager(str(path))
    manager.save_config({"default_path": "/palettes"})
    manager.update(output_dir="/out")
    assert json.loads(path.read_text()) == {"default_path": "/palettes", "output_dir": "/out"}


def test_default_path_uses_pref_dir(monkeypatch, tmp_path):
    monkeypatch.setenv("ASE_SWATCH_PREF_DIR", str(tmp_path))
    assert default_config_path() == str(tmp_path / "ase_swatch_config.json")
