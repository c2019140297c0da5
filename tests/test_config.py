import os

from kelp import config

SAMPLE = os.path.join(os.path.dirname(__file__), os.pardir, "config", "kelp.conf")


def test_missing_file_gives_defaults(tmp_path):
    settings = config.load_config(str(tmp_path / "none.conf"))
    assert settings == config.Config()
    assert settings.tab_stop == 8
    assert settings.quit_times == 3
    assert settings.message_timeout == 5


def test_sample_config_matches_defaults():
    assert config.load_config(SAMPLE) == config.Config()


def test_values_are_read(tmp_path):
    path = tmp_path / "kelp.conf"
    path.write_text("# comment\n\ntab_stop = 4\nquit_times=2\nlog_file=/tmp/k.log\n")
    settings = config.load_config(str(path))
    assert settings.tab_stop == 4
    assert settings.quit_times == 2
    assert settings.log_file == "/tmp/k.log"


def test_bad_lines_are_skipped(tmp_path):
    path = tmp_path / "kelp.conf"
    path.write_text("tab_stop=wide\nquit_times=0\ncolour=red\nnonsense\nmessage_timeout=9\n")
    settings = config.load_config(str(path))
    assert settings.tab_stop == 8
    assert settings.quit_times == 3
    assert settings.message_timeout == 9


def test_env_var_names_the_file(tmp_path, monkeypatch):
    path = tmp_path / "custom.conf"
    path.write_text("tab_stop=2\n")
    monkeypatch.setenv("KELP_CONFIG", str(path))
    assert config.load_config().tab_stop == 2
