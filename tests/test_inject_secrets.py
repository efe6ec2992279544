import inject_secrets

CONFIG_SOURCE = 'API_KEY = "__NUTRI_AI_API_KEY__"\nCORRECT_PIN = "__NUTRI_AI_PIN__"\n'


def _config_file(tmp_path):
    path = tmp_path / "config.py"
    path.write_text(CONFIG_SOURCE, encoding="utf-8")
    return path


def _load(path):
    namespace = {}
    exec(compile(path.read_text(encoding="utf-8"), str(path), "exec"), namespace)
    return namespace


def test_injects_both_secrets(tmp_path, capsys):
    path = _config_file(tmp_path)
    env = {"NUTRI_AI_API_KEY": "sk-secret", "NUTRI_AI_PIN": "0042"}

    assert inject_secrets.main(environ=env, path=str(path)) == 0

    namespace = _load(path)
    assert namespace["API_KEY"] == "sk-secret"
    assert namespace["CORRECT_PIN"] == "0042"
    assert "__NUTRI_AI" not in path.read_text(encoding="utf-8")
    assert "sk-secret" not in capsys.readouterr().out


def test_quotes_and_backslashes_stay_inside_the_literal(tmp_path):
    path = _config_file(tmp_path)
    key = 'ab"c\\'
    env = {"NUTRI_AI_API_KEY": key, "NUTRI_AI_PIN": "1234"}

    assert inject_secrets.main(environ=env, path=str(path)) == 0

    assert _load(path)["API_KEY"] == key


def test_secret_cannot_inject_code(tmp_path):
    path = _config_file(tmp_path)
    key = '"; INJECTED = True; x = "'
    env = {"NUTRI_AI_API_KEY": key, "NUTRI_AI_PIN": "1234"}

    assert inject_secrets.main(environ=env, path=str(path)) == 0

    namespace = _load(path)
    assert namespace["API_KEY"] == key
    assert "INJECTED" not in namespace


def test_missing_secret_fails(tmp_path):
    path = _config_file(tmp_path)
    assert inject_secrets.main(environ={"NUTRI_AI_PIN": "1234"}, path=str(path)) == 1
    assert path.read_text(encoding="utf-8") == CONFIG_SOURCE


def test_bad_pin_fails(tmp_path):
    path = _config_file(tmp_path)
    env = {"NUTRI_AI_API_KEY": "sk-secret", "NUTRI_AI_PIN": "12a4"}
    assert inject_secrets.main(environ=env, path=str(path)) == 1
    assert path.read_text(encoding="utf-8") == CONFIG_SOURCE
