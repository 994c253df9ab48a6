from bulk_lister.rate_limit.limiter import BatchPacer, get_pacer
from bulk_lister.settings import load_settings


def test_yaml_values_are_loaded(tmp_path, monkeypatch):
    for env in ("FACEBOOK_APP_ID", "BULK_LISTER_DB", "LOG_LEVEL"):
        monkeypatch.delenv(env, raising=False)
    cfg = tmp_path / "lister.yaml"
    cfg.write_text(
        "catalog:\n  max_items_per_batch: 100\n  batch_interval_sec: 2\n"
        "facebook:\n  app_id: '111'\n"
    )
    s = load_settings(cfg)
    assert s.catalog.max_items_per_batch == 100
    assert s.catalog.max_batch_bytes == 30 * 1024 * 1024
    assert s.facebook.app_id == "111"
    assert s.facebook.api_version == "v24.0"


def test_environment_overrides_file(tmp_path, monkeypatch):
    cfg = tmp_path / "lister.yaml"
    cfg.write_text("facebook:\n  app_id: '111'\nstorage:\n  path: a.db\n")
    monkeypatch.setenv("FACEBOOK_APP_ID", "222")
    monkeypatch.setenv("BULK_LISTER_DB", str(tmp_path / "b.db"))
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    s = load_settings(cfg)
    assert s.facebook.app_id == "222"
    assert s.storage.path == str(tmp_path / "b.db")
    assert s.log_level == "DEBUG"


def test_missing_file_gives_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("FACEBOOK_APP_ID", raising=False)
    s = load_settings(tmp_path / "nope.yaml")
    assert s.catalog.batch_interval_sec == 18
    assert s.facebook.app_id == ""


def test_pacer_waits_between_calls_only():
    waits = []
    pacer = BatchPacer(5, sleep=waits.append)
    for _ in range(3):
        with pacer():
            pass
    assert waits == [5, 5]
    assert pacer.calls == 3


def test_pacer_from_settings(tmp_path, monkeypatch):
    cfg = tmp_path / "lister.yaml"
    cfg.write_text("catalog:\n  batch_interval_sec: 7\n")
    waits = []
    pacer = get_pacer(load_settings(cfg), sleep=waits.append)
    with pacer():
        pass
    with pacer():
        pass
    assert waits == [7]
