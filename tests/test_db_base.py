import core.db.base as base


def test_get_conn_passes_connect_timeout(monkeypatch):
    seen = {}

    class _Conn:
        def close(self):
            pass

    def _connect(url, **kwargs):
        seen["url"] = url
        seen.update(kwargs)
        return _Conn()

    monkeypatch.setenv("DATABASE_URL", "postgresql://localhost/job_alerts")
    monkeypatch.setattr(base.psycopg, "connect", _connect)

    base.get_conn().close()

    assert seen["url"] == "postgresql://localhost/job_alerts"
    assert seen["connect_timeout"] == base.DB_CONNECT_TIMEOUT
    assert seen["row_factory"] is base.dict_row
