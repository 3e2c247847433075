import pytest
from cachetools import TTLCache
from app.analytics.engine import PredictionEngine
from app.config import Settings
from app.core.models import Outcome, Round
from app.history.store import HistoryStore
from app.services import PredictorService
from app.upstream import UpstreamError


class FakeClient:
    def __init__(self, *payloads):
        self.payloads = list(payloads)

    def fetch_latest(self):
        p = self.payloads.pop(0)
        if isinstance(p, Exception):
            raise p
        return p


def payload(n, kq="Tài", total=13, dice=(6, 4, 3)):
    return {"phien": f"#{n}", "ket_qua": kq, "tong_diem": total, "xuc_xac": list(dice)}


def service(*payloads, cache=None):
    cfg = Settings(service_id="@test", max_history_length=500)
    store = HistoryStore(cfg.max_history_length)
    return PredictorService(store, PredictionEngine(store), FakeClient(*payloads),
                            cache if cache is not None else TTLCache(maxsize=1, ttl=3600), cfg)


def test_first_round_response():
    out = service(payload(100)).refresh_and_predict()
    assert out == {
        'id': '@test',
        'phien_truoc': '#100',
        'ket_qua': 'Tài',
        'xuc_xac': [6, 4, 3],
        'tong': 13,
        'phien_sau': 101,
        'du_doan': 'Xỉu',
        'do_tin_cay': '30.00',
        'du_doan_vi': [11, 12, 13],
        'giai_thich': 'single round: reversal',
    }


def test_empty_response_when_payload_unusable():
    out = service({"error": "maintenance"}).refresh_and_predict()
    assert out['phien_truoc'] is None and out['xuc_xac'] == [] and out['phien_sau'] is None
    assert out['do_tin_cay'] == '10.00'
    assert 'du_doan_vi' not in out


def test_duplicate_round_ingested_once():
    svc = service(payload(1), payload(1, kq="Xỉu"), payload(2, kq="Xỉu", total=5, dice=(1, 2, 2)))
    for _ in range(3):
        out = svc.refresh_and_predict()
    assert len(svc.store) == 2
    assert out['phien_truoc'] == '#2' and out['ket_qua'] == 'Xỉu'


def test_history_mirrored_to_cache():
    cache = TTLCache(maxsize=1, ttl=3600)
    svc = service(payload(7), cache=cache)
    svc.refresh_and_predict()
    assert [d['session_id'] for d in cache.get('full_history')] == ['#7']


def test_cache_replaces_store():
    cache = TTLCache(maxsize=1, ttl=3600)
    svc = service(payload(51), cache=cache)
    svc.store.add_round(Round("#1", Outcome.LOW))
    cache['full_history'] = [Round("#50", Outcome.HIGH, 12, (4, 4, 4)).to_dict()]
    svc.refresh_and_predict()
    assert [r.session_id for r in svc.store.get_all()] == ['#50', '#51']


def test_upstream_failure_propagates():
    svc = service(payload(1), UpstreamError("boom"))
    svc.refresh_and_predict()
    with pytest.raises(UpstreamError):
        svc.refresh_and_predict()
    assert len(svc.store) == 1


def test_stats():
    svc = service(*[payload(i, kq="Xỉu", total=6) for i in range(1, 5)])
    for _ in range(4):
        svc.refresh_and_predict()
    st = svc.get_stats(10)
    assert st['low_count'] == 4 and st['high_count'] == 0
    assert st['current_streak'] == 4 and st['last_outcome'] == 'Xỉu'
    assert st['runs'] == [{'start': 0, 'end': 3, 'outcome': 'Xỉu', 'length': 4}]


def test_expired_cache_keeps_memory():
    now = [0.0]
    cache = TTLCache(maxsize=1, ttl=3600, timer=lambda: now[0])
    svc = service(payload(2, kq="Xỉu", total=6), cache=cache)
    svc.store.add_round(Round("#1", Outcome.HIGH))
    cache['full_history'] = [Round("#40", Outcome.HIGH).to_dict()]
    now[0] = 4000
    svc.refresh_and_predict()
    assert [r.session_id for r in svc.store.get_all()] == ['#1', '#2']


def test_own_mirror_not_reloaded():
    svc = service(payload(1), payload(2))
    svc.refresh_and_predict()
    calls = []
    svc.store.replace = calls.append
    svc.refresh_and_predict()
    assert calls == []
    assert [r.session_id for r in svc.store.get_all()] == ['#1', '#2']


def test_stats_history_length():
    svc = service(payload(1), payload(2))
    svc.refresh_and_predict()
    svc.refresh_and_predict()
    assert svc.get_stats(1)['history_length'] == 2
